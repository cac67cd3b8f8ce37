from typing import Tuple
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")
INVALID_URL_MESSAGE = "Invalid URL format. Please include http:// or https://"


def validate_url(url: str) -> Tuple[bool, str, str]:
    """
    Check that a URL is absolute and uses http/https.

    Unlike a crawler we never guess the scheme: the page under analysis must
    be addressed exactly as the user typed it.

    Returns:
        (is_valid, cleaned_url, error_message)
    """
    if not url or not url.strip():
        return False, "", "URL is required"

    cleaned = url.strip()

    try:
        parsed = urlparse(cleaned)
    except ValueError as e:
        return False, cleaned, f"{INVALID_URL_MESSAGE} ({e})"

    if parsed.scheme not in ALLOWED_SCHEMES:
        return False, cleaned, INVALID_URL_MESSAGE

    if not parsed.netloc:
        return False, cleaned, INVALID_URL_MESSAGE

    return True, cleaned, ""
