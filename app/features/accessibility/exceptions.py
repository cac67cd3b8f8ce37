"""
Accessibility analysis errors.

Two families:
- Fatal (AnalysisError and subclasses): raised by the page loader, abort the
  whole run, surfaced to the caller as a single error with a cause category.
- Recoverable (CheckError, SuggestionError): contained at the component
  boundary and downgraded to an empty CheckResult / fallback suggestion.
"""
from fastapi import status

CAUSE_DNS_FAILURE = "dns_failure"
CAUSE_CONNECTION_REFUSED = "connection_refused"
CAUSE_NAVIGATION_TIMEOUT = "navigation_timeout"
CAUSE_PARSE_FAILURE = "parse_failure"
CAUSE_UNREACHABLE = "unreachable"

CAUSE_MESSAGES = {
    CAUSE_DNS_FAILURE: "Website not found. Please check the URL.",
    CAUSE_CONNECTION_REFUSED: "Connection refused. The website may be down.",
    CAUSE_NAVIGATION_TIMEOUT: (
        "The website took too long to load. "
        "Please try again or check if the site is accessible."
    ),
    CAUSE_PARSE_FAILURE: (
        "Unable to parse the webpage content. The site may have formatting issues."
    ),
    CAUSE_UNREACHABLE: "Failed to analyze webpage.",
}


class AnalysisError(Exception):
    """Base class for errors that abort an analysis run."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, cause: str = CAUSE_UNREACHABLE):
        super().__init__(message)
        self.cause = cause

    @property
    def user_message(self) -> str:
        return CAUSE_MESSAGES.get(self.cause, CAUSE_MESSAGES[CAUSE_UNREACHABLE])


class NavigationError(AnalysisError):
    """The page could not be fetched (DNS, refused connection, timeout)."""


class ContentExtractionError(AnalysisError):
    """The rendered document could not be serialized or parsed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, cause: str = CAUSE_PARSE_FAILURE):
        super().__init__(message, cause)


class CheckError(Exception):
    """A single check failed internally."""

    def __init__(self, check_name: str, message: str):
        super().__init__(f"{check_name}: {message}")
        self.check_name = check_name


class SuggestionError(Exception):
    """The suggestion upstream failed or returned an unusable response."""
