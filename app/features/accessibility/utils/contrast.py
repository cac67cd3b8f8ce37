import re
from typing import Optional, Tuple

from app.features.accessibility.services import rules

RGB = Tuple[int, int, int]

_RGB_PATTERN = re.compile(
    r"rgba?\(\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*(?:,\s*([\d.]+)\s*)?\)"
)
_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_css_color(value: Optional[str]) -> Optional[RGB]:
    """
    Parse a computed CSS color (rgb(), rgba() or hex) into an RGB tuple.
    Fully transparent colors return None.
    """
    if not value:
        return None
    value = value.strip()

    match = _RGB_PATTERN.match(value)
    if match:
        alpha = match.group(4)
        if alpha is not None and float(alpha) == 0:
            return None
        return tuple(min(255, round(float(match.group(i)))) for i in (1, 2, 3))

    match = _HEX_PATTERN.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))

    return None


def relative_luminance(rgb: RGB) -> float:
    def channel(c):
        c /= 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = rgb
    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_ratio(foreground: RGB, background: RGB) -> float:
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def _font_weight(weight) -> int:
    if isinstance(weight, str):
        if weight.strip().lower() == "bold":
            return rules.BOLD_FONT_WEIGHT
        try:
            return int(float(weight))
        except ValueError:
            return 400
    return int(weight or 400)


def is_large_text(font_size: Optional[str], font_weight=None) -> bool:
    """WCAG large text: 24px, or 18.66px (14pt) when bold."""
    try:
        size = float(str(font_size).replace("px", ""))
    except (TypeError, ValueError):
        return False

    if size >= rules.LARGE_TEXT_PX:
        return True
    return size >= rules.LARGE_BOLD_TEXT_PX and _font_weight(font_weight) >= rules.BOLD_FONT_WEIGHT


def required_ratio(font_size: Optional[str], font_weight=None) -> float:
    if is_large_text(font_size, font_weight):
        return rules.CONTRAST_RATIO_LARGE
    return rules.CONTRAST_RATIO_NORMAL
