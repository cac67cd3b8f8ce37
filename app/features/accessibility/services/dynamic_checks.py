"""
Checks that need the live rendered page.

The probe returns plain style/geometry data; every rule decision is made
here in Python.
"""
import logging
from typing import Any, Dict

from app.features.accessibility.schemas.report import ColorCheckResult, KeyboardCheckResult
from app.features.accessibility.services import rules
from app.features.accessibility.services.page_probe import PageProbe
from app.features.accessibility.utils.contrast import (
    contrast_ratio,
    parse_css_color,
    required_ratio,
)

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def _zero_length(value) -> bool:
    try:
        return float(str(value).strip().replace("px", "") or 0) == 0
    except ValueError:
        return False


def has_focus_indicator(entry: Dict[str, Any]) -> bool:
    """
    An element shows focus when its focused outline is drawn, or when its
    box-shadow or border changes between the blurred and focused states.
    """
    before = entry.get("before") or {}
    focused = entry.get("focused") or {}

    outline_style = (focused.get("outlineStyle") or "none").lower()
    if outline_style != "none" and not _zero_length(focused.get("outlineWidth") or "0px"):
        return True

    shadow = focused.get("boxShadow") or "none"
    if shadow != "none" and shadow != before.get("boxShadow"):
        return True

    return focused.get("border") != before.get("border")


def focusable_entries(probe: PageProbe):
    return [entry for entry in probe.focus_styles() if entry.get("focusable", True)]


def check_colors(probe: PageProbe) -> ColorCheckResult:
    """
    Contrast pass over at most MAX_COLOR_SAMPLES text elements, in document
    order. On larger pages checkedElements covers only that prefix.
    """
    issues = []
    checked = 0
    samples = probe.color_samples()
    if len(samples) >= rules.MAX_COLOR_SAMPLES:
        logger.warning(
            f"Contrast check capped at {rules.MAX_COLOR_SAMPLES} elements, later text was not sampled"
        )

    for sample in samples:
        foreground = parse_css_color(sample.get("color"))
        background = parse_css_color(sample.get("backgroundColor"))
        if foreground is None or background is None:
            continue

        checked += 1
        tag = sample.get("tag")
        location = f"#{sample['id']}" if sample.get("id") else None

        if foreground == WHITE and background == WHITE:
            issues.append(rules.build_issue(
                rules.WHITE_ON_WHITE, "error", "White text on white background detected",
                element=tag, location=location,
            ))
            continue

        ratio = contrast_ratio(foreground, background)
        minimum = required_ratio(sample.get("fontSize"), sample.get("fontWeight"))
        if ratio < minimum:
            issues.append(rules.build_issue(
                rules.LOW_CONTRAST, "error",
                f"Text contrast ratio {ratio:.2f}:1 is below the required {minimum}:1",
                element=tag, location=location,
            ))

    return ColorCheckResult(
        issues=issues,
        checked_elements=checked,
        passed=max(0, checked - len(issues)),
    )


def check_keyboard(probe: PageProbe) -> KeyboardCheckResult:
    issues = []
    entries = focusable_entries(probe)

    for entry in entries:
        if not has_focus_indicator(entry):
            issues.append(rules.build_issue(
                rules.MISSING_FOCUS_INDICATOR, "warning",
                "Focusable element may lack visible focus indicator",
                element=entry.get("tag"),
                location=f"#{entry['id']}" if entry.get("id") else None,
            ))

    return KeyboardCheckResult(
        issues=issues,
        focusable_elements=len(entries),
        passed=max(0, len(entries) - len(issues)),
    )
