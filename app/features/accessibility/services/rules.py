"""
Rule registry.

Every rule identifier an Issue can carry, the WCAG criterion it maps to,
and every heuristic threshold or penalty weight used by the checks and the
disability assessors. Keep tunables here, not inline in the checks.
"""
from typing import Dict, Optional

from app.features.accessibility.schemas.report import Issue, Severity, WcagReference

# ── Rule identifiers ─────────────────────────────────────────
MISSING_ALT_TEXT = "missingAltText"
EMPTY_ALT_TEXT = "emptyAltText"
HEADING_HIERARCHY = "headingHierarchy"
MISSING_H1 = "missingH1"
MISSING_LABEL = "missingLabel"
EMPTY_LINK_TEXT = "emptyLinkText"
VAGUE_LINK_TEXT = "vagueLinkText"
WHITE_ON_WHITE = "whiteOnWhite"
LOW_CONTRAST = "lowContrast"
MISSING_FOCUS_INDICATOR = "missingFocusIndicator"
INVALID_ARIA_ROLE = "invalidAriaRole"
BROKEN_ARIA_REFERENCE = "brokenAriaReference"
MISSING_MAIN = "missingMain"
MISSING_LANDMARKS = "missingLandmarks"
MISSING_FOCUS_INDICATORS = "missingFocusIndicators"
PREVENT_ZOOM = "preventZoom"
MISSING_CAPTIONS = "missingCaptions"
AUTOPLAY_AUDIO = "autoplayAudio"
MISSING_TRANSCRIPTS = "missingTranscripts"
KEYBOARD_INACCESSIBLE = "keyboardInaccessible"
SMALL_CLICK_TARGETS = "smallClickTargets"
MISSING_SKIP_LINKS = "missingSkipLinks"
MISSING_FORM_HELP = "missingFormHelp"
SESSION_TIMEOUTS = "sessionTimeouts"
MOVING_CONTENT = "movingContent"
COMPLEX_LANGUAGE = "complexLanguage"

# ── Report ordering ──────────────────────────────────────────
CHECK_ORDER = ("images", "headings", "forms", "links", "colors", "keyboard", "aria", "semantic")
CATEGORY_ORDER = ("visual", "auditory", "motor", "cognitive")

# ── Summary scoring ──────────────────────────────────────────
ERROR_WEIGHT = 10
WARNING_WEIGHT = 5
MAX_SCORE = 100

# ── Check thresholds ─────────────────────────────────────────
VAGUE_LINK_TEXTS = frozenset({"click here", "read more", "more", "here"})
CONTRAST_RATIO_NORMAL = 4.5
CONTRAST_RATIO_LARGE = 3.0
LARGE_TEXT_PX = 24.0
LARGE_BOLD_TEXT_PX = 18.66
BOLD_FONT_WEIGHT = 700
MAX_COLOR_SAMPLES = 500
MIN_TARGET_SIZE_PX = 44
MAX_WORDS_PER_SENTENCE = 20
RECOMMENDATION_THRESHOLD = 80

# ── Disability penalties ─────────────────────────────────────
MISSING_LANDMARKS_PENALTY = 15
FOCUS_INDICATOR_PENALTY = 2
FOCUS_INDICATOR_PENALTY_CAP = 20
PREVENT_ZOOM_PENALTY = 25
MISSING_ALT_PENALTY = 5
MISSING_CAPTIONS_PENALTY = 20
AUTOPLAY_AUDIO_PENALTY = 15
MISSING_TRANSCRIPTS_PENALTY = 10
KEYBOARD_INACCESSIBLE_PENALTY = 10
SMALL_TARGET_PENALTY = 5
MISSING_SKIP_LINKS_PENALTY = 10
MISSING_FORM_HELP_PENALTY = 10
SESSION_TIMEOUT_PENALTY = 10
MOVING_CONTENT_PENALTY = 15
COMPLEX_LANGUAGE_PENALTY = 5

# ── Selectors shared by checks and assessors ─────────────────
FOCUSABLE_SELECTOR = 'button, [href], input, select, textarea, [tabindex]:not([tabindex="-1"])'
INTERACTIVE_SELECTOR = 'button, [href], input, select, textarea, [onclick], [role="button"]'
LANDMARK_SELECTOR = (
    '[role="main"], [role="navigation"], [role="banner"], [role="contentinfo"], '
    'main, nav, header, footer'
)
FORM_HELP_SELECTOR = '[role="tooltip"], .help-text, .description, [aria-describedby]'
COMPLEX_INPUT_SELECTOR = 'input[type="email"], input[type="password"], input[type="tel"], select'
TRANSCRIPT_SELECTOR = "[data-transcript], .transcript, #transcript"
TIMEOUT_SELECTOR = "[data-timeout], [data-session]"
MOVING_CONTENT_SELECTOR = '[style*="blink"], .blink, [style*="animation"]'

# WAI-ARIA 1.2 roles (abstract roles excluded, they are not valid in markup)
ARIA_ROLES = frozenset({
    "alert", "alertdialog", "application", "article", "banner", "blockquote",
    "button", "caption", "cell", "checkbox", "code", "columnheader", "combobox",
    "complementary", "contentinfo", "definition", "deletion", "dialog",
    "directory", "document", "emphasis", "feed", "figure", "form", "generic",
    "grid", "gridcell", "group", "heading", "img", "insertion", "link", "list",
    "listbox", "listitem", "log", "main", "marquee", "math", "menu", "menubar",
    "menuitem", "menuitemcheckbox", "menuitemradio", "meter", "navigation",
    "none", "note", "option", "paragraph", "presentation", "progressbar",
    "radio", "radiogroup", "region", "row", "rowgroup", "rowheader",
    "scrollbar", "search", "searchbox", "separator", "slider", "spinbutton",
    "status", "strong", "subscript", "superscript", "switch", "tab", "table",
    "tablist", "tabpanel", "term", "textbox", "time", "timer", "toolbar",
    "tooltip", "tree", "treegrid", "treeitem",
})

# ── WCAG references ──────────────────────────────────────────
_WCAG = {
    "1.1.1": WcagReference(guideline="1.1.1", level="A", description="Images must have alternative text"),
    "1.2.1": WcagReference(guideline="1.2.1", level="A", description="Audio-only content needs a text alternative"),
    "1.2.2": WcagReference(guideline="1.2.2", level="A", description="Videos must have captions"),
    "1.3.1": WcagReference(guideline="1.3.1", level="A", description="Proper heading hierarchy and structure must be maintained"),
    "1.4.2": WcagReference(guideline="1.4.2", level="A", description="Auto-playing audio should be controllable"),
    "1.4.3": WcagReference(guideline="1.4.3", level="AA", description="Text must have sufficient contrast ratio (4.5:1 for normal text)"),
    "1.4.4": WcagReference(guideline="1.4.4", level="AA", description="Text must be resizable up to 200% without loss of content"),
    "2.1.1": WcagReference(guideline="2.1.1", level="A", description="All functionality must be keyboard accessible"),
    "2.2.1": WcagReference(guideline="2.2.1", level="A", description="Users must be able to adjust time limits"),
    "2.2.2": WcagReference(guideline="2.2.2", level="A", description="Moving or blinking content must be pausable"),
    "2.4.1": WcagReference(guideline="2.4.1", level="A", description="A mechanism to bypass repeated blocks must exist"),
    "2.4.4": WcagReference(guideline="2.4.4", level="A", description="Link purpose must be clear from link text"),
    "2.4.6": WcagReference(guideline="2.4.6", level="AA", description="Headings and labels must describe topic or purpose"),
    "2.4.7": WcagReference(guideline="2.4.7", level="AA", description="Keyboard focus must be visible"),
    "2.5.5": WcagReference(guideline="2.5.5", level="AAA", description="Click targets should be at least 44x44 pixels"),
    "3.1.5": WcagReference(guideline="3.1.5", level="AAA", description="Language should be as simple as possible"),
    "3.3.2": WcagReference(guideline="3.3.2", level="A", description="Form inputs must have labels or instructions"),
    "4.1.2": WcagReference(guideline="4.1.2", level="A", description="Name, role and value must be programmatically determinable"),
}

RULE_GUIDELINES: Dict[str, str] = {
    MISSING_ALT_TEXT: "1.1.1",
    EMPTY_ALT_TEXT: "1.1.1",
    HEADING_HIERARCHY: "1.3.1",
    MISSING_H1: "1.3.1",
    MISSING_LABEL: "3.3.2",
    EMPTY_LINK_TEXT: "2.4.4",
    VAGUE_LINK_TEXT: "2.4.4",
    WHITE_ON_WHITE: "1.4.3",
    LOW_CONTRAST: "1.4.3",
    MISSING_FOCUS_INDICATOR: "2.4.7",
    INVALID_ARIA_ROLE: "4.1.2",
    BROKEN_ARIA_REFERENCE: "4.1.2",
    MISSING_MAIN: "1.3.1",
    MISSING_LANDMARKS: "1.3.1",
    MISSING_FOCUS_INDICATORS: "2.4.7",
    PREVENT_ZOOM: "1.4.4",
    MISSING_CAPTIONS: "1.2.2",
    AUTOPLAY_AUDIO: "1.4.2",
    MISSING_TRANSCRIPTS: "1.2.1",
    KEYBOARD_INACCESSIBLE: "2.1.1",
    SMALL_CLICK_TARGETS: "2.5.5",
    MISSING_SKIP_LINKS: "2.4.1",
    MISSING_FORM_HELP: "3.3.2",
    SESSION_TIMEOUTS: "2.2.1",
    MOVING_CONTENT: "2.2.2",
    COMPLEX_LANGUAGE: "3.1.5",
}


def wcag_reference(rule: str) -> Optional[WcagReference]:
    guideline = RULE_GUIDELINES.get(rule)
    return _WCAG.get(guideline) if guideline else None


def build_issue(
    rule: str,
    severity: Severity,
    message: str,
    element: Optional[str] = None,
    location: Optional[str] = None,
) -> Issue:
    """Create an Issue for a registered rule, attaching its WCAG reference."""
    if rule not in RULE_GUIDELINES:
        raise ValueError(f"Unknown rule identifier: {rule}")
    return Issue(
        severity=severity,
        rule=rule,
        message=message,
        element=element,
        location=location,
        wcag_ref=wcag_reference(rule),
    )


# ── Disability categories ────────────────────────────────────
CATEGORY_PROFILES = {
    "visual": {
        "name": "Visual Impairments",
        "description": "Affects users who are blind, have low vision, or color blindness",
        "recommendations": [
            "Add descriptive alt text to all images",
            "Ensure minimum 4.5:1 contrast ratio for text",
            "Use proper heading hierarchy (h1, h2, h3, etc.)",
            "Add ARIA landmarks for better screen reader navigation",
            "Provide visible focus indicators for keyboard navigation",
            "Enable zoom functionality up to 200%",
        ],
    },
    "auditory": {
        "name": "Auditory Impairments",
        "description": "Affects users who are deaf or hard of hearing",
        "recommendations": [
            "Provide captions for all video content",
            "Include transcripts for audio content",
            "Use visual indicators alongside audio alerts",
            "Avoid auto-playing audio content",
            "Ensure captions are accurate and synchronized",
        ],
    },
    "motor": {
        "name": "Motor Impairments",
        "description": "Affects users with limited fine motor control or who cannot use a mouse",
        "recommendations": [
            "Ensure all interactive elements are keyboard accessible",
            "Make click targets at least 44x44 pixels",
            "Provide generous spacing between clickable elements",
            "Avoid keyboard traps",
            "Add skip links for navigation",
            "Support alternative input methods",
        ],
    },
    "cognitive": {
        "name": "Cognitive Impairments",
        "description": "Affects users with learning disabilities, memory issues, or attention disorders",
        "recommendations": [
            "Use simple, clear language",
            "Provide help text for complex forms",
            "Give users control over time limits",
            "Use consistent navigation patterns",
            "Minimize distractions and moving content",
            "Break up long content into smaller sections",
        ],
    },
}
