"""
Disability-impact assessment.

Four stateless evaluators, one per category. Each starts at a score of 100,
subtracts a fixed penalty per detected problem (floored at 0) and appends
the category's recommendations when the final score drops below 80.
"""
import logging
import re
from typing import Callable, Dict, List

from bs4 import BeautifulSoup

from app.features.accessibility.schemas.report import DisabilityAnalysis, Issue, Severity
from app.features.accessibility.services import rules
from app.features.accessibility.services.dynamic_checks import focusable_entries, has_focus_indicator
from app.features.accessibility.services.page_probe import PageProbe

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


class _Assessment:
    """Accumulates issues and the running score for one category."""

    def __init__(self, category: str):
        self.category = category
        self.issues: List[Issue] = []
        self.score = rules.MAX_SCORE

    def flag(self, rule: str, severity: Severity, message: str, penalty: int) -> None:
        self.issues.append(rules.build_issue(rule, severity, message))
        self.score = max(0, min(rules.MAX_SCORE, self.score - penalty))

    def guard(self, label: str, step: Callable[[], None]) -> None:
        # one failed sub-check must not cost the category its other findings
        try:
            step()
        except Exception as e:
            logger.warning(f"{self.category} {label} check failed: {e}")

    def finish(self) -> DisabilityAnalysis:
        profile = rules.CATEGORY_PROFILES[self.category]
        recommendations = []
        if self.score < rules.RECOMMENDATION_THRESHOLD:
            recommendations = list(profile["recommendations"])
        return DisabilityAnalysis(
            category=self.category,
            name=profile["name"],
            description=profile["description"],
            issues=self.issues,
            score=self.score,
            recommendations=recommendations,
        )


def empty_analysis(category: str) -> DisabilityAnalysis:
    return _Assessment(category).finish()


def average_words_per_sentence(text: str) -> float:
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text or "") if s.strip()]
    if not sentences:
        return 0.0
    return sum(len(sentence.split()) for sentence in sentences) / len(sentences)


def assess_visual(soup: BeautifulSoup, probe: PageProbe) -> DisabilityAnalysis:
    assessment = _Assessment("visual")

    def landmarks():
        if not soup.select(rules.LANDMARK_SELECTOR):
            assessment.flag(
                rules.MISSING_LANDMARKS, "error",
                "Page lacks ARIA landmarks for screen reader navigation",
                rules.MISSING_LANDMARKS_PENALTY,
            )

    def focus_indicators():
        lacking = sum(1 for entry in focusable_entries(probe) if not has_focus_indicator(entry))
        if lacking:
            assessment.flag(
                rules.MISSING_FOCUS_INDICATORS, "warning",
                f"{lacking} elements lack visible focus indicators",
                min(rules.FOCUS_INDICATOR_PENALTY_CAP, lacking * rules.FOCUS_INDICATOR_PENALTY),
            )

    def zoom():
        viewport = soup.find("meta", attrs={"name": "viewport"})
        content = (viewport.get("content") or "") if viewport else ""
        if "user-scalable=no" in content.replace(" ", "").lower():
            assessment.flag(
                rules.PREVENT_ZOOM, "error", "Viewport prevents users from zooming",
                rules.PREVENT_ZOOM_PENALTY,
            )

    def alt_text():
        missing = len(soup.select("img:not([alt])"))
        if missing:
            assessment.flag(
                rules.MISSING_ALT_TEXT, "error", f"{missing} images missing alt attributes",
                missing * rules.MISSING_ALT_PENALTY,
            )

    assessment.guard("landmark", landmarks)
    assessment.guard("focus indicator", focus_indicators)
    assessment.guard("zoom", zoom)
    assessment.guard("alt text", alt_text)
    return assessment.finish()


def assess_auditory(soup: BeautifulSoup, probe: PageProbe) -> DisabilityAnalysis:
    assessment = _Assessment("auditory")

    def captions():
        uncaptioned = [
            video for video in soup.find_all("video")
            if not video.select('track[kind="captions"], track[kind="subtitles"]')
        ]
        if uncaptioned:
            assessment.flag(
                rules.MISSING_CAPTIONS, "error", f"{len(uncaptioned)} video(s) lack captions",
                len(uncaptioned) * rules.MISSING_CAPTIONS_PENALTY,
            )

    def autoplay():
        if soup.select("audio[autoplay]"):
            assessment.flag(
                rules.AUTOPLAY_AUDIO, "warning", "Auto-playing audio detected",
                rules.AUTOPLAY_AUDIO_PENALTY,
            )

    def transcripts():
        if soup.find("audio") is not None and not soup.select(rules.TRANSCRIPT_SELECTOR):
            assessment.flag(
                rules.MISSING_TRANSCRIPTS, "warning", "Audio content may lack transcripts",
                rules.MISSING_TRANSCRIPTS_PENALTY,
            )

    assessment.guard("captions", captions)
    assessment.guard("autoplay", autoplay)
    assessment.guard("transcript", transcripts)
    return assessment.finish()


def assess_motor(soup: BeautifulSoup, probe: PageProbe) -> DisabilityAnalysis:
    assessment = _Assessment("motor")

    def keyboard_access():
        inaccessible = [
            element for element in soup.select(rules.INTERACTIVE_SELECTOR)
            if (element.get("tabindex") or "").strip() == "-1" and not element.has_attr("disabled")
        ]
        if inaccessible:
            assessment.flag(
                rules.KEYBOARD_INACCESSIBLE, "error",
                f"{len(inaccessible)} interactive elements not keyboard accessible",
                len(inaccessible) * rules.KEYBOARD_INACCESSIBLE_PENALTY,
            )

    def click_targets():
        small = 0
        for target in probe.click_targets():
            width = float(target.get("width") or 0)
            height = float(target.get("height") or 0)
            # zero-area boxes are not rendered (e.g. <link href> in <head>)
            if width <= 0 or height <= 0:
                continue
            if width < rules.MIN_TARGET_SIZE_PX or height < rules.MIN_TARGET_SIZE_PX:
                small += 1
        if small:
            size = rules.MIN_TARGET_SIZE_PX
            assessment.flag(
                rules.SMALL_CLICK_TARGETS, "warning",
                f"{small} click targets smaller than {size}x{size} pixels",
                small * rules.SMALL_TARGET_PENALTY,
            )

    def skip_links():
        skip = [
            link for link in soup.select('a[href^="#"], [role="link"][href^="#"]')
            if "skip" in link.get_text(" ").lower()
        ]
        if not skip:
            assessment.flag(
                rules.MISSING_SKIP_LINKS, "warning", "Page lacks skip navigation links",
                rules.MISSING_SKIP_LINKS_PENALTY,
            )

    assessment.guard("keyboard access", keyboard_access)
    assessment.guard("click target", click_targets)
    assessment.guard("skip link", skip_links)
    return assessment.finish()


def assess_cognitive(soup: BeautifulSoup, probe: PageProbe) -> DisabilityAnalysis:
    assessment = _Assessment("cognitive")

    def form_help():
        unhelped = [
            form for form in soup.find_all("form")
            if form.select(rules.COMPLEX_INPUT_SELECTOR) and not form.select(rules.FORM_HELP_SELECTOR)
        ]
        if unhelped:
            assessment.flag(
                rules.MISSING_FORM_HELP, "warning", f"{len(unhelped)} complex form(s) lack help text",
                len(unhelped) * rules.MISSING_FORM_HELP_PENALTY,
            )

    def timeouts():
        if soup.select(rules.TIMEOUT_SELECTOR):
            assessment.flag(
                rules.SESSION_TIMEOUTS, "warning", "Page may have session timeouts",
                rules.SESSION_TIMEOUT_PENALTY,
            )

    def moving_content():
        if soup.select(rules.MOVING_CONTENT_SELECTOR):
            assessment.flag(
                rules.MOVING_CONTENT, "warning", "Page contains blinking or animated content",
                rules.MOVING_CONTENT_PENALTY,
            )

    def language():
        body = soup.body or soup
        if average_words_per_sentence(body.get_text(" ")) > rules.MAX_WORDS_PER_SENTENCE:
            assessment.flag(
                rules.COMPLEX_LANGUAGE, "info", "Text may be complex for some users",
                rules.COMPLEX_LANGUAGE_PENALTY,
            )

    assessment.guard("form help", form_help)
    assessment.guard("timeout", timeouts)
    assessment.guard("moving content", moving_content)
    assessment.guard("language", language)
    return assessment.finish()


ASSESSORS = {
    "visual": assess_visual,
    "auditory": assess_auditory,
    "motor": assess_motor,
    "cognitive": assess_cognitive,
}


def assess_all(soup: BeautifulSoup, probe: PageProbe) -> Dict[str, DisabilityAnalysis]:
    analyses = {}
    for category in rules.CATEGORY_ORDER:
        try:
            analyses[category] = ASSESSORS[category](soup, probe)
        except Exception as e:
            logger.warning(f"{category} assessment failed: {e}")
            analyses[category] = empty_analysis(category)
    return analyses
