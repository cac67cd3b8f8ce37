from unittest.mock import MagicMock, patch

import pytest

from app.features.accessibility.services import disability, rules
from app.features.accessibility.services.disability import (
    assess_all,
    assess_auditory,
    assess_cognitive,
    assess_motor,
    assess_visual,
    average_words_per_sentence,
)

CLEAN_PAGE = """
<html lang="en"><body>
  <a href="#content">Skip to content</a>
  <header></header><main id="content"><p>Short text. Easy to read.</p></main><footer></footer>
</body></html>
"""


def rules_of(analysis):
    return [issue.rule for issue in analysis.issues]


class TestVisual:
    def test_clean_page_scores_100(self, parse_html, make_probe):
        analysis = assess_visual(parse_html(CLEAN_PAGE), make_probe())

        assert analysis.category == "visual"
        assert analysis.name == "Visual Impairments"
        assert analysis.score == 100
        assert analysis.issues == []
        assert analysis.recommendations == []

    def test_prevent_zoom_costs_exactly_25(self, parse_html, make_probe):
        page = CLEAN_PAGE.replace(
            "<body>", '<head><meta name="viewport" content="width=device-width, user-scalable = no"></head><body>'
        )

        analysis = assess_visual(parse_html(page), make_probe())

        assert rules_of(analysis) == [rules.PREVENT_ZOOM]
        assert analysis.score == 75
        assert analysis.recommendations == rules.CATEGORY_PROFILES["visual"]["recommendations"]

    def test_landmarks_focus_and_alt(self, parse_html, make_probe):
        unfocusable = {"focusable": True, "before": {}, "focused": {}}
        probe = make_probe(focus_styles=[unfocusable] * 3)

        analysis = assess_visual(parse_html('<div><img src="a.png"><img src="b.png"></div>'), probe)

        assert rules_of(analysis) == [
            rules.MISSING_LANDMARKS,
            rules.MISSING_FOCUS_INDICATORS,
            rules.MISSING_ALT_TEXT,
        ]
        # 15 landmarks + 3 * 2 focus + 2 * 5 alt
        assert analysis.score == 100 - 15 - 6 - 10

    def test_failed_probe_keeps_markup_findings(self, parse_html, make_probe):
        probe = make_probe(focus_styles=RuntimeError("driver gone"))

        analysis = assess_visual(parse_html('<img src="a.png">'), probe)

        assert rules.MISSING_ALT_TEXT in rules_of(analysis)
        assert rules.MISSING_FOCUS_INDICATORS not in rules_of(analysis)


class TestAuditory:
    def test_uncaptioned_video(self, parse_html, make_probe):
        analysis = assess_auditory(
            parse_html('<video src="a.mp4"></video><video><track kind="captions" src="c.vtt"></video>'),
            make_probe(),
        )

        assert rules_of(analysis) == [rules.MISSING_CAPTIONS]
        assert analysis.score == 80
        assert analysis.recommendations == []

    def test_autoplay_audio_without_transcript(self, parse_html, make_probe):
        analysis = assess_auditory(parse_html('<audio autoplay src="a.mp3"></audio>'), make_probe())

        assert rules_of(analysis) == [rules.AUTOPLAY_AUDIO, rules.MISSING_TRANSCRIPTS]
        assert analysis.score == 75
        assert analysis.recommendations

    def test_transcript_present(self, parse_html, make_probe):
        analysis = assess_auditory(
            parse_html('<audio src="a.mp3"></audio><div class="transcript">Words</div>'), make_probe()
        )

        assert analysis.issues == []


class TestMotor:
    def test_keyboard_traps_and_small_targets(self, parse_html, make_probe):
        probe = make_probe(click_targets=[
            {"width": 20, "height": 20},
            {"width": 44, "height": 44},
            {"width": 0, "height": 0},
        ])
        soup = parse_html(
            '<a href="#main">Skip navigation</a>'
            '<button tabindex="-1">Hidden</button><button tabindex="-1" disabled>Off</button>'
        )

        analysis = assess_motor(soup, probe)

        assert rules_of(analysis) == [rules.KEYBOARD_INACCESSIBLE, rules.SMALL_CLICK_TARGETS]
        assert "1 click targets" in analysis.issues[1].message
        assert analysis.score == 100 - 10 - 5

    def test_missing_skip_link(self, parse_html, make_probe):
        analysis = assess_motor(parse_html('<a href="/about">About</a>'), make_probe())

        assert rules_of(analysis) == [rules.MISSING_SKIP_LINKS]
        assert analysis.score == 90


class TestCognitive:
    def test_form_without_help(self, parse_html, make_probe):
        soup = parse_html(
            '<form><input type="email"></form>'
            '<form><input type="password" aria-describedby="pw-help"><p id="pw-help">8+ chars</p></form>'
            '<form><input type="text"></form>'
        )

        analysis = assess_cognitive(soup, make_probe())

        assert rules_of(analysis) == [rules.MISSING_FORM_HELP]
        assert "1 complex form(s)" in analysis.issues[0].message

    def test_timeouts_and_moving_content(self, parse_html, make_probe):
        soup = parse_html('<div data-timeout="300"></div><span class="blink">New!</span>')

        analysis = assess_cognitive(soup, make_probe())

        assert rules_of(analysis) == [rules.SESSION_TIMEOUTS, rules.MOVING_CONTENT]
        assert analysis.score == 75

    def test_complex_language_is_info(self, parse_html, make_probe):
        sentence = " ".join(["word"] * 30) + "."
        analysis = assess_cognitive(parse_html(f"<body><p>{sentence}</p></body>"), make_probe())

        assert rules_of(analysis) == [rules.COMPLEX_LANGUAGE]
        assert analysis.issues[0].severity == "info"
        assert analysis.score == 95


def test_average_words_per_sentence():
    assert average_words_per_sentence("") == 0.0
    assert average_words_per_sentence("One two. Three four five six!") == 3.0


def test_scores_never_increase_as_problems_are_added(parse_html, make_probe):
    pages = [
        CLEAN_PAGE,
        CLEAN_PAGE.replace("<main", '<img src="x.png"><main'),
        CLEAN_PAGE.replace("<main", '<img src="x.png"><video></video><main'),
        CLEAN_PAGE.replace("<main", '<img src="x.png"><video></video><audio autoplay></audio><main'),
    ]
    previous = {category: 100 for category in rules.CATEGORY_ORDER}

    for page in pages:
        analyses = assess_all(parse_html(page), make_probe())
        for category, analysis in analyses.items():
            assert 0 <= analysis.score <= 100
            assert analysis.score <= previous[category]
            previous[category] = analysis.score


def test_score_floors_at_zero(parse_html, make_probe):
    videos = "<video></video>" * 10

    analysis = assess_auditory(parse_html(videos), make_probe())

    assert analysis.score == 0


def test_failed_category_is_replaced_with_empty_analysis(parse_html, make_probe):
    broken = MagicMock(side_effect=RuntimeError("boom"))

    with patch.dict(disability.ASSESSORS, {"motor": broken}):
        analyses = assess_all(parse_html('<img src="a.png">'), make_probe())

    assert list(analyses) == list(rules.CATEGORY_ORDER)
    assert analyses["motor"].issues == []
    assert analyses["motor"].score == 100
    assert analyses["visual"].issues


@pytest.mark.parametrize("category", rules.CATEGORY_ORDER)
def test_every_category_has_a_profile(category):
    profile = rules.CATEGORY_PROFILES[category]
    assert profile["name"]
    assert profile["recommendations"]
