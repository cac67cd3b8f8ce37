from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from app.features.accessibility.services import rules
from app.features.accessibility.services.suggestions import (
    SuggestionConfig,
    SuggestionGateway,
)

AI_CONFIG = SuggestionConfig(ai_enabled=True, api_key="test-key", min_interval_ms=500)


def completion(text):
    return {"choices": [{"message": {"content": text}}]}


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.chat.completions.create.return_value = completion("**Add** alt text via `alt`.")
    return client


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def ai_gateway(fake_client, sleep):
    return SuggestionGateway(AI_CONFIG, client=fake_client, sleep=sleep, clock=lambda: 10.0)


class TestFallback:
    def test_alt_rule_without_credentials(self, alt_issue):
        gateway = SuggestionGateway(SuggestionConfig(ai_enabled=True, api_key=None))

        suggestion = gateway.suggest(alt_issue)

        assert suggestion.issue_type == "Missing Alt Text"
        assert suggestion.priority == "high"
        assert suggestion.estimated_fix_time == "5-10 minutes"
        assert "alt=" in suggestion.suggestion_text
        assert suggestion.is_overall is False

    def test_label_rule(self):
        issue = rules.build_issue(rules.MISSING_LABEL, "error", "Form control missing label")

        suggestion = SuggestionGateway.fallback_suggestion(issue)

        assert suggestion.issue_type == "Missing Label"
        assert suggestion.priority == "high"

    def test_contrast_rule(self):
        issue = rules.build_issue(rules.LOW_CONTRAST, "error", "Text contrast too low")

        suggestion = SuggestionGateway.fallback_suggestion(issue)

        assert suggestion.issue_type == "Low Contrast"
        assert suggestion.priority == "medium"
        assert suggestion.estimated_fix_time == "10-30 minutes"
        assert "4.5:1" in suggestion.suggestion_text

    def test_other_rule_uses_wcag_reference(self):
        issue = rules.build_issue(rules.MISSING_MAIN, "warning", "Page lacks main landmark")

        suggestion = SuggestionGateway.fallback_suggestion(issue)

        assert suggestion.issue_type == rules.MISSING_MAIN
        assert suggestion.priority == "medium"
        assert "1.3.1" in suggestion.suggestion_text


class TestNormalizeCompletion:
    def test_openai_dict(self):
        assert SuggestionGateway.normalize_completion(completion("  **Fix** `this`  ")) == "Fix this"

    def test_openai_object(self):
        raw = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Use labels"))])

        assert SuggestionGateway.normalize_completion(raw) == "Use labels"

    def test_gemini_parts(self):
        raw = {"candidates": [{"content": {"parts": [{"text": "Add captions"}]}}]}

        assert SuggestionGateway.normalize_completion(raw) == "Add captions"

    def test_gemini_output(self):
        raw = {"candidates": [{"output": "Add transcripts"}]}

        assert SuggestionGateway.normalize_completion(raw) == "Add transcripts"

    @pytest.mark.parametrize("raw", [
        None,
        {},
        {"choices": []},
        {"choices": [{"message": {"content": None}}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"choices": [{"message": {"content": "***"}}]},
    ])
    def test_unrecognized_shapes(self, raw):
        assert SuggestionGateway.normalize_completion(raw) is None


class TestUpstream:
    def test_successful_call(self, ai_gateway, fake_client, alt_issue):
        suggestion = ai_gateway.suggest(alt_issue)

        assert suggestion.suggestion_text == "Add alt text via alt."
        assert suggestion.issue_type == rules.MISSING_ALT_TEXT
        assert suggestion.priority == "high"
        kwargs = fake_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == AI_CONFIG.model
        assert "missingAltText" in kwargs["messages"][1]["content"]

    @pytest.mark.parametrize("failure", [
        OpenAIError("rate limited"),
        RuntimeError("unexpected"),
    ])
    def test_upstream_failure_falls_back(self, ai_gateway, fake_client, alt_issue, failure):
        fake_client.chat.completions.create.side_effect = failure

        suggestion = ai_gateway.suggest(alt_issue)

        assert suggestion.issue_type == "Missing Alt Text"

    def test_unknown_response_falls_back(self, ai_gateway, fake_client, alt_issue):
        fake_client.chat.completions.create.return_value = {"unexpected": True}

        suggestion = ai_gateway.suggest(alt_issue)

        assert suggestion.issue_type == "Missing Alt Text"

    def test_calls_are_spaced(self, ai_gateway, fake_client, sleep, sample_report):
        ai_gateway.generate_suggestions(sample_report)

        # two issue calls plus the overall summary
        assert fake_client.chat.completions.create.call_count == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)

    def test_disabled_never_calls_upstream(self, fake_client, sample_report):
        gateway = SuggestionGateway(SuggestionConfig(), client=fake_client)

        batch = gateway.generate_suggestions(sample_report)

        fake_client.chat.completions.create.assert_not_called()
        assert batch.ai_used is False


class TestExtractIssues:
    def test_dedup_and_cap(self):
        issues = [
            rules.build_issue(rule, "warning", f"{rule} found")
            for rule in list(rules.RULE_GUIDELINES)[:10]
        ]
        issues.insert(1, issues[0])

        extracted = SuggestionGateway.extract_issues({"issues": issues}, limit=6)

        assert len(extracted) == 6
        assert len({issue.rule for issue in extracted}) == 6
        assert extracted[0].rule == issues[0].rule

    def test_axe_style_violations(self):
        report = {"violations": [
            {"id": "image-alt", "description": "Images must have alternate text", "impact": "critical"},
            {"id": "color-contrast", "description": "Elements must have sufficient color contrast"},
        ]}

        extracted = SuggestionGateway.extract_issues(report, limit=6)

        assert [issue.rule for issue in extracted] == ["image-alt", "color-contrast"]
        assert extracted[0].message == "Images must have alternate text"
        assert extracted[0].severity == "warning"

    def test_camel_case_report_dict(self, sample_report):
        payload = sample_report.model_dump(by_alias=True, mode="json")

        extracted = SuggestionGateway.extract_issues(payload, limit=6)

        assert [issue.rule for issue in extracted] == [rules.MISSING_ALT_TEXT, rules.MISSING_MAIN]
        assert extracted[0].wcag_ref.guideline == "1.1.1"

    def test_garbage_input(self):
        assert SuggestionGateway.extract_issues({"issues": ["nope", 3]}, limit=6) == []
        assert SuggestionGateway.extract_issues("nope", limit=6) == []


class TestGenerateSuggestions:
    def test_fallback_batch_ends_with_one_overall_entry(self, sample_report):
        gateway = SuggestionGateway(SuggestionConfig())

        batch = gateway.generate_suggestions(sample_report)

        assert batch.success is True
        assert batch.ai_used is False
        overall = [s for s in batch.suggestions if s.is_overall]
        assert len(overall) == 1
        assert batch.suggestions[-1].is_overall is True
        assert batch.suggestions[-1].priority == "high"
        assert "1 critical" in batch.suggestions[-1].suggestion_text

    def test_deduplicates_by_issue_type(self):
        report = {"issues": [
            rules.build_issue(rules.MISSING_ALT_TEXT, "error", "Image missing alt attribute"),
            rules.build_issue(rules.EMPTY_ALT_TEXT, "warning", "Image has empty alt text"),
        ]}

        batch = SuggestionGateway(SuggestionConfig()).generate_suggestions(report)

        types = [s.issue_type for s in batch.suggestions]
        assert types == ["Missing Alt Text", "Overall Accessibility"]

    def test_empty_report(self):
        batch = SuggestionGateway(SuggestionConfig()).generate_suggestions({"issues": []})

        assert batch.suggestions == []
        assert batch.message == "No issues found"

    def test_ai_batch(self, ai_gateway, sample_report):
        batch = ai_gateway.generate_suggestions(sample_report)

        assert batch.ai_used is True
        assert batch.suggestions[-1].is_overall is True
        assert batch.suggestions[-1].suggestion_text == "Add alt text via alt."

    def test_serialized_with_camel_case(self, sample_report):
        batch = SuggestionGateway(SuggestionConfig()).generate_suggestions(sample_report)

        payload = batch.model_dump(by_alias=True)

        assert "aiUsed" in payload
        assert "isOverall" in payload["suggestions"][-1]
        assert "estimatedFixTime" in payload["suggestions"][0]


def test_config_from_settings():
    app_settings = SimpleNamespace(
        AI_SUGGESTIONS_ENABLED=True,
        OPENROUTER_API_KEY="key",
        AI_MODEL="some/model",
        AI_TIMEOUT_MS=1000,
        AI_BASE_URL="https://llm.test/v1",
        AI_MIN_INTERVAL_MS=0,
        AI_MAX_ISSUES=3,
    )

    config = SuggestionConfig.from_settings(app_settings)

    assert config.upstream_available is True
    assert config.model == "some/model"
    assert config.max_issues == 3
    assert SuggestionConfig(ai_enabled=True).upstream_available is False
