import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Union

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from app.features.accessibility.exceptions import SuggestionError
from app.features.accessibility.schemas.report import AnalysisReport, Issue, ReportSummary
from app.features.accessibility.schemas.suggestion import Suggestion, SuggestionBatch
from app.platform.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a web accessibility expert. Give concise, practical WCAG 2.1 AA "
    "remediation advice in plain text without markdown."
)

ReportLike = Union[AnalysisReport, dict]


@dataclass(frozen=True)
class SuggestionConfig:
    ai_enabled: bool = False
    api_key: Optional[str] = None
    model: str = "google/gemini-2.5-flash"
    timeout_ms: int = 9000
    base_url: str = "https://openrouter.ai/api/v1"
    min_interval_ms: int = 500
    max_issues: int = 6

    @classmethod
    def from_settings(cls, app_settings=settings) -> "SuggestionConfig":
        return cls(
            ai_enabled=app_settings.AI_SUGGESTIONS_ENABLED,
            api_key=app_settings.OPENROUTER_API_KEY,
            model=app_settings.AI_MODEL,
            timeout_ms=app_settings.AI_TIMEOUT_MS,
            base_url=app_settings.AI_BASE_URL,
            min_interval_ms=app_settings.AI_MIN_INTERVAL_MS,
            max_issues=app_settings.AI_MAX_ISSUES,
        )

    @property
    def upstream_available(self) -> bool:
        return self.ai_enabled and bool(self.api_key)


def _field(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _first(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None


def priority_for(rule: str) -> str:
    rule = (rule or "").lower()
    return "high" if "alt" in rule or "label" in rule else "medium"


def estimated_time_for(rule: str) -> str:
    rule = (rule or "").lower()
    return "5-10 minutes" if "alt" in rule or "label" in rule else "10-30 minutes"


class SuggestionGateway:
    """
    Maps accessibility issues to remediation text.

    Calls an OpenAI-compatible chat completion endpoint when AI is enabled
    and a key is configured; otherwise, and on any upstream failure, answers
    with deterministic rule-based guidance. Public methods never raise.
    """

    def __init__(
        self,
        config: SuggestionConfig,
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._client = client
        self._sleep = sleep
        self._clock = clock
        self._last_call_at: Optional[float] = None
        self._ai_answers = 0

    @property
    def ai_active(self) -> bool:
        return self.config.upstream_available

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                base_url=self.config.base_url,
                api_key=self.config.api_key,
                timeout=self.config.timeout_ms / 1000,
                max_retries=0,
            )
        return self._client

    def _respect_interval(self) -> None:
        if self._last_call_at is not None:
            wait = self.config.min_interval_ms / 1000 - (self._clock() - self._last_call_at)
            if wait > 0:
                self._sleep(wait)
        self._last_call_at = self._clock()

    def _complete(self, prompt: str) -> str:
        """
        One upstream call, normalized to plain text.

        Raises:
            SuggestionError: On transport failure or an unrecognized response
        """
        self._respect_interval()
        try:
            completion = self._get_client().chat.completions.create(
                extra_headers={"X-Title": "Accessibility Analyzer"},
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.2,
                max_tokens=300,
            )
        except OpenAIError as e:
            raise SuggestionError(f"Upstream call failed: {e}") from e

        text = self.normalize_completion(completion)
        if text is None:
            raise SuggestionError("Unrecognized upstream response shape")
        self._ai_answers += 1
        return text

    @staticmethod
    def normalize_completion(raw: Any) -> Optional[str]:
        """
        Reduce any recognized provider response to cleaned text.

        Recognized: OpenAI chat completions (object or dict,
        choices[0].message.content) and Gemini generateContent dicts
        (candidates[0].content.parts[0].text or candidates[0].output).
        Anything else returns None.
        """
        text = _field(_field(_first(_field(raw, "choices")), "message"), "content")

        if not isinstance(text, str):
            candidate = _first(_field(raw, "candidates"))
            text = _field(_first(_field(_field(candidate, "content"), "parts")), "text")
            if not isinstance(text, str):
                text = _field(candidate, "output")

        if not isinstance(text, str):
            return None
        cleaned = re.sub(r"[*`]", "", text).strip()
        return cleaned or None

    @staticmethod
    def build_prompt(issue: Issue) -> str:
        return (
            f"Accessibility Issue: {issue.rule}\n"
            f"Description: {issue.message}\n"
            f"Element: {issue.element or 'N/A'}\n"
            f"Location: {issue.location or 'N/A'}\n\n"
            "Respond with:\n"
            "1 sentence explanation\n"
            "3 numbered actionable fixes\n"
            "1 short code example (no markdown)"
        )

    @staticmethod
    def build_overall_prompt(summary: ReportSummary, issues: List[Issue]) -> str:
        rules_found = ", ".join(issue.rule for issue in issues) or "none"
        return (
            f"An accessibility audit found {summary.total_issues} issues "
            f"({summary.critical_issues} critical, {summary.warning_issues} warnings), "
            f"overall score {summary.overall_score}/100, WCAG level {summary.wcag_level}.\n"
            f"Most relevant rules: {rules_found}.\n\n"
            "In at most 4 sentences, tell the site owner what to fix first and why."
        )

    @staticmethod
    def fallback_suggestion(issue: Issue) -> Suggestion:
        rule = (issue.rule or "").lower()

        if "alt" in rule:
            return Suggestion(
                issue_type="Missing Alt Text",
                issue_message=issue.message,
                suggestion_text='Add descriptive alt attribute: <img src="img.png" alt="Description">',
                priority="high",
                estimated_fix_time="5-10 minutes",
            )
        if "label" in rule:
            return Suggestion(
                issue_type="Missing Label",
                issue_message=issue.message,
                suggestion_text='Associate a label with the control: <label for="name">Name</label><input id="name">',
                priority="high",
                estimated_fix_time="5-10 minutes",
            )
        if "contrast" in rule:
            return Suggestion(
                issue_type="Low Contrast",
                issue_message=issue.message,
                suggestion_text=(
                    "Use higher contrast colors following WCAG AA: "
                    "4.5:1 for normal text and 3:1 for large text."
                ),
                priority="medium",
                estimated_fix_time="10-30 minutes",
            )

        guidance = "Follow WCAG standards."
        if issue.wcag_ref is not None:
            guidance = f"Follow WCAG {issue.wcag_ref.guideline}: {issue.wcag_ref.description}."
        return Suggestion(
            issue_type=issue.rule or "Accessibility Issue",
            issue_message=issue.message,
            suggestion_text=guidance,
            priority="medium",
            estimated_fix_time="10-30 minutes",
        )

    def suggest(self, issue: Issue) -> Suggestion:
        if not self.ai_active:
            return self.fallback_suggestion(issue)

        try:
            text = self._complete(self.build_prompt(issue))
        except SuggestionError as e:
            logger.warning(f"AI suggestion failed for {issue.rule}, using fallback: {e}")
            return self.fallback_suggestion(issue)
        except Exception as e:
            logger.exception(f"Unexpected error generating suggestion for {issue.rule}: {e}")
            return self.fallback_suggestion(issue)

        return Suggestion(
            issue_type=issue.rule,
            issue_message=issue.message,
            suggestion_text=text,
            priority=priority_for(issue.rule),
            estimated_fix_time=estimated_time_for(issue.rule),
        )

    @staticmethod
    def coerce_issue(entry: Any) -> Optional[Issue]:
        """Accept Issue models or loosely shaped dicts (e.g. axe violations)."""
        if isinstance(entry, Issue):
            return entry
        if not isinstance(entry, dict):
            return None

        severity = entry.get("severity") or entry.get("type")
        if severity not in ("error", "warning", "info"):
            severity = "warning"
        try:
            return Issue.model_validate({
                **{key: value for key, value in entry.items() if key in ("location", "element", "wcagRef")},
                "severity": severity,
                "rule": str(entry.get("rule") or entry.get("id") or entry.get("type") or "accessibilityIssue"),
                "message": str(entry.get("message") or entry.get("description") or ""),
            })
        except ValidationError as e:
            logger.warning(f"Skipping malformed issue: {e}")
            return None

    @staticmethod
    def extract_issues(report: ReportLike, limit: int) -> List[Issue]:
        """Issues in report order, one per rule, at most `limit`."""
        if isinstance(report, AnalysisReport):
            raw: Iterable[Any] = report.issues
        elif isinstance(report, dict):
            raw = report.get("issues") or report.get("violations") or []
        else:
            raw = []

        issues = []
        seen = set()
        for entry in raw:
            issue = SuggestionGateway.coerce_issue(entry)
            if issue is None or issue.rule in seen:
                continue
            seen.add(issue.rule)
            issues.append(issue)
            if len(issues) >= limit:
                break
        return issues

    @staticmethod
    def summary_of(report: ReportLike, issues: List[Issue]) -> ReportSummary:
        if isinstance(report, AnalysisReport):
            return report.summary
        try:
            return ReportSummary.model_validate(report["summary"])
        except (ValidationError, KeyError, TypeError):
            critical = sum(1 for issue in issues if issue.severity == "error")
            warnings = sum(1 for issue in issues if issue.severity == "warning")
            return ReportSummary(
                total_issues=len(issues),
                critical_issues=critical,
                warning_issues=warnings,
                wcag_level="AA" if critical == 0 else "Non-compliant",
                overall_score=max(0, 100 - critical * 10 - warnings * 5),
            )

    @staticmethod
    def _estimate_total_time(total_issues: int) -> str:
        if total_issues <= 3:
            return "30-60 minutes"
        if total_issues <= 10:
            return "2-4 hours"
        return "1-2 days"

    def overall_suggestion(self, summary: ReportSummary, issues: List[Issue]) -> Suggestion:
        top_rules = ", ".join(issue.rule for issue in issues[:3])
        if summary.critical_issues:
            text = (
                f"Found {summary.total_issues} accessibility issues "
                f"({summary.critical_issues} critical, {summary.warning_issues} warnings) with an "
                f"overall score of {summary.overall_score}/100. Fix the critical issues first, "
                f"starting with: {top_rules}."
            )
        else:
            text = (
                f"No critical issues found; {summary.warning_issues} warnings remain with an "
                f"overall score of {summary.overall_score}/100. Review: {top_rules}."
            )

        overall = Suggestion(
            issue_type="Overall Accessibility",
            issue_message=f"{summary.total_issues} issues found",
            suggestion_text=text,
            priority="high" if summary.critical_issues else "medium",
            estimated_fix_time=self._estimate_total_time(summary.total_issues),
            is_overall=True,
        )
        if not self.ai_active:
            return overall

        try:
            ai_text = self._complete(self.build_overall_prompt(summary, issues))
        except Exception as e:
            logger.warning(f"AI overall summary failed, using fallback: {e}")
            return overall
        return overall.model_copy(update={"suggestion_text": ai_text})

    @staticmethod
    def deduplicate(suggestions: List[Suggestion]) -> List[Suggestion]:
        unique = []
        seen = set()
        for suggestion in suggestions:
            if suggestion.issue_type in seen:
                continue
            seen.add(suggestion.issue_type)
            unique.append(suggestion)
        return unique

    def generate_suggestions(self, report: ReportLike) -> SuggestionBatch:
        """
        Suggestions for the report's issues plus one overall summary entry.

        Upstream calls are spaced by min_interval_ms; results are
        de-duplicated by issue type.
        """
        logger.info("AI suggestion process start" if self.ai_active else "AI disabled, fallback mode only")
        issues = self.extract_issues(report, self.config.max_issues)
        if not issues:
            return SuggestionBatch(success=True, suggestions=[], ai_used=False, message="No issues found")

        answers_before = self._ai_answers
        suggestions = self.deduplicate([self.suggest(issue) for issue in issues])
        suggestions.append(self.overall_suggestion(self.summary_of(report, issues), issues))

        return SuggestionBatch(
            success=True,
            suggestions=suggestions,
            ai_used=self._ai_answers > answers_before,
        )
