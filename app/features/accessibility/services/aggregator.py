from datetime import datetime, timezone
from typing import Dict, Optional

from app.features.accessibility.schemas.report import (
    AnalysisReport,
    CheckResult,
    DisabilityAnalysis,
    PageInfo,
    ReportSummary,
    empty_check_result,
)
from app.features.accessibility.services import rules
from app.features.accessibility.services.disability import empty_analysis


def overall_score(critical_issues: int, warning_issues: int) -> int:
    penalty = critical_issues * rules.ERROR_WEIGHT + warning_issues * rules.WARNING_WEIGHT
    return max(0, rules.MAX_SCORE - penalty)


def aggregate(
    url: str,
    page_info: PageInfo,
    checks: Dict[str, CheckResult],
    disability: Dict[str, DisabilityAnalysis],
    analyzed_at: Optional[str] = None,
) -> AnalysisReport:
    """
    Merge check results and disability analyses into one report.

    Issues are flattened checks-first (in CHECK_ORDER) and then by category
    (in CATEGORY_ORDER). The same problem found by a check and by an assessor
    is counted twice on purpose.
    """
    ordered_checks = {name: checks.get(name) or empty_check_result(name) for name in rules.CHECK_ORDER}
    ordered_disability = {
        category: disability.get(category) or empty_analysis(category)
        for category in rules.CATEGORY_ORDER
    }

    issues = []
    passed_checks = 0
    for result in ordered_checks.values():
        issues.extend(result.issues)
        passed_checks += result.passed
    for analysis in ordered_disability.values():
        issues.extend(analysis.issues)

    critical = sum(1 for issue in issues if issue.severity == "error")
    warnings = sum(1 for issue in issues if issue.severity == "warning")

    summary = ReportSummary(
        total_issues=len(issues),
        critical_issues=critical,
        warning_issues=warnings,
        passed_checks=passed_checks,
        wcag_level="AA" if critical == 0 else "Non-compliant",
        overall_score=overall_score(critical, warnings),
    )

    return AnalysisReport(
        url=url,
        analyzed_at=analyzed_at or datetime.now(timezone.utc).isoformat(),
        page_info=page_info,
        checks=ordered_checks,
        disability_analysis=ordered_disability,
        issues=issues,
        summary=summary,
    )
