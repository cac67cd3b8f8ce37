from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, SerializeAsAny

Severity = Literal["error", "warning", "info"]
WcagLevel = Literal["A", "AA", "AAA"]
DisabilityCategory = Literal["visual", "auditory", "motor", "cognitive"]


class WcagReference(BaseModel):
    """WCAG success criterion an issue maps to"""
    guideline: str
    level: WcagLevel
    description: str

    class Config:
        frozen = True


class Issue(BaseModel):
    """A single accessibility finding"""
    severity: Severity
    rule: str
    message: str
    location: Optional[str] = None
    element: Optional[str] = None
    wcag_ref: Optional[WcagReference] = Field(default=None, alias="wcagRef")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "severity": "error",
                "rule": "missingAltText",
                "message": "Image missing alt attribute",
                "location": "/static/hero.png",
                "element": "img",
                "wcagRef": {
                    "guideline": "1.1.1",
                    "level": "A",
                    "description": "Images must have alternative text",
                },
            }
        }


class CheckResult(BaseModel):
    """
    Output of one check. Subclasses add the counters specific to a check.

    `checked` is False only when the check failed internally and was
    downgraded to an empty result.
    """
    issues: List[Issue] = Field(default_factory=list)
    passed: int = 0
    checked: bool = True

    class Config:
        frozen = True
        populate_by_name = True


class ImageCheckResult(CheckResult):
    total_images: int = Field(default=0, alias="totalImages")


class HeadingCheckResult(CheckResult):
    total_headings: int = Field(default=0, alias="totalHeadings")
    hierarchy: List[int] = Field(default_factory=list)
    has_h1: bool = Field(default=False, alias="hasH1")


class FormCheckResult(CheckResult):
    total_inputs: int = Field(default=0, alias="totalInputs")


class LinkCheckResult(CheckResult):
    total_links: int = Field(default=0, alias="totalLinks")


class ColorCheckResult(CheckResult):
    checked_elements: int = Field(default=0, alias="checkedElements")


class KeyboardCheckResult(CheckResult):
    focusable_elements: int = Field(default=0, alias="focusableElements")


class AriaCheckResult(CheckResult):
    aria_elements: int = Field(default=0, alias="ariaElements")


class SemanticCheckResult(CheckResult):
    has_main: bool = Field(default=False, alias="hasMain")
    has_nav: bool = Field(default=False, alias="hasNav")
    has_header: bool = Field(default=False, alias="hasHeader")
    has_footer: bool = Field(default=False, alias="hasFooter")


CHECK_RESULT_TYPES = {
    "images": ImageCheckResult,
    "headings": HeadingCheckResult,
    "forms": FormCheckResult,
    "links": LinkCheckResult,
    "colors": ColorCheckResult,
    "keyboard": KeyboardCheckResult,
    "aria": AriaCheckResult,
    "semantic": SemanticCheckResult,
}


def empty_check_result(name: str) -> CheckResult:
    """Empty-but-valid result used when a check could not run."""
    return CHECK_RESULT_TYPES.get(name, CheckResult)(checked=False)


class DisabilityAnalysis(BaseModel):
    """Issues and heuristic score for one disability category"""
    category: DisabilityCategory
    name: str
    description: str
    issues: List[Issue] = Field(default_factory=list)
    score: int = Field(default=100, ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class PageInfo(BaseModel):
    title: str
    has_title: bool = Field(default=False, alias="hasTitle")
    has_lang_attribute: bool = Field(default=False, alias="hasLangAttribute")
    has_viewport_meta: bool = Field(default=False, alias="hasViewportMeta")

    class Config:
        frozen = True
        populate_by_name = True


class ReportSummary(BaseModel):
    total_issues: int = Field(default=0, alias="totalIssues")
    critical_issues: int = Field(default=0, alias="criticalIssues")
    warning_issues: int = Field(default=0, alias="warningIssues")
    passed_checks: int = Field(default=0, alias="passedChecks")
    wcag_level: Literal["AA", "Non-compliant"] = Field(default="AA", alias="wcagLevel")
    overall_score: int = Field(default=100, ge=0, le=100, alias="overallScore")

    class Config:
        frozen = True
        populate_by_name = True


class AnalysisReport(BaseModel):
    """Complete result of analyzing one page"""
    url: str
    analyzed_at: str = Field(alias="analyzedAt")
    page_info: PageInfo = Field(alias="pageInfo")
    checks: Dict[str, SerializeAsAny[CheckResult]]
    disability_analysis: Dict[str, DisabilityAnalysis] = Field(alias="disabilityAnalysis")
    issues: List[Issue]
    summary: ReportSummary

    class Config:
        frozen = True
        populate_by_name = True
