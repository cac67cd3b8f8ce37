import asyncio
import logging

from fastapi import APIRouter, status

from app.features.accessibility.schemas.analysis import (
    AnalysisRequest,
    DisabilityAnalysisRequest,
    SuggestionRequest,
)
from app.features.accessibility.schemas.report import AnalysisReport
from app.features.accessibility.services.analyzer import AccessibilityAnalyzer
from app.features.accessibility.services.guidance import (
    DISABILITY_RESOURCES,
    WCAG_INFO,
    WCAG_LEVELS,
)
from app.features.accessibility.services.suggestions import SuggestionConfig, SuggestionGateway
from app.platform.response import api_response
from app.platform.utils.url_validator import validate_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


def _report_payload(report: AnalysisReport) -> dict:
    return report.model_dump(by_alias=True, mode="json")


async def _suggestions_payload(report) -> dict:
    gateway = SuggestionGateway(SuggestionConfig.from_settings())
    try:
        batch = await asyncio.to_thread(gateway.generate_suggestions, report)
    except Exception as e:
        logger.exception(f"Suggestion generation failed: {e}")
        return {"success": False, "suggestions": [], "aiUsed": False, "message": str(e)}
    return batch.model_dump(by_alias=True, mode="json")


@router.post("/analyze", summary="Analyze a page for WCAG 2.1 AA issues")
async def analyze(request: AnalysisRequest):
    """
    Load the page in a headless browser, run every check and the
    disability-impact assessment, and optionally attach remediation
    suggestions.

    Navigation failures return 502, unparseable pages 422.
    """
    is_valid, url, error = validate_url(request.url)
    if not is_valid:
        return api_response(message=error, status_code=status.HTTP_400_BAD_REQUEST)

    report = await AccessibilityAnalyzer.analyze_url_async(url)
    payload = _report_payload(report)

    if request.include_ai:
        logger.info(f"Generating suggestions for {url}")
        payload["aiSuggestions"] = await _suggestions_payload(report)

    return api_response(
        data=payload,
        message="Analysis completed successfully",
        status_code=status.HTTP_200_OK,
    )


@router.post("/analyze-disability", summary="Analyze a page for one disability category")
async def analyze_disability(request: DisabilityAnalysisRequest):
    is_valid, url, error = validate_url(request.url)
    if not is_valid:
        return api_response(message=error, status_code=status.HTTP_400_BAD_REQUEST)

    logger.info(f"Starting disability-focused analysis for: {url} (type: {request.disability_type})")
    report = await AccessibilityAnalyzer.analyze_url_async(url)
    payload = _report_payload(report)

    if request.disability_type != "all":
        focused = request.disability_type
        payload["disabilityAnalysis"] = {focused: payload["disabilityAnalysis"][focused]}
        payload["focusedType"] = focused

    return api_response(
        data=payload,
        message="Disability analysis completed successfully",
        status_code=status.HTTP_200_OK,
    )


@router.post("/ai-suggestions", summary="Generate suggestions for an existing report")
async def ai_suggestions(request: SuggestionRequest):
    if not request.analysis_results:
        return api_response(
            message="Analysis results are required",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return api_response(
        data=await _suggestions_payload(request.analysis_results),
        message="Suggestions generated",
        status_code=status.HTTP_200_OK,
    )


@router.get("/disability-resources", summary="Assistive technology and testing resources")
async def disability_resources():
    return api_response(
        data={"resources": DISABILITY_RESOURCES, "wcagGuidelines": WCAG_LEVELS},
        message="Disability resources retrieved",
    )


@router.get("/wcag-info", summary="WCAG 2.1 principles overview")
async def wcag_info():
    return api_response(data={"wcag": WCAG_INFO}, message="WCAG information retrieved")
