from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class AnalysisRequest(BaseModel):
    """Request schema for a full page analysis"""
    url: str = Field(..., description="Absolute http(s) URL of the page to analyze")
    include_ai: bool = Field(default=True, description="Attach remediation suggestions")

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com",
                "include_ai": True,
            }
        }


class DisabilityAnalysisRequest(BaseModel):
    """Request schema for an analysis focused on one disability category"""
    url: str
    disability_type: Literal["visual", "auditory", "motor", "cognitive", "all"] = "all"

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com",
                "disability_type": "motor",
            }
        }


class SuggestionRequest(BaseModel):
    """Request schema for generating suggestions from an existing report"""
    analysis_results: Dict[str, Any]
