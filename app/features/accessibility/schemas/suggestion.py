from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Suggestion(BaseModel):
    """Remediation advice for one issue type (or the whole report)"""
    issue_type: str = Field(alias="issueType")
    issue_message: str = Field(default="", alias="issueMessage")
    suggestion_text: str = Field(alias="suggestionText")
    priority: Literal["high", "medium"] = "medium"
    estimated_fix_time: str = Field(default="10-30 minutes", alias="estimatedFixTime")
    is_overall: bool = Field(default=False, alias="isOverall")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "issueType": "missingAltText",
                "issueMessage": "Image missing alt attribute",
                "suggestionText": 'Add descriptive alt attribute: <img src="img.png" alt="Description">',
                "priority": "high",
                "estimatedFixTime": "5-10 minutes",
                "isOverall": False,
            }
        }


class SuggestionBatch(BaseModel):
    success: bool = True
    suggestions: List[Suggestion] = Field(default_factory=list)
    ai_used: bool = Field(default=False, alias="aiUsed")
    message: Optional[str] = None

    class Config:
        populate_by_name = True
