from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""
    model_config = ConfigDict(populate_by_name=True)


class SuggestionType(str, Enum):
    CONTENT = "content"
    FORMAT = "format"
    KEYWORD = "keyword"
    STRUCTURE = "structure"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ImproveAction(str, Enum):
    AUTO_IMPROVE = "auto-improve"
    CHAT_COMMAND = "chat-command"


class Suggestion(CamelModel):
    id: str
    type: SuggestionType
    section: str
    priority: Priority
    title: str
    description: str
    suggestion_text: str = Field(alias="suggestionText")
    applied: bool = False


class SuggestionsRequest(CamelModel):
    resume_content: str = Field(default="", alias="resumeContent")
    target_role: str = Field(default="", alias="targetRole")
    target_area: str = Field(default="", alias="targetArea")
    current_section: Optional[str] = Field(default=None, alias="currentSection")


class SuggestionsResponse(CamelModel):
    suggestions: List[Suggestion]


class ImproveRequest(CamelModel):
    resume_content: Optional[str] = Field(default=None, alias="resumeContent")
    target_role: Optional[str] = Field(default=None, alias="targetRole")
    target_area: Optional[str] = Field(default=None, alias="targetArea")
    # Kept as a plain string so unknown actions surface as InvalidRequest
    action: Optional[str] = None
    command: Optional[str] = None


class ImproveResult(CamelModel):
    success: bool = True
    improved_content: str = Field(alias="improvedContent")
    message: str


class AnalyzeRequest(CamelModel):
    resume_content: Optional[str] = Field(default=None, alias="resumeContent")
    target_role: Optional[str] = Field(default=None, alias="targetRole")
    target_area: Optional[str] = Field(default=None, alias="targetArea")


class Improvement(CamelModel):
    category: StrictStr
    issue: StrictStr
    suggestion: StrictStr
    priority: StrictStr
    section: StrictStr


class ContentSuggestion(CamelModel):
    section: StrictStr
    current_text: StrictStr = Field(alias="currentText")
    suggested_text: StrictStr = Field(alias="suggestedText")
    reason: StrictStr


class AnalysisResult(CamelModel):
    # Strict scalars: model output is rejected, not coerced
    overall_score: StrictInt = Field(alias="overallScore", ge=0, le=100)
    strengths: List[StrictStr]
    improvements: List[Improvement]
    missing_keywords: List[StrictStr] = Field(alias="missingKeywords")
    enhancement_areas: List[StrictStr] = Field(alias="enhancementAreas")
    content_suggestions: List[ContentSuggestion] = Field(alias="contentSuggestions")

    @field_validator("missing_keywords")
    @classmethod
    def dedupe_keywords(cls, value: List[str]) -> List[str]:
        seen = set()
        unique = []
        for keyword in value:
            if keyword not in seen:
                seen.add(keyword)
                unique.append(keyword)
        return unique


class AnalyzeResponse(CamelModel):
    success: bool = True
    analysis: AnalysisResult


class ResumeRecord(CamelModel):
    id: str
    file_name: str = Field(alias="fileName")
    content: str
    uploaded_at: str = Field(alias="uploadedAt")


class ResumeSection(CamelModel):
    id: str
    title: str
    content: str
    editable: bool = True


class UploadResponse(CamelModel):
    success: bool = True
    resume_id: str = Field(alias="resumeId")
    content: str
    file_name: str = Field(alias="fileName")


class ResumeResponse(CamelModel):
    success: bool = True
    content: str
    file_name: str = Field(alias="fileName")
    sections: List[ResumeSection]
