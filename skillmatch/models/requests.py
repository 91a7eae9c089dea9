from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from skillmatch.models.skills import MatchStatus

# Input schemas for the HTTP layer

class ResumeUploadInput(BaseModel):
    """Resume document as posted by the upload client"""
    filename: str = Field(min_length=1)
    base64_content: Optional[str] = None  # PDF/DOCX/TXT bytes, base64-encoded
    text: Optional[str] = None            # already-extracted plain text

    @model_validator(mode="after")
    def check_content(self):
        if (self.base64_content is None) == (self.text is None):
            raise ValueError("Provide exactly one of 'base64_content' or 'text'")
        return self

class JobCreateInput(BaseModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    description: str = Field(min_length=1)
    required_skills: Optional[List[str]] = None  # derived from the description when omitted

class MatchCreateInput(BaseModel):
    resume_id: str
    job_id: str

class StatusUpdatePayload(BaseModel):
    """Manual reviewer decision on a match"""
    status: MatchStatus

class SkillPreviewInput(BaseModel):
    text: str = ""
    force: bool = False  # extract even when the text is too short to be meaningful
