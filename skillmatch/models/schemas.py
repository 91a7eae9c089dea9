from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from skillmatch.models.skills import ExtractedProfile, JobRequirement, MatchRecord

# -------- Resumes --------
class ResumeModel(BaseModel):
    resume_id: str
    filename: str
    raw_text: str
    profile: ExtractedProfile = Field(default_factory=ExtractedProfile)
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)

# -------- Job Postings --------
class JobModel(BaseModel):
    job_id: str
    title: str
    company: str
    description: str
    required_skills: List[str] = []
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def to_requirement(self) -> JobRequirement:
        return JobRequirement(
            title=self.title,
            company=self.company,
            description_text=self.description,
            required_skills=self.required_skills,
        )

# -------- Matches --------
class MatchModel(MatchRecord):
    match_id: str
    resume_id: str
    job_id: str
    status_overridden: bool = False   # set once a reviewer changes the status by hand
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
