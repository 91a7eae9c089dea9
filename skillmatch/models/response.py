from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from skillmatch.models.skills import ExtractedProfile


class SkillPreviewResponse(BaseModel):
    valid: bool
    reason: Optional[str] = None
    profile: Optional[ExtractedProfile] = None


class MatchExport(BaseModel):
    match_id: str
    candidate_name: str
    job_title: Optional[str] = None
    overall_score: int
    technical_score: int
    experience_score: int
    cultural_score: int
    matched_skills: List[str]
    missing_skills: List[str]
    strengths: List[str]
    concerns: List[str]
    status: str
    exported_at: datetime = Field(default_factory=datetime.utcnow)


class StatsResponse(BaseModel):
    total_resumes: int
    total_jobs: int
    total_matches: int
    avg_match_score: float
    status_counts: Dict[str, int]
