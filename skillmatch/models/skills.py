from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchStatus(str, Enum):
    QUALIFIED = "qualified"
    UNDER_REVIEW = "under_review"
    NOT_QUALIFIED = "not_qualified"


class SkillEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: str = Field(min_length=1)
    confidence: int = Field(ge=0, le=100)


class ExtractedProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    technical: List[SkillEntry] = Field(default_factory=list)
    soft: List[SkillEntry] = Field(default_factory=list)
    tools: List[SkillEntry] = Field(default_factory=list)
    experience_text: str = ""
    education_text: str = ""
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None

    def skill_names(self, category: str) -> List[str]:
        return [entry.skill for entry in getattr(self, category)]

    def all_skill_names(self) -> List[str]:
        return self.skill_names("technical") + self.skill_names("soft") + self.skill_names("tools")


class JobRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    description_text: str = ""
    required_skills: List[str] = Field(default_factory=list)

    @field_validator("required_skills")
    @classmethod
    def normalize_required_skills(cls, v):
        # ordered, case-insensitive set capped at 10
        out, seen = [], set()
        for skill in v:
            name = skill.strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                out.append(name)
        return out[:10]


class MatchRecord(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    overall_score: int = Field(ge=0, le=100)
    technical_score: int = Field(ge=0, le=100)
    experience_score: int = Field(ge=0, le=100)
    cultural_score: int = Field(ge=0, le=100)
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list, max_length=4)
    concerns: List[str] = Field(default_factory=list, max_length=3)
    status: MatchStatus


class ExtractionValidity(BaseModel):
    valid: bool
    reason: Optional[str] = None
