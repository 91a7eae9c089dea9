"""
Matcher configuration models: skill vocabularies and scoring rules
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Dict, Tuple

from skillmatch.helpers import vocabularies as defaults


def _clean_terms(values: Tuple[str, ...]) -> Tuple[str, ...]:
    cleaned = tuple(v.strip() for v in values)
    if any(not v for v in cleaned):
        raise ValueError("Vocabulary entries must be non-empty strings")
    return cleaned


class SkillVocabulary(BaseModel):
    """Fixed vocabularies the extractor scans for"""
    model_config = ConfigDict(frozen=True)

    technical: Tuple[str, ...] = Field(default=defaults.TECHNICAL_SKILLS, description="Technical skills")
    soft: Tuple[str, ...] = Field(default=defaults.SOFT_SKILLS, description="Soft skills")
    tools: Tuple[str, ...] = Field(default=defaults.TOOLS, description="Tools and applications")
    proficiency_phrases: Tuple[str, ...] = Field(default=defaults.PROFICIENCY_PHRASES)
    experience_keywords: Tuple[str, ...] = Field(default=defaults.EXPERIENCE_KEYWORDS)
    education_keywords: Tuple[str, ...] = Field(default=defaults.EDUCATION_KEYWORDS)
    section_headers: Tuple[str, ...] = Field(default=defaults.SECTION_HEADERS)

    @field_validator(
        "technical", "soft", "tools", "proficiency_phrases",
        "experience_keywords", "education_keywords", "section_headers",
    )
    @classmethod
    def validate_terms(cls, v):
        return _clean_terms(v)

    @model_validator(mode="after")
    def validate_disjoint(self):
        seen: Dict[str, str] = {}
        for category in ("technical", "soft", "tools"):
            for skill in getattr(self, category):
                key = skill.lower()
                if key in seen and seen[key] != category:
                    raise ValueError(f'Skill "{skill}" appears in both {seen[key]} and {category}')
                seen[key] = category
        return self

    def categories(self) -> Dict[str, Tuple[str, ...]]:
        return {"technical": self.technical, "soft": self.soft, "tools": self.tools}


class ScoringRules(BaseModel):
    """Weights, defaults and thresholds used by the compatibility scorer"""
    model_config = ConfigDict(frozen=True)

    technical_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    experience_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    cultural_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    default_technical_score: int = Field(default=85, ge=0, le=100, description="Technical score when a job lists no skills")

    important_soft_skills: Tuple[str, ...] = Field(default=defaults.IMPORTANT_SOFT_SKILLS)
    testing_skills: Tuple[str, ...] = Field(default=defaults.TESTING_SKILLS)
    critical_skills: Tuple[str, ...] = Field(default=defaults.CRITICAL_SKILLS)

    qualified_min: int = Field(default=80, ge=0, le=100, description="Minimum overall score for 'qualified'")
    review_min: int = Field(default=60, ge=0, le=100, description="Minimum overall score for 'under_review'")

    max_strengths: int = Field(default=4, ge=0, le=4)
    max_concerns: int = Field(default=3, ge=0, le=3)
    max_required_skills: int = Field(default=10, ge=1, le=10)

    @field_validator("important_soft_skills", "testing_skills", "critical_skills")
    @classmethod
    def lowercase_terms(cls, v):
        return tuple(t.lower() for t in _clean_terms(v))

    @model_validator(mode="after")
    def validate_rules(self):
        total = self.technical_weight + self.experience_weight + self.cultural_weight
        if abs(total - 1.0) > 0.01:  # Allow small floating point errors
            raise ValueError("Component weights must sum to 1.0")
        if self.review_min >= self.qualified_min:
            raise ValueError("review_min must be less than qualified_min")
        return self


class MatcherSettings(BaseModel):
    """Complete matcher configuration, loaded once per process"""
    model_config = ConfigDict(frozen=True)

    vocabulary: SkillVocabulary = Field(default_factory=SkillVocabulary)
    rules: ScoringRules = Field(default_factory=ScoringRules)
