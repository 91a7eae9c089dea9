"""
Deterministic resume-to-job compatibility scoring.

All scoring functions are pure - same inputs produce same outputs.
"""
import re
from functools import lru_cache
from typing import List, Optional, Tuple

from skillmatch.models.settings import ScoringRules
from skillmatch.models.skills import ExtractedProfile, JobRequirement, MatchRecord, MatchStatus, SkillEntry
from skillmatch.services.extractor import round_half_up
from skillmatch.services.settings import get_settings
from skillmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

YEAR_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience"),
    re.compile(r"(\d+)\+?\s*years?\s*in"),
    re.compile(r"(\d+)\+?\s*years?\s*with"),
    re.compile(r"experience\s*of\s*(\d+)\+?\s*years?"),
]

SENIOR_JOB_TERMS = ("senior", "lead")
SENIOR_CANDIDATE_TERMS = ("senior", "lead", "architect", "principal")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def extract_years_of_experience(text: str) -> int:
    """First "N years" figure found in the text, 0 when there is none."""
    text = text.lower()
    for pattern in YEAR_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return 0


def split_required_skills(required: List[str], candidate_skills: List[str]) -> Tuple[List[str], List[str]]:
    candidate = {s.lower() for s in candidate_skills}
    matched = [s for s in required if s.lower() in candidate]
    missing = [s for s in required if s.lower() not in candidate]
    return matched, missing


def determine_status(overall_score: int, rules: Optional[ScoringRules] = None) -> MatchStatus:
    rules = rules or ScoringRules()
    if overall_score >= rules.qualified_min:
        return MatchStatus.QUALIFIED
    if overall_score >= rules.review_min:
        return MatchStatus.UNDER_REVIEW
    return MatchStatus.NOT_QUALIFIED


class CompatibilityScorer:
    """Weighted technical / experience / cultural match between a profile and a job"""

    def __init__(self, rules: ScoringRules):
        self.rules = rules

    def technical_score(self, technical: List[SkillEntry], required_skills: List[str]) -> int:
        if not required_skills:
            logger.debug(f"No required skills specified, score = {self.rules.default_technical_score}")
            return self.rules.default_technical_score

        matched, _ = split_required_skills(required_skills, [s.skill for s in technical])
        match_pct = len(matched) / len(required_skills) * 100

        avg_confidence = sum(s.confidence for s in technical) / len(technical) if technical else 0
        confidence_boost = (avg_confidence - 60) * 0.3

        score = max(0, min(95, round_half_up(match_pct + confidence_boost)))
        logger.debug(
            f"Technical: {len(matched)}/{len(required_skills)} required = {match_pct:.2f}%, "
            f"confidence boost {confidence_boost:.2f}, score = {score}"
        )
        return score

    def experience_score(self, experience_text: str, job_description: str) -> int:
        experience_text = experience_text.lower()
        job_text = job_description.lower()

        candidate_years = extract_years_of_experience(experience_text)
        required_years = extract_years_of_experience(job_text)

        score = 75
        if required_years > 0 and candidate_years > 0:
            if candidate_years >= required_years:
                score += 20
            elif candidate_years >= required_years * 0.8:
                score += 10
            else:
                score -= 15

        if any(term in job_text for term in SENIOR_JOB_TERMS):
            if any(term in experience_text for term in SENIOR_CANDIDATE_TERMS):
                score += 15
            else:
                score -= 10

        score = clamp(score, 40, 95)
        logger.debug(f"Experience: candidate {candidate_years}y vs required {required_years}y, score = {score}")
        return score

    def cultural_score(self, soft: List[SkillEntry], job_description: str) -> int:
        job_text = job_description.lower()
        score = 70

        for skill in self.rules.important_soft_skills:
            if skill in job_text:
                has_skill = any(skill in s.skill.lower() and s.confidence > 70 for s in soft)
                score += 8 if has_skill else -5

        score += min(15, 3 * len(soft))

        score = clamp(score, 50, 95)
        logger.debug(f"Cultural fit: {len(soft)} soft skills, score = {score}")
        return score

    def strengths(self, profile: ExtractedProfile, matched: List[str]) -> List[str]:
        strengths = []

        top_technical = [s.skill for s in profile.technical if s.confidence > 85][:3]
        if top_technical:
            strengths.append(f"Strong {', '.join(top_technical)} experience")

        if matched:
            strengths.append(f"Meets {len(matched)} key requirements: {', '.join(matched[:3])}")

        experience_text = profile.experience_text.lower()
        if "senior" in experience_text or "lead" in experience_text:
            strengths.append("Demonstrates senior-level experience and leadership")

        if any(s.skill.lower() in self.rules.testing_skills for s in profile.technical):
            strengths.append("Strong testing and quality assurance background")

        return strengths[:self.rules.max_strengths]

    def concerns(self, missing: List[str], experience_score: int) -> List[str]:
        concerns = []

        if missing:
            concerns.append(f"Missing experience with: {', '.join(missing[:3])}")

        if experience_score < 70:
            concerns.append("May not meet the required experience level for this role")

        if any(s.lower() in self.rules.critical_skills for s in missing):
            concerns.append("Lacks core frontend development skills")

        return concerns[:self.rules.max_concerns]

    def score(self, profile: ExtractedProfile, job: JobRequirement) -> MatchRecord:
        technical = self.technical_score(profile.technical, job.required_skills)
        experience = self.experience_score(profile.experience_text, job.description_text)
        cultural = self.cultural_score(profile.soft, job.description_text)

        overall = round_half_up(
            self.rules.technical_weight * technical
            + self.rules.experience_weight * experience
            + self.rules.cultural_weight * cultural
        )

        matched, missing = split_required_skills(job.required_skills, profile.all_skill_names())
        status = determine_status(overall, self.rules)

        logger.info(
            f"Match for '{job.title}': overall {overall} "
            f"(technical {technical}, experience {experience}, cultural {cultural}) -> {status.value}"
        )

        return MatchRecord(
            overall_score=overall,
            technical_score=technical,
            experience_score=experience,
            cultural_score=cultural,
            matched_skills=matched,
            missing_skills=missing,
            strengths=self.strengths(profile, matched),
            concerns=self.concerns(missing, experience),
            status=status,
        )


@lru_cache(maxsize=1)
def get_scorer() -> CompatibilityScorer:
    return CompatibilityScorer(get_settings().rules)


def score(profile: ExtractedProfile, job: JobRequirement) -> MatchRecord:
    return get_scorer().score(profile, job)
