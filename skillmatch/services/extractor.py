"""
Keyword-spotting skill extractor.

Scans raw resume or job text against the configured vocabularies and returns an
ExtractedProfile with confidence-scored skills, contact details and the raw
experience/education sections. Total over its input: any string yields a
profile, never an exception.
"""
import re
from functools import lru_cache
from typing import Dict, List, Optional, Pattern, Tuple

from skillmatch.models.settings import SkillVocabulary
from skillmatch.models.skills import ExtractedProfile, ExtractionValidity, SkillEntry
from skillmatch.services.settings import get_settings
from skillmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

BASE_CONFIDENCE = 60
PER_OCCURRENCE = 10
CONTEXT_BOOST = 15
MAX_CONTEXT_BOOST = 30
MAX_CONFIDENCE = 95

NAME_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+(?:\s+[A-Z][a-z]+)?$")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
NAME_SCAN_LINES = 5
MAX_NAME_LENGTH = 50

MIN_TEXT_CHARS = 100
MIN_TEXT_WORDS = 50


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def skill_pattern(skill: str) -> str:
    # \b would fail next to symbols such as the "+" in C++
    return rf"(?<!\w){re.escape(skill.lower())}(?!\w)"


class SkillExtractor:
    """Extracts categorized skills and resume sections from plain text"""

    def __init__(self, vocabulary: SkillVocabulary):
        self.vocabulary = vocabulary
        self._patterns: Dict[str, List[Tuple[str, Pattern, List[Pattern]]]] = {}
        for category, skills in vocabulary.categories().items():
            compiled = []
            for skill in skills:
                pattern = skill_pattern(skill)
                contexts = [
                    re.compile(rf"{re.escape(phrase.lower())}[^.]*{pattern}")
                    for phrase in vocabulary.proficiency_phrases
                ]
                compiled.append((skill, re.compile(pattern), contexts))
            self._patterns[category] = compiled

    def extract(self, text: str) -> ExtractedProfile:
        text = text or ""
        normalized = text.lower()

        profile = ExtractedProfile(
            technical=self._extract_category(normalized, "technical"),
            soft=self._extract_category(normalized, "soft"),
            tools=self._extract_category(normalized, "tools"),
            experience_text=self.extract_section(text, "experience"),
            education_text=self.extract_section(text, "education"),
            candidate_name=self.extract_name(text),
            candidate_email=self.extract_email(text),
        )
        logger.debug(
            f"Extracted {len(profile.technical)} technical, {len(profile.soft)} soft, "
            f"{len(profile.tools)} tool skills from {len(text)} chars"
        )
        return profile

    def _extract_category(self, normalized: str, category: str) -> List[SkillEntry]:
        found = []
        for skill, pattern, contexts in self._patterns[category]:
            occurrences = len(pattern.findall(normalized))
            if not occurrences:
                continue
            boost = min(MAX_CONTEXT_BOOST, CONTEXT_BOOST * sum(1 for c in contexts if c.search(normalized)))
            base = BASE_CONFIDENCE + PER_OCCURRENCE * occurrences
            found.append(SkillEntry(skill=skill, confidence=min(MAX_CONFIDENCE, round_half_up(base + boost))))
        # stable sort keeps vocabulary order on ties
        return sorted(found, key=lambda entry: -entry.confidence)

    @staticmethod
    def extract_name(text: str) -> Optional[str]:
        for line in text.split("\n")[:NAME_SCAN_LINES]:
            candidate = line.strip()
            if NAME_RE.match(candidate) and len(candidate) < MAX_NAME_LENGTH:
                return candidate
        return None

    @staticmethod
    def extract_email(text: str) -> Optional[str]:
        match = EMAIL_RE.search(text)
        return match.group(0) if match else None

    def extract_section(self, text: str, section: str) -> str:
        """Raw text of the "experience" or "education" section, "" when absent."""
        keywords = {
            "experience": self.vocabulary.experience_keywords,
            "education": self.vocabulary.education_keywords,
        }.get(section)
        if keywords is None:
            raise ValueError(f"Unknown resume section: {section!r}")
        headers = tuple(h for h in self.vocabulary.section_headers if h != section)
        lines = text.split("\n")

        start = next(
            (i for i, line in enumerate(lines) if any(k in line.lower().strip() for k in keywords)),
            None,
        )
        if start is None:
            return ""

        end = next(
            (i for i in range(start + 1, len(lines)) if lines[i].lower().strip().startswith(headers)),
            len(lines),
        )
        return "\n".join(lines[start:end]).strip()

    def derive_required_skills(self, description: str, limit: int = 10) -> List[str]:
        """Top technical and tool skills of a job description, best first."""
        profile = self.extract(description)
        ranked = sorted(profile.technical + profile.tools, key=lambda entry: -entry.confidence)
        return [entry.skill for entry in ranked[:limit]]


def is_valid_for_extraction(text: str) -> ExtractionValidity:
    stripped = (text or "").strip()
    if not stripped:
        return ExtractionValidity(valid=False, reason="No content provided")
    if len(stripped) < MIN_TEXT_CHARS:
        return ExtractionValidity(valid=False, reason="Content too short for meaningful analysis")
    if len(stripped.split()) < MIN_TEXT_WORDS:
        return ExtractionValidity(valid=False, reason="Content should contain at least 50 words")
    return ExtractionValidity(valid=True)


@lru_cache(maxsize=1)
def get_extractor() -> SkillExtractor:
    return SkillExtractor(get_settings().vocabulary)


def extract(text: str) -> ExtractedProfile:
    return get_extractor().extract(text)


def derive_required_skills(description: str) -> List[str]:
    return get_extractor().derive_required_skills(description, get_settings().rules.max_required_skills)
