import os

# console-only WARNING logging, no log files
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.pop("SKILLMATCH_CONFIG", None)

import pytest

from skillmatch.models.skills import ExtractedProfile, SkillEntry


SAMPLE_RESUME = """Jane Doe
jane.doe@example.com | +1 555 0100

SUMMARY
Frontend developer experienced with React and TypeScript.

EXPERIENCE
Senior Frontend Engineer, Acme Corp (2018 - present)
6 years of experience building web apps with React, TypeScript and Jest.
Led a team of five engineers; strong communication and leadership.

EDUCATION
BSc Computer Science, State University

SKILLS
React, TypeScript, JavaScript, Jest, Docker, Figma
"""

SAMPLE_JOB_DESCRIPTION = (
    "We are hiring a senior frontend engineer with 5 years experience. "
    "You will build products with React, TypeScript and GraphQL. "
    "Strong communication skills are essential."
)


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME


@pytest.fixture
def sample_job_description():
    return SAMPLE_JOB_DESCRIPTION


@pytest.fixture
def frontend_profile():
    return ExtractedProfile(
        technical=[SkillEntry(skill="React", confidence=90), SkillEntry(skill="TypeScript", confidence=80)],
        soft=[SkillEntry(skill="Communication", confidence=80)],
        tools=[],
        experience_text="Senior frontend developer with 6 years of experience in React",
        education_text="BSc Computer Science",
        candidate_name="Jane Doe",
        candidate_email="jane.doe@example.com",
    )
