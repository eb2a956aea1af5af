"""Candidate profile models and versioned storage.

Public API:
    - Profile: One immutable profile version
    - Skill, WorkExperience, Education, Language, Certification: Profile parts
    - ProficiencyLevel: Skill proficiency enum
    - ProfileRepository: Append-only SQLite snapshot store
"""

from fitmatch.profile.models import (
    Certification,
    Education,
    Language,
    ProficiencyLevel,
    Profile,
    Skill,
    WorkExperience,
)
from fitmatch.profile.repository import ProfileRepository

__all__ = [
    "Profile",
    "Skill",
    "ProficiencyLevel",
    "WorkExperience",
    "Education",
    "Language",
    "Certification",
    "ProfileRepository",
]
