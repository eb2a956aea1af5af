"""Requirement classification heuristics.

Assigns a requirement type and importance level from the requirement text and
the sentence it was extracted from. Everything here is a pure function of the
input strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from fitmatch.job.models import ImportanceLevel, Job, JobRequirement, RequirementType
from fitmatch.matching.matchers import extract_skill_term, mentions_technology

_OBLIGATION_MARKERS = (
    "required",
    "requires",
    "must",
    "mandatory",
    "essential",
    "necessary",
    "обязательно",
    "обязательный",
    "необходимо",
    "необходим",
    "требуется",
)

_PREFERENCE_MARKERS = (
    "nice to have",
    "nice-to-have",
    "a plus",
    "bonus",
    "preferably",
    "optional",
    "would be great",
    "желательно",
    "будет плюсом",
    "приветствуется",
)

_EDUCATION_RE = re.compile(
    r"\b(?:degrees?|bachelor'?s?|(?<!scrum )master'?s?|ph\.?d|doctorate|diplomas?|"
    r"university|college|graduated?|bsc|msc|b\.sc|m\.sc|b\.s\.|m\.s\.|mba|"
    r"certifications?|certificates?)(?!\w)"
    r"|(?-i:\b(?:BS|BA|MS|MA)\s+(?:in|degree)\b)"
    r"|(?:образование|высшее|бакалавр\w*|магистр\w*|диплом|вуз\w*|университет\w*|"
    r"сертификат\w*)",
    re.IGNORECASE | re.UNICODE,
)

# A seniority word only counts in front of a role noun ("senior developer",
# "lead data engineer"), not as a verb ("lead a team").
SENIORITY_RE = re.compile(
    r"\b(junior|middle|mid-level|senior|lead|principal|staff)\s+(?:[\w+#.-]+\s+){0,2}?"
    r"(?:engineers?|developers?|programmers?|architects?|analysts?|scientists?|"
    r"designers?|administrators?|consultants?|specialists?|managers?|roles?|"
    r"positions?|level|разработчик\w*|инженер\w*|аналитик\w*)\b",
    re.IGNORECASE | re.UNICODE,
)

_EXPERIENCE_RE = re.compile(
    r"(?:\b\d+(?:\.\d+)?\s*\+?\s*(?:-|–|to|до)?\s*\d*\s*\+?\s*"
    r"(?:years?|yrs?|лет|года?|год)\b"
    r"|\b(?:one|two|three|four|five|six|seven|eight|nine|ten)\s+\+?\s*years?\b"
    r"|\btrack record\b|\bexperience as\b"
    r"|\bопыт\s+(?:работы\s+)?(?:от|не менее|более)\b"
    r"|\bcommercial experience\b|\bprofessional experience\b|\bwork experience\b)",
    re.IGNORECASE | re.UNICODE,
)

_SOFT_SKILL_RE = re.compile(
    r"\b(?:communicat\w*|teamwork|team player|collaborat\w*|leadership|"
    r"lead(?:s|ing)?\s+(?:an?\s+|the\s+)?(?:\w+\s+)?teams?|"
    r"interpersonal|problem[- ]solving|critical thinking|self-motivated|"
    r"proactive|ownership|attention to detail|time management|adaptab\w*|"
    r"mentor\w*|коммуникаб\w*|командн\w*|ответственн\w*|лидерск\w*|"
    r"самостоятельн\w*|обучаем\w*|стрессоустойчив\w*)",
    re.IGNORECASE | re.UNICODE,
)

_LANGUAGE_RE = re.compile(
    r"\b(?:english|german|french|spanish|russian|chinese|japanese|"
    r"английск\w*|немецк\w*|французск\w*|испанск\w*|русск\w*)\b",
    re.IGNORECASE | re.UNICODE,
)


@dataclass(frozen=True)
class Classification:
    """Result of classifying a single requirement."""

    type: RequirementType
    importance: ImportanceLevel
    mandatory: bool


def _contains_marker(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.casefold()
    for marker in markers:
        if re.search(rf"(?<!\w){re.escape(marker)}(?!\w)", lowered):
            return True
    return False


def determine_importance_level(context: str) -> ImportanceLevel:
    """Importance from obligation/preference markers in the context.

    Obligation markers win over preference markers when both appear.
    """
    if _contains_marker(context, _OBLIGATION_MARKERS):
        return ImportanceLevel.MANDATORY
    if _contains_marker(context, _PREFERENCE_MARKERS):
        return ImportanceLevel.NICE_TO_HAVE
    return ImportanceLevel.PREFERRED


def is_requirement_mandatory(context: str) -> bool:
    return determine_importance_level(context) == ImportanceLevel.MANDATORY


def _looks_like_named_skill(text: str) -> bool:
    """Short residual term that reads like a product name ("Go", "Apache Airflow", "C++").

    A sentence-initial capital alone does not count for multi-word terms.
    """
    term = extract_skill_term(text)
    words = term.split()
    if not words or len(words) > 3:
        return False
    if any(ch in "+#" for ch in term):
        return True
    if len(words) == 1:
        return any(ch.isupper() for ch in words[0])
    return any(ch.isupper() for word in words[1:] for ch in word)


def determine_requirement_type(text: str) -> RequirementType:
    """Requirement type from keyword heuristics.

    Checked in order: education, experience, soft skill, spoken language
    (classified as other), technology/named skill, then other.
    """
    if _EDUCATION_RE.search(text):
        return RequirementType.EDUCATION
    if _EXPERIENCE_RE.search(text) or SENIORITY_RE.search(text):
        return RequirementType.EXPERIENCE
    if _SOFT_SKILL_RE.search(text):
        return RequirementType.SOFT_SKILL
    if _LANGUAGE_RE.search(text):
        return RequirementType.OTHER
    if mentions_technology(text) or _looks_like_named_skill(text):
        return RequirementType.SKILL
    return RequirementType.OTHER


def classify_requirement(text: str, context: str = "") -> Classification:
    """Classify a requirement by type and importance.

    Args:
        text: The requirement text.
        context: The sentence or bullet the requirement was extracted from.
            Importance markers are searched in both the context and the text.

    Returns:
        The classification; ``mandatory`` is True iff importance is mandatory.
    """
    requirement_type = determine_requirement_type(text)
    importance = determine_importance_level(f"{context} {text}")
    return Classification(
        type=requirement_type,
        importance=importance,
        mandatory=importance == ImportanceLevel.MANDATORY,
    )


def classify(requirement: JobRequirement) -> JobRequirement:
    """Return a fully classified copy of a requirement.

    Pre-classified fields are kept; only missing ones are derived. An explicit
    ``mandatory`` flag without an importance level decides between mandatory
    and the derived non-mandatory level.
    """
    if requirement.is_classified:
        return requirement.model_copy(
            update={"mandatory": requirement.importance == ImportanceLevel.MANDATORY}
        )

    derived = classify_requirement(requirement.text, requirement.context)
    importance = requirement.importance
    if importance is None:
        if requirement.mandatory is True:
            importance = ImportanceLevel.MANDATORY
        elif requirement.mandatory is False and derived.mandatory:
            importance = ImportanceLevel.PREFERRED
        else:
            importance = derived.importance
    return requirement.model_copy(
        update={
            "type": requirement.type or derived.type,
            "importance": importance,
            "mandatory": importance == ImportanceLevel.MANDATORY,
        }
    )


def classify_job(job: Job) -> Job:
    """Return a copy of the job with every requirement classified."""
    return job.model_copy(
        update={"requirements": [classify(req) for req in job.requirements]}
    )
