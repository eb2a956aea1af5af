"""Per-requirement comparison of a job requirement against a profile."""

from __future__ import annotations

import logging
import re
from datetime import date

from fitmatch.job.models import JobRequirement, RequirementType
from fitmatch.matching.classifier import SENIORITY_RE, classify
from fitmatch.matching.config import MatchingConfig, get_matching_config
from fitmatch.matching.matchers import (
    candidate_terms,
    canonicalize_skill,
    content_tokens,
    expand_skills,
    extract_skill_term,
    overlap_ratio,
    skills_match,
    stem,
    tokenize,
)
from fitmatch.matching.models import ComparisonResult
from fitmatch.profile.models import Profile, WorkExperience

logger = logging.getLogger(__name__)

_DAYS_PER_YEAR = 365.25

_NUMBER_WORDS = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
}

_YEARS_UNIT = r"(?:years?|yrs?|лет|года|год)"
_YEARS_RANGE_RE = re.compile(
    rf"(\d+(?:\.\d+)?)\s*(?:-|–|to|до)\s*\d+(?:\.\d+)?\s*\+?\s*{_YEARS_UNIT}",
    re.IGNORECASE | re.UNICODE,
)
_YEARS_SINGLE_RE = re.compile(
    rf"(\d+(?:\.\d+)?)\s*\+?\s*{_YEARS_UNIT}", re.IGNORECASE | re.UNICODE
)

_SENIORITY_YEARS: dict[str, float] = {
    "junior": 1.0,
    "middle": 3.0,
    "mid-level": 3.0,
    "senior": 5.0,
    "lead": 6.0,
    "staff": 7.0,
    "principal": 8.0,
}

# Words that describe experience in general rather than a specific domain.
_GENERIC_EXPERIENCE_WORDS = frozenset(
    {
        "years", "year", "yrs", "yr", "least", "minimum", "min", "more", "than",
        "over", "plus", "commercial", "professional", "industry", "hands-on",
        "track", "record", "proven", "demonstrated", "practical", "previous",
        "prior", "total", "overall", "development", "developing", "software",
        "engineering", "field", "as", "лет", "года", "год", "не", "менее",
        "более", "коммерческой", "коммерческий", "разработки", "junior",
        "middle", "mid-level", "senior", "lead", "staff", "principal",
    }
)

_EDUCATION_LEVELS: list[tuple[int, re.Pattern[str]]] = [
    (
        5,
        re.compile(
            r"\b(?:ph\.?\s?d|doctor|doctorate|d\.phil)(?!\w)"
            r"|кандидат\w* наук|доктор\w* наук|аспирантур\w*",
            re.IGNORECASE | re.UNICODE,
        ),
    ),
    (
        4,
        re.compile(
            r"\b(?<!scrum )(?:master'?s?|msc|m\.\s?sc\.?|m\.s\.?|m\.a\.|mba|meng)(?!\w)"
            r"|(?-i:\b(?:MS|MA)\b)|магистр\w*",
            re.IGNORECASE | re.UNICODE,
        ),
    ),
    (
        3,
        re.compile(
            r"\b(?:bachelor'?s?|bsc|b\.\s?sc\.?|b\.s\.?|b\.a\.?|beng|undergraduate|"
            r"university degree)(?!\w)|(?-i:\b(?:BS|BA)\b)"
            r"|бакалавр\w*|высшее|специалитет|специалист",
            re.IGNORECASE | re.UNICODE,
        ),
    ),
    (
        2,
        re.compile(
            r"\b(?:associate'?s?|college)(?!\w)|колледж|среднее специальное",
            re.IGNORECASE | re.UNICODE,
        ),
    ),
    (
        1,
        re.compile(r"\b(?:high school|secondary)\b|школ\w*|среднее", re.IGNORECASE | re.UNICODE),
    ),
]

_FIELD_RE = re.compile(
    r"\b(?:in|of|по специальности|по направлению|по)\s+([^,;.()]+)",
    re.IGNORECASE | re.UNICODE,
)
_FIELD_TAIL_RE = re.compile(
    r"\s+(?:or|или)\s+(?:a\s+)?(?:related|equivalent|similar|смежн\w*|аналогичн\w*).*$"
    r"|\s+(?:or|или)\s+equivalent.*$|\s+(?:is|are)\s+.*$|\s+(?:required|preferred)\b.*$",
    re.IGNORECASE | re.UNICODE,
)
_DEGREE_WORDS_RE = re.compile(
    r"\b(?:degree|diploma|science\s+degree)\b", re.IGNORECASE | re.UNICODE
)
_CERTIFICATION_RE = re.compile(r"certif\w*|сертификат\w*", re.IGNORECASE | re.UNICODE)


class FeatureComparator:
    """Compares one requirement against the matching part of a profile.

    Comparisons never raise on missing profile data; absent features score 0.
    The only failure is a malformed work history date range, raised as
    ``ValueError`` for the scorer to wrap.
    """

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def compare(
        self,
        requirement: JobRequirement,
        profile: Profile,
        today: date | None = None,
    ) -> ComparisonResult:
        """Score how well the profile satisfies a requirement.

        Args:
            requirement: The requirement; classified on the fly if needed.
            profile: The profile version being scored.
            today: Reference date for open-ended roles (defaults to today).

        Returns:
            Score in [0, 1], satisfied flag and a one-line rationale.
        """
        if not requirement.is_classified:
            requirement = classify(requirement)

        if requirement.type == RequirementType.SKILL:
            score, rationale = self.compare_skill(requirement, profile)
        elif requirement.type == RequirementType.EXPERIENCE:
            score, rationale = self.compare_experience(
                requirement, profile, today or date.today()
            )
        elif requirement.type == RequirementType.EDUCATION:
            score, rationale = self.compare_education(requirement, profile)
        else:
            score, rationale = self.compare_text(requirement, profile)

        score = min(1.0, max(0.0, score))
        satisfied = score >= self.config.satisfaction_threshold
        logger.debug(
            "Compared %s requirement %r: score=%.2f satisfied=%s",
            requirement.type.value if requirement.type else "unknown",
            requirement.text,
            score,
            satisfied,
        )
        return ComparisonResult(score=score, satisfied=satisfied, rationale=rationale)

    def compare_skill(
        self, requirement: JobRequirement, profile: Profile
    ) -> tuple[float, str]:
        """Match the requested skill against profile skills by name.

        The best-scoring matching skill wins. Skills that only appear in work
        history (or are implied by listed skills) count as beginner evidence.
        """
        term = extract_skill_term(requirement.text)
        terms = candidate_terms(requirement.text) | {canonicalize_skill(term)}

        best_score = 0.0
        best_name: str | None = None
        best_level: str | None = None
        for skill in profile.skills:
            if not self._skill_matches(skill.name, term, terms):
                continue
            score = self.config.proficiency_scores[skill.proficiency_level]
            if score > best_score:
                best_score = score
                best_name = skill.name
                best_level = skill.proficiency_level.value

        if best_name is not None:
            return best_score, f"Has '{best_name}' at {best_level} level"

        evidence: list[str] = []
        for exp in profile.work_experience:
            evidence.extend(exp.skills_used)
        evidence.extend(expand_skills([skill.name for skill in profile.skills]))
        for name in evidence:
            if self._skill_matches(name, term, terms):
                return (
                    self.config.skills_used_score,
                    f"'{name}' appears in work history but not in the skills list",
                )

        return 0.0, f"No skill matching '{term}' in profile"

    def _skill_matches(self, name: str, term: str, terms: set[str]) -> bool:
        if canonicalize_skill(name) in terms:
            return True
        # "Python 3.11" on the profile still covers a plain "Python" requirement.
        canonical_term = canonicalize_skill(term)
        if canonical_term and canonical_term in candidate_terms(name):
            return True
        return skills_match(
            term,
            name,
            fuzzy=self.config.skill_fuzzy_match,
            threshold=self.config.skill_fuzzy_threshold,
        )

    def compare_experience(
        self, requirement: JobRequirement, profile: Profile, today: date
    ) -> tuple[float, str]:
        """Compare required years against merged relevant work history.

        Roles count as relevant when their title, description or skills
        mention one of the requirement's domain keywords; with no keywords
        every role counts.
        """
        required_years = parse_required_years(requirement.text)
        keywords = _experience_keywords(requirement.text)

        if keywords:
            relevant = [
                exp for exp in profile.work_experience if _role_mentions(exp, keywords)
            ]
        else:
            relevant = list(profile.work_experience)

        actual_years = total_years(relevant, today)

        if required_years is None:
            if relevant:
                return 1.0, f"Has relevant experience ({actual_years:.1f} years)"
            if keywords:
                return 0.0, f"No experience mentioning {', '.join(keywords)}"
            return 0.0, "No work experience listed"

        score = min(1.0, actual_years / required_years)
        return (
            score,
            f"{actual_years:.1f} of {required_years:g} required years of "
            + ("relevant " if keywords else "")
            + "experience",
        )

    def compare_education(
        self, requirement: JobRequirement, profile: Profile
    ) -> tuple[float, str]:
        """Compare required degree level and field against education entries."""
        text = requirement.text

        if _CERTIFICATION_RE.search(text):
            cert_score, cert_rationale = self._compare_certifications(text, profile)
            if cert_score > 0.0 or education_level(text) is None:
                return cert_score, cert_rationale

        required_level = education_level(text)
        required_field = parse_required_field(text)

        if not profile.education:
            return 0.0, "No education listed"

        if required_level is None and required_field is None:
            return 1.0, "Has formal education"

        best = 0.0
        best_reason = "Education does not match level or field"
        for entry in profile.education:
            level = education_level(entry.degree)
            level_ok = required_level is None or (
                level is not None and level >= required_level
            )
            field_ok = required_field is None or fields_match(
                required_field, entry.field or entry.degree
            )

            if level_ok and field_ok:
                return 1.0, f"{entry.degree} in {entry.field or 'n/a'} meets requirement"

            score = 0.0
            reason = best_reason
            if required_field is None:
                if level is not None and level == required_level - 1:
                    score, reason = 0.5, "One level below education requirement"
            elif required_level is None:
                if level is not None and level >= 3:
                    score, reason = 0.5, f"Has a degree, but in {entry.field or 'another field'}"
            elif field_ok:
                score, reason = 0.5, f"Field matches but {entry.degree} is below required level"
            elif level_ok:
                score, reason = 0.5, f"Level met but field {entry.field or 'n/a'} differs"

            if score > best:
                best, best_reason = score, reason

        return best, best_reason

    def _compare_certifications(self, text: str, profile: Profile) -> tuple[float, str]:
        wanted = [
            token for token in content_tokens(text) if not _CERTIFICATION_RE.match(token)
        ]
        for cert in profile.certifications:
            cert_stems = {stem(token) for token in content_tokens(cert.name)}
            if not wanted or any(stem(token) in cert_stems for token in wanted):
                return 1.0, f"Holds certification '{cert.name}'"
        return 0.0, "No matching certification"

    def compare_text(
        self, requirement: JobRequirement, profile: Profile
    ) -> tuple[float, str]:
        """Lexical overlap between the requirement and profile free text."""
        required = content_tokens(requirement.text)
        if not required:
            return 0.0, "Requirement has no comparable terms"

        available = {stem(token) for token in _profile_tokens(profile)}
        ratio, matched = overlap_ratio(required, available)
        if not matched:
            return 0.0, "No overlap with profile text"
        return ratio, f"Profile mentions {', '.join(matched)}"


def parse_required_years(text: str) -> float | None:
    """Minimum years asked for, or None when no duration is stated.

    Ranges use their lower bound ("2-4 years" -> 2). Seniority words in front
    of a role noun map to typical years when no number is given
    ("senior developer" -> 5).
    """
    normalized = text.casefold()
    for word, digit in _NUMBER_WORDS.items():
        normalized = re.sub(rf"\b{word}\b", digit, normalized)

    match = _YEARS_RANGE_RE.search(normalized) or _YEARS_SINGLE_RE.search(normalized)
    if match:
        years = float(match.group(1))
        return years if years > 0 else None

    seniority = [
        _SENIORITY_YEARS[match.group(1).casefold()]
        for match in SENIORITY_RE.finditer(normalized)
    ]
    if seniority:
        return max(seniority)
    return None


def total_years(experiences: list[WorkExperience], today: date) -> float:
    """Total years covered by the union of the experiences' date ranges.

    Overlapping roles are merged so concurrent jobs are not double counted.

    Raises:
        ValueError: If an entry ends before it starts.
    """
    ranges: list[tuple[date, date]] = []
    for exp in experiences:
        end = exp.end_date or today
        if end < exp.start_date:
            raise ValueError(
                f"Work experience '{exp.title}' at '{exp.company}' ends "
                f"({end.isoformat()}) before it starts ({exp.start_date.isoformat()})"
            )
        ranges.append((exp.start_date, end))

    if not ranges:
        return 0.0

    ranges.sort()
    total_days = 0
    current_start, current_end = ranges[0]
    for start, end in ranges[1:]:
        if start <= current_end:
            current_end = max(current_end, end)
            continue
        total_days += (current_end - current_start).days
        current_start, current_end = start, end
    total_days += (current_end - current_start).days

    return total_days / _DAYS_PER_YEAR


def education_level(text: str) -> int | None:
    """Degree level: 1 high school, 2 associate, 3 bachelor, 4 master, 5 PhD."""
    for level, pattern in _EDUCATION_LEVELS:
        if pattern.search(text):
            return level
    return None


def parse_required_field(text: str) -> str | None:
    """Field of study named in an education requirement, if any.

    "Bachelor's degree in Computer Science or related field" -> "computer science".
    """
    match = _FIELD_RE.search(text)
    if not match:
        return None
    value = _FIELD_TAIL_RE.sub("", match.group(1))
    value = _DEGREE_WORDS_RE.sub("", value)
    value = re.sub(r"\s+", " ", value).strip(" ,-").casefold()
    if not content_tokens(value):
        return None
    return value


def fields_match(required: str, actual: str) -> bool:
    """True if the fields share a significant word (by stem)."""
    required_stems = {stem(token) for token in content_tokens(required)}
    actual_stems = {stem(token) for token in content_tokens(actual)}
    return bool(required_stems & actual_stems)


def _experience_keywords(text: str) -> list[str]:
    normalized = re.sub(r"\d+(?:\.\d+)?\+?", " ", text)
    keywords = [
        token
        for token in content_tokens(normalized)
        if token not in _GENERIC_EXPERIENCE_WORDS and len(token) >= 2
    ]
    return list(dict.fromkeys(keywords))


def _role_mentions(exp: WorkExperience, keywords: list[str]) -> bool:
    text = " ".join([exp.title, exp.description, " ".join(exp.skills_used)])
    role_terms = candidate_terms(text)
    role_stems = {stem(token) for token in tokenize(text)}
    for keyword in keywords:
        if canonicalize_skill(keyword) in role_terms or stem(keyword) in role_stems:
            return True
    return False


def _profile_tokens(profile: Profile) -> list[str]:
    parts: list[str] = [profile.title, profile.summary]
    parts.extend(skill.name for skill in profile.skills)
    for exp in profile.work_experience:
        parts.extend([exp.title, exp.description, " ".join(exp.skills_used)])
    for entry in profile.education:
        parts.extend([entry.degree, entry.field])
    parts.extend(language.name for language in profile.languages)
    parts.extend(cert.name for cert in profile.certifications)
    return content_tokens(" ".join(part for part in parts if part))
