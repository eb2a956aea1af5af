"""Text and skill matching utilities for the feature comparator."""

from __future__ import annotations

import re
from difflib import SequenceMatcher

_SKILL_ALIASES: dict[str, str] = {
    "js": "javascript",
    "javascript": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "python3": "python",
    "python": "python",
    "py": "python",
    "golang": "go",
    "go": "go",
    "nodejs": "node.js",
    "node js": "node.js",
    "node.js": "node.js",
    "node": "node.js",
    "react": "react",
    "reactjs": "react",
    "react.js": "react",
    "react js": "react",
    "nextjs": "next.js",
    "next js": "next.js",
    "next.js": "next.js",
    "vuejs": "vue",
    "vue.js": "vue",
    "html5": "html",
    "html": "html",
    "css3": "css",
    "css": "css",
    "mongo db": "mongodb",
    "mongo": "mongodb",
    "mongodb": "mongodb",
    "postgres": "postgresql",
    "postgresql": "postgresql",
    "k8s": "kubernetes",
    "kubernetes": "kubernetes",
    "c sharp": "c#",
    "csharp": "c#",
    "cpp": "c++",
    "ml": "machine learning",
    "amazon web services": "aws",
    "gcp": "google cloud",
    "google cloud platform": "google cloud",
}

_SKILL_IMPLICATIONS: dict[str, set[str]] = {
    "react": {"javascript", "html", "css"},
    "next.js": {"react", "javascript", "html", "css"},
    "vue": {"javascript", "html", "css"},
    "node.js": {"javascript"},
    "typescript": {"javascript"},
    "django": {"python"},
    "flask": {"python"},
    "fastapi": {"python"},
    "spring": {"java"},
}

# Technology vocabulary used to recognize skill-type requirements.
KNOWN_TECHNOLOGIES: frozenset[str] = frozenset(
    {
        "python", "java", "javascript", "typescript", "go", "rust", "c++",
        "c#", "ruby", "php", "kotlin", "swift", "scala", "perl", "sql",
        "nosql", "bash", "html", "css", "react", "vue", "angular", "svelte",
        "node.js", "next.js", "django", "flask", "fastapi", "spring", ".net",
        "rails", "laravel", "postgresql", "mysql", "mongodb", "redis",
        "elasticsearch", "kafka", "rabbitmq", "graphql", "rest", "grpc",
        "docker", "kubernetes", "terraform", "ansible", "aws", "azure",
        "google cloud", "linux", "git", "ci/cd", "jenkins", "airflow",
        "spark", "hadoop", "pandas", "numpy", "pytorch", "tensorflow",
        "scikit-learn", "machine learning", "figma", "excel", "tableau",
        "jira", "celery", "nginx", "android", "ios",
    }
)

_AMBIGUOUS_TECHNOLOGIES: frozenset[str] = frozenset(
    {"go", "rest", "spring", "swift", "rust", "excel", "rails", "spark"}
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        # English
        "a", "an", "the", "and", "or", "of", "in", "on", "at", "to", "for",
        "with", "by", "from", "as", "is", "are", "be", "been", "being", "will",
        "would", "should", "can", "could", "must", "have", "has", "having",
        "we", "you", "our", "your", "their", "they", "it", "its", "this",
        "that", "these", "those", "who", "which", "all", "any", "some", "such",
        "other", "etc", "e.g", "i.e", "also", "well", "very", "strong",
        "good", "great", "excellent", "solid", "proven", "ability", "able",
        "skills", "skill", "knowledge", "understanding", "familiarity",
        "experience", "experienced", "required", "requirement", "requirements",
        "preferred", "plus", "bonus", "nice", "mandatory", "optional",
        "must-have", "desired", "desirable", "including", "related", "similar",
        "relevant", "work", "working", "candidate", "role", "position",
        "fluent", "fluency", "proficient", "proficiency", "hands-on",
        # Russian
        "и", "или", "в", "во", "на", "с", "со", "по", "для", "от", "до", "из",
        "к", "о", "об", "не", "а", "но", "что", "как", "также", "будет",
        "плюсом", "плюс", "знание", "знания", "опыт", "работы", "умение",
        "навыки", "навык", "желательно", "необходимо", "обязательно",
        "требуется", "требования", "хорошее", "хороший", "уверенное",
    }
)

_TOKEN_RE = re.compile(r"\.?\w[\w+#./-]*", re.UNICODE)

# Phrases stripped from requirement text to isolate the skill being asked for.
_SKILL_FILLER_RE = re.compile(
    r"(?:\bnice to have\b|\bmust have\b|\bmust-have\b|\bis a plus\b|\ba plus\b"
    r"|\bwill be a plus\b|\brequired\b|\bmandatory\b|\bpreferred\b|\bpreferably\b"
    r"|\bmust\b|\bbonus\b|\boptional\b|\bdesired\b|\bstrong\b|\bsolid\b"
    r"|\bexcellent\b|\bgood\b|\bhands-on\b|\bexperience (?:with|in)\b"
    r"|\bknowledge of\b|\bproficiency (?:in|with)\b|\bproficient (?:in|with)\b"
    r"|\bfamiliarity with\b|\bfamiliar with\b|\bexpertise in\b|\bskills?\b"
    r"|\bзнание\b|\bзнания\b|\bопыт работы с\b|\bвладение\b|\bнеобходимо\b"
    r"|\bобязательно\b|\bтребуется\b|\bжелательно\b|\bбудет плюсом\b)",
    re.IGNORECASE | re.UNICODE,
)


def normalize_skill(skill: str) -> str:
    """Normalize a skill string for comparison.

    Performs casefolding, whitespace normalization, and trims common
    surrounding punctuation while preserving meaningful characters
    like "+", "#", and "." (e.g. "C++", "C#", "Node.js").
    """
    value = skill.strip().casefold()
    value = re.sub(r"\([^)]*\)", "", value)
    value = re.sub(r"\s+", " ", value)
    return value.strip(" ,;:!?")


def canonicalize_skill(skill: str) -> str:
    """Return the canonical form of a skill, resolving known aliases."""
    normalized = normalize_skill(skill)
    return _SKILL_ALIASES.get(normalized, normalized)


def skills_match(
    skill1: str, skill2: str, fuzzy: bool = True, threshold: float = 0.85
) -> bool:
    """Return True if two skills are considered a match."""
    canonical1 = canonicalize_skill(skill1)
    canonical2 = canonicalize_skill(skill2)

    if not canonical1 or not canonical2:
        return False

    if canonical1 == canonical2:
        return True

    if not fuzzy:
        return False

    if threshold <= 0.0:
        return True
    if threshold > 1.0:
        return False

    similarity = SequenceMatcher(None, canonical1, canonical2).ratio()
    return similarity >= threshold


def tokenize(text: str) -> list[str]:
    """Split text into casefolded word tokens, keeping "c++", "c#", "node.js"."""
    tokens: list[str] = []
    for match in _TOKEN_RE.finditer(text.casefold()):
        token = match.group(0).rstrip(".,/-")
        if token:
            tokens.append(token)
    return tokens


def content_tokens(text: str) -> list[str]:
    """Tokenize and drop stop words, pure numbers and one-letter tokens."""
    return [
        token
        for token in tokenize(text)
        if token not in STOP_WORDS and not token.isdigit() and len(token) > 1
    ]


def stem(token: str) -> str:
    """Crude prefix stem so "communication" and "communicated" compare equal."""
    return token[:6] if len(token) > 6 else token


def _ngrams(tokens: list[str], max_words: int) -> list[str]:
    grams: list[str] = []
    for size in range(1, max_words + 1):
        for start in range(0, len(tokens) - size + 1):
            grams.append(" ".join(tokens[start : start + size]))
    return grams


def candidate_terms(text: str, max_words: int = 3) -> set[str]:
    """Return canonical forms of every 1..max_words token n-gram in text."""
    return {canonicalize_skill(gram) for gram in _ngrams(tokenize(text), max_words)}


def mentions_technology(text: str) -> bool:
    """Return True if text names a technology from the known vocabulary.

    Technologies that double as everyday words ("go", "rest", "swift") only
    count when written capitalized, as in "Go required".
    """
    for gram in _ngrams(tokenize(text), max_words=3):
        term = canonicalize_skill(gram)
        if term not in KNOWN_TECHNOLOGIES:
            continue
        if term not in _AMBIGUOUS_TECHNOLOGIES or gram != term:
            return True
        pattern = rf"(?<!\w)(?:{re.escape(term.capitalize())}|{re.escape(term.upper())})(?!\w)"
        if re.search(pattern, text):
            return True
    return False


def extract_skill_term(text: str) -> str:
    """Strip obligation and filler phrasing, keeping the skill being asked for.

    "Python required" -> "Python"; "Knowledge of Docker is a plus" -> "Docker".
    Falls back to the stripped original text when nothing remains.
    """
    stripped = _SKILL_FILLER_RE.sub(" ", text)
    stripped = re.sub(r"[()\[\]:;!?]", " ", stripped)
    stripped = re.sub(r"\s+", " ", stripped).strip(" ,.-")
    return stripped or text.strip()


def expand_skills(skills: list[str]) -> list[str]:
    """Return the canonical skills implied by the given ones, excluding them.

    (e.g. "React" implies "JavaScript/HTML/CSS").
    """
    canonical = {canonicalize_skill(s) for s in skills if str(s).strip()}
    expanded = set(canonical)
    stack = list(canonical)

    while stack:
        current = stack.pop()
        for implied in _SKILL_IMPLICATIONS.get(current, set()):
            implied_canon = canonicalize_skill(implied)
            if implied_canon not in expanded:
                expanded.add(implied_canon)
                stack.append(implied_canon)

    return sorted(expanded - canonical)


def overlap_ratio(required: list[str], available: set[str]) -> tuple[float, list[str]]:
    """Share of required tokens (by stem) present in the available stems.

    Returns:
        The ratio in [0, 1] and the matched required tokens, in input order.
    """
    unique = list(dict.fromkeys(required))
    if not unique:
        return 0.0, []
    matched = [token for token in unique if stem(token) in available]
    return len(matched) / len(unique), matched
