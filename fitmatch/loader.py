"""Profile and job file loading (YAML or JSON)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from fitmatch.errors import MatchingError
from fitmatch.job.models import Job
from fitmatch.profile.models import Profile


def load_profile(path: Path | str) -> Profile:
    """Load and validate a profile from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        MatchingError: VALIDATION_ERROR if the file cannot be parsed or does
            not describe a valid profile.
    """
    return _validate(Profile, _load_mapping(Path(path), "Profile"), Path(path))


def load_job(path: Path | str) -> Job:
    """Load and validate a job from a YAML or JSON file.

    Requirements may be given as plain strings; they become unclassified
    requirements with that text.
    """
    job_path = Path(path)
    data = _load_mapping(job_path, "Job")
    requirements = data.get("requirements")
    if isinstance(requirements, list):
        data["requirements"] = [
            {"text": item} if isinstance(item, str) else item for item in requirements
        ]
    return _validate(Job, data, job_path)


def validate_profile(profile: Profile) -> list[str]:
    """Return warnings for profiles that will score poorly for lack of data."""
    warnings: list[str] = []

    if not profile.skills:
        warnings.append("Skills list is empty")
    if not profile.work_experience:
        warnings.append("No work experience listed")
    if not profile.education and not profile.certifications:
        warnings.append("No education or certifications listed")
    if not profile.summary.strip():
        warnings.append("Missing summary")

    return warnings


def _validate(model: type[BaseModel], data: dict, path: Path) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MatchingError.validation(
            f"Invalid {model.__name__.lower()} file: {path}",
            details=e.errors(include_url=False),
        ) from e


def _load_mapping(path: Path, kind: str) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"{kind} not found: {path}")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = _load_yaml(path, kind)
    elif suffix == ".json":
        data = _load_json(path, kind)
    else:
        data = _load_unknown(path, kind)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MatchingError.validation(f"{kind} must be a mapping/dict: {path}")
    return data


def _load_yaml(path: Path, kind: str) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise MatchingError.validation(f"Invalid YAML {kind.lower()}: {path}") from e


def _load_json(path: Path, kind: str) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MatchingError.validation(f"Invalid JSON {kind.lower()}: {path}") from e


def _load_unknown(path: Path, kind: str) -> Any:
    """Auto-detect the format when the file extension is unknown."""
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MatchingError.validation(f"{kind} file is not valid UTF-8: {path}") from e

    # JSON first if it looks like JSON, otherwise YAML (a superset anyway).
    if raw.lstrip().startswith(("{", "[")):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise MatchingError.validation(f"Invalid {kind.lower()} format: {path}") from e
