"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Drop cached settings and logging state between tests."""
    from fitmatch.config.settings import reset_settings
    from fitmatch.matching.config import reset_matching_config
    from fitmatch.utils.logging import reset_logging

    reset_settings()
    reset_matching_config()
    yield
    reset_settings()
    reset_matching_config()
    reset_logging()


@pytest.fixture
def today() -> date:
    """Fixed reference date for open-ended roles."""
    return date(2024, 6, 1)


@pytest.fixture
def matching_config():
    """Matching config with defaults, ignoring any .env file."""
    from fitmatch.matching.config import MatchingConfig

    return MatchingConfig(_env_file=None)


@pytest.fixture
def make_profile():
    """Factory for profiles; keyword arguments override the defaults."""
    from fitmatch.profile.models import Profile

    def _make(**overrides):
        data = {"id": "profile-1", "user_id": "user-1", "version": 1}
        data.update(overrides)
        return Profile.model_validate(data)

    return _make


@pytest.fixture
def make_job():
    """Factory for jobs; plain strings in ``requirements`` become requirement texts."""
    from fitmatch.job.models import Job

    def _make(requirements=(), **overrides):
        data = {
            "id": "job-1",
            "user_id": "user-1",
            "title": "Backend Engineer",
            "company": "Acme",
            "requirements": [
                {"text": item} if isinstance(item, str) else item for item in requirements
            ],
        }
        data.update(overrides)
        return Job.model_validate(data)

    return _make


@pytest.fixture
def python_expert(make_profile):
    """Profile with Python at expert level and five years as a backend developer."""
    return make_profile(
        title="Senior Python Developer",
        summary="Backend developer building APIs and data pipelines.",
        skills=[
            {"name": "Python", "proficiency_level": "expert"},
            {"name": "PostgreSQL", "proficiency_level": "advanced"},
            {"name": "Docker", "proficiency_level": "beginner"},
        ],
        work_experience=[
            {
                "title": "Backend Developer",
                "company": "Initech",
                "start_date": "2019-06-01",
                "end_date": None,
                "description": "Built Python services and REST APIs.",
                "skills_used": ["Python", "Django", "Redis"],
            }
        ],
        education=[
            {
                "institution": "State University",
                "degree": "Bachelor of Science",
                "field": "Computer Science",
                "graduation_year": 2019,
            }
        ],
    )
