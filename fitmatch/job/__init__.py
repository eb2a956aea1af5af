"""Job posting models and storage.

Public API:
    - Job: Saved job posting
    - JobRequirement: Single structured requirement
    - RequirementType / ImportanceLevel: Requirement classification enums
    - JobRepository: SQLite storage for jobs
"""

from fitmatch.job.models import ImportanceLevel, Job, JobRequirement, RequirementType
from fitmatch.job.repository import JobRepository

__all__ = [
    "Job",
    "JobRequirement",
    "RequirementType",
    "ImportanceLevel",
    "JobRepository",
]
