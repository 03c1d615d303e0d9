"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from resume_studio.models.resume import ExperienceEntry, ResumeRecord


@pytest.fixture
def sample_payload() -> dict:
    """Upstream camelCase JSON, as the rewrite collaborator sends it."""
    return {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+1 555 0100",
        "location": "Berlin, Germany",
        "linkedin": "linkedin.com/in/jane",
        "summary": "Backend engineer with eight years of experience building payment systems.",
        "skills": ["Go", "Rust", "SQL"],
        "experience": [
            {
                "company": "Acme Corp",
                "role": "Senior Engineer",
                "period": "2021 - Present",
                "description": [
                    "Led the migration of the billing service to Go.",
                    "Cut p99 latency by 40% with a new caching layer.",
                ],
            },
            {
                "company": "Initech",
                "role": "Engineer",
                "period": "2017 - 2021",
                "description": ["Maintained the TPS report pipeline."],
            },
        ],
        "education": [
            {"institution": "TU Berlin", "degree": "MSc Computer Science", "period": "2015 - 2017"},
        ],
    }


@pytest.fixture
def sample_record(sample_payload) -> ResumeRecord:
    return ResumeRecord.from_payload(sample_payload)


@pytest.fixture
def record_without_linkedin(sample_payload) -> ResumeRecord:
    payload = dict(sample_payload)
    payload.pop("linkedin")
    return ResumeRecord.from_payload(payload)


@pytest.fixture
def minimal_record() -> ResumeRecord:
    return ResumeRecord(full_name="Solo Name")


@pytest.fixture
def long_record(sample_record) -> ResumeRecord:
    """Three jobs with fifteen one-line bullets each: overflows one A4 page."""
    jobs = tuple(
        ExperienceEntry(
            company=f"Company {i}",
            role="Engineer",
            period="2020",
            description=tuple(f"Shipped feature {i}.{j}" for j in range(15)),
        )
        for i in range(3)
    )
    return ResumeRecord(full_name="Jane Doe", experience=jobs)


@pytest.fixture
def record_file(tmp_path: Path, sample_payload) -> Path:
    path = tmp_path / "jane.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path
