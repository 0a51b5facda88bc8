"""Shared test fixtures for Skill Scope."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import SecretStr

from app.config import Environment, Settings, get_settings
from app.models import (
    Category,
    Difficulty,
    MissingSkills,
    Priority,
    ProjectRecommendation,
    ProjectRecord,
    ProjectTemplate,
    SkillGapAnalysis,
)
from services.template_catalog import clear_catalog_cache

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _fresh_caches():
    """Settings and catalog caches must not leak between tests."""
    get_settings.cache_clear()
    clear_catalog_cache()
    yield
    get_settings.cache_clear()
    clear_catalog_cache()


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment=Environment.TESTING,
        github_token=SecretStr("ghp_test_token_fake_value"),
        template_fetch_timeout=0.5,
        extraction_fast_timeout=0.2,
        extraction_slow_timeout=0.2,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_project() -> Callable[..., ProjectRecord]:
    """Factory for project records with sensible defaults."""

    def _make(project_id: str = "p1", **overrides) -> ProjectRecord:
        data = {
            "id": project_id,
            "name": f"project-{project_id}",
            "description": None,
            "languages": {},
        }
        data.update(overrides)
        return ProjectRecord(**data)

    return _make


@pytest.fixture
def strong_portfolio(make_project) -> list[ProjectRecord]:
    """Five substantial, recently active projects across several languages."""
    languages = [
        {"TypeScript": 5000, "CSS": 800},
        {"Python": 7000},
        {"Go": 4000, "Shell": 100},
        {"JavaScript": 3000, "HTML": 900},
        {"Rust": 6000},
    ]
    return [
        make_project(
            f"p{i}",
            name=f"service-{i}",
            description=(
                "Production-grade service with a REST API, PostgreSQL storage, "
                "Docker deployment, CI pipeline and a live demo with screenshots."
            ),
            languages=langs,
            stars=12,
            forks=3,
            complexity_score=90,
            last_commit_date=NOW - timedelta(days=i),
        )
        for i, langs in enumerate(languages)
    ]


@pytest.fixture
def make_template() -> Callable[..., ProjectTemplate]:
    def _make(template_id: str = "t1", **overrides) -> ProjectTemplate:
        data = {
            "id": template_id,
            "name": f"Template {template_id}",
            "difficulty": Difficulty.BEGINNER,
            "category": Category.FRONTEND,
            "time_estimate": "1 week",
            "skills_taught": ["React"],
        }
        data.update(overrides)
        return ProjectTemplate(**data)

    return _make


@pytest.fixture
def make_recommendation() -> Callable[..., ProjectRecommendation]:
    def _make(template_id: str = "r1", **overrides) -> ProjectRecommendation:
        data = {
            "id": template_id,
            "name": f"Recommendation {template_id}",
            "difficulty": Difficulty.BEGINNER,
            "category": Category.FRONTEND,
            "time_estimate": "1 week",
            "skills_taught": ["React"],
            "priority_score": 0,
            "priority": Priority.LOW,
        }
        data.update(overrides)
        return ProjectRecommendation(**data)

    return _make


@pytest.fixture
def frontend_gap() -> SkillGapAnalysis:
    """A frontend learner who knows JavaScript and HTML."""
    return SkillGapAnalysis(
        role="frontend",
        present_skills=["JavaScript", "HTML"],
        missing_skills=MissingSkills(
            essential=["React", "TypeScript", "CSS"],
            preferred=["Testing"],
            nice_to_have=["GraphQL"],
        ),
        coverage_percentage=30,
    )


class FakeTextFetcher:
    """In-memory TextFetcher that records requested URLs."""

    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def fake_fetcher() -> FakeTextFetcher:
    return FakeTextFetcher()
