"""Portfolio Scoring Engine.

Scores a developer's project portfolio across five categories and assigns
a letter rank:

- Project quality: mean complexity with a bonus for several strong projects
- Tech diversity: saturating curve over distinct languages
- Documentation: description depth and visual demos, plus profile README bonus
- Consistency: time-decayed recency of the latest commit and recent-activity share
- Professionalism: community engagement and project organization

Scoring is pure. The only time input is `now`; pass it explicitly for
results that are reproducible across calls.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from fractions import Fraction

from app.logging_config import get_logger
from app.metrics import PORTFOLIO_RANKS_ASSIGNED, SCORING_DURATION
from app.models import (
    PortfolioBreakdown,
    PortfolioDetails,
    PortfolioScoreResult,
    ProjectRecord,
)
from services.scoring_utils import clamp, round_half_up, time_decay_weight

logger = get_logger(__name__)

# Overall score weights, exact rationals summing to 1
CATEGORY_WEIGHTS = {
    "project_quality": Fraction(30, 100),
    "documentation": Fraction(25, 100),
    "tech_diversity": Fraction(20, 100),
    "consistency": Fraction(15, 100),
    "professionalism": Fraction(10, 100),
}

# Rank cut points, evaluated top-down
RANK_TABLE: list[tuple[float, str]] = [
    (95, "S"),
    (87.5, "A+"),
    (75, "A"),
    (62.5, "A-"),
    (50, "B+"),
    (37.5, "B"),
    (25, "B-"),
    (12.5, "C+"),
    (0, "C"),
]

STRONG_CATEGORY = 70
WEAK_CATEGORY = 50
GOOD_OVERALL = 70
MAX_SUGGESTIONS = 5

HIGH_COMPLEXITY = 85
PROFILE_README_BONUS = 10
RECENCY_HALF_LIFE_DAYS = 30
ACTIVE_WINDOW = timedelta(days=90)

TUTORIAL_KEYWORDS = (
    "tutorial",
    "clone",
    "practice",
    "learning",
    "course",
    "todo",
    "to-do",
    "example",
    "sample",
    "demo",
    "test",
)

FRAMEWORK_KEYWORDS = (
    "react",
    "vue",
    "angular",
    "svelte",
    "next",
    "nuxt",
    "express",
    "fastify",
    "nest",
    "django",
    "flask",
    "fastapi",
    "rails",
    "spring",
    "laravel",
    "tailwind",
    "bootstrap",
    "graphql",
    "prisma",
    "mongoose",
)

VISUAL_CONTENT = re.compile(r"screenshot|demo|gif|video|preview|image", re.IGNORECASE)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _is_tutorial_clone(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in TUTORIAL_KEYWORDS)


def _description_points(description: str | None) -> int:
    """Documentation credit for one project description (0-100)."""
    length = len(description.strip()) if description else 0
    if length == 0:
        return 0
    if length <= 10:
        return 20
    if length <= 50:
        return 50
    if length <= 100:
        return 75
    return 100


def _language_score(count: int) -> int:
    """Diminishing returns per additional language."""
    if count == 0:
        return 0
    if count <= 2:
        return 20 + count * 10
    if count <= 5:
        return 40 + (count - 2) * 10
    if count <= 10:
        return 70 + (count - 5) * 4
    return 90 + min((count - 10) * 2, 10)


def overall_score(scores: dict[str, int]) -> int:
    """Weighted sum of category scores, rounded half up."""
    weighted = sum(scores[name] * weight for name, weight in CATEGORY_WEIGHTS.items())
    return int(clamp(round_half_up(weighted)))


def calculate_rank(score: float) -> str:
    return next(rank for cut, rank in RANK_TABLE if score >= cut)


class PortfolioScorer:
    """Multi-factor portfolio scoring with rank and feedback."""

    @SCORING_DURATION.labels(component="portfolio").time()
    def score(
        self,
        projects: Sequence[ProjectRecord],
        has_profile_readme: bool = False,
        now: datetime | None = None,
    ) -> PortfolioScoreResult:
        """Score a portfolio.

        Args:
            projects: The user's project records
            has_profile_readme: Whether the user has a GitHub profile README
            now: Reference time for activity scoring (defaults to the current UTC time)

        Returns:
            Category scores, overall score, rank and feedback
        """
        if not projects:
            PORTFOLIO_RANKS_ASSIGNED.labels(rank="C").inc()
            return PortfolioScoreResult(
                overall_score=0,
                rank="C",
                project_quality_score=0,
                tech_diversity_score=0,
                documentation_score=0,
                consistency_score=0,
                professionalism_score=0,
                has_profile_readme=has_profile_readme,
                breakdown=PortfolioBreakdown(
                    weaknesses=["No projects found"],
                    suggestions=["Sync your GitHub repositories to get started"],
                ),
            )

        reference = _as_utc(now) if now else datetime.now(UTC)

        languages = self._collect_languages(projects)
        days_since_last_commit = self._days_since_last_commit(projects, reference)

        scores = {
            "project_quality": self._score_project_quality(projects),
            "documentation": self._score_documentation(projects, has_profile_readme),
            "tech_diversity": _language_score(len(languages)),
            "consistency": self._score_consistency(
                projects, days_since_last_commit, reference
            ),
            "professionalism": self._score_professionalism(projects),
        }
        scores = {name: int(clamp(value)) for name, value in scores.items()}

        overall = overall_score(scores)
        rank = calculate_rank(overall)

        details = PortfolioDetails(
            languages=languages,
            frameworks=self._extract_frameworks(projects),
            days_since_last_commit=days_since_last_commit,
            substantial_projects=sum(
                1
                for p in projects
                if p.description and len(p.description) > 50 and not _is_tutorial_clone(p.name)
            ),
            total_stars=sum(p.stars for p in projects),
            total_forks=sum(p.forks for p in projects),
        )
        breakdown = self._build_feedback(
            scores, overall, len(projects), has_profile_readme, details
        )

        PORTFOLIO_RANKS_ASSIGNED.labels(rank=rank).inc()
        logger.debug(
            "portfolio_scored",
            projects=len(projects),
            overall=overall,
            rank=rank,
        )

        return PortfolioScoreResult(
            overall_score=overall,
            rank=rank,
            project_quality_score=scores["project_quality"],
            tech_diversity_score=scores["tech_diversity"],
            documentation_score=scores["documentation"],
            consistency_score=scores["consistency"],
            professionalism_score=scores["professionalism"],
            has_profile_readme=has_profile_readme,
            breakdown=breakdown,
        )

    # --- Category scores ---

    def _score_project_quality(self, projects: Sequence[ProjectRecord]) -> int:
        """Mean complexity (missing counts as 0) plus a bonus for strong projects."""
        complexities = [p.complexity_score for p in projects]
        if all(c is None for c in complexities):
            return 0

        mean = Fraction(sum(c or 0 for c in complexities), len(projects))
        high = sum(1 for c in complexities if c is not None and c >= HIGH_COMPLEXITY)
        bonus = min(high * 5, 20) if high >= 2 else 0
        return round_half_up(clamp(mean + bonus))

    def _score_documentation(
        self, projects: Sequence[ProjectRecord], has_profile_readme: bool
    ) -> int:
        """Description depth (80%) and visual demos (20%), plus README bonus."""
        mean_points = Fraction(
            sum(_description_points(p.description) for p in projects), len(projects)
        )
        with_visuals = sum(
            1 for p in projects if p.description and VISUAL_CONTENT.search(p.description)
        )
        visual_share = Fraction(with_visuals * 100, len(projects))

        score = mean_points * Fraction(4, 5) + visual_share * Fraction(1, 5)
        if has_profile_readme:
            score += PROFILE_README_BONUS
        return round_half_up(clamp(score))

    def _score_consistency(
        self,
        projects: Sequence[ProjectRecord],
        days_since_last_commit: int | None,
        reference: datetime,
    ) -> int:
        """Recency of the latest commit (60%) and share of recently active projects (40%)."""
        if days_since_last_commit is None:
            return 0

        recency = 100 * time_decay_weight(days_since_last_commit, RECENCY_HALF_LIFE_DAYS)
        active = sum(
            1
            for p in projects
            if p.last_commit_date and reference - _as_utc(p.last_commit_date) <= ACTIVE_WINDOW
        )
        frequency = active / len(projects) * 100
        return round_half_up(clamp(recency * 0.6 + frequency * 0.4))

    def _score_professionalism(self, projects: Sequence[ProjectRecord]) -> int:
        """Community engagement and organized project descriptions."""
        total_stars = sum(p.stars for p in projects)
        total_forks = sum(p.forks for p in projects)

        base = min(len(projects) * 10, 50)
        engagement_bonus = min(Fraction((total_stars + total_forks * 2) * 50, 20), 50)
        engagement = base + engagement_bonus

        organized = sum(1 for p in projects if p.description and len(p.description) > 30)
        organization = Fraction(organized * 100, len(projects))

        return round_half_up(clamp((engagement + organization) / 2))

    # --- Signals ---

    @staticmethod
    def _collect_languages(projects: Sequence[ProjectRecord]) -> list[str]:
        seen: dict[str, None] = {}
        for project in projects:
            for language in project.languages:
                seen.setdefault(language, None)
        return list(seen)

    @staticmethod
    def _days_since_last_commit(
        projects: Sequence[ProjectRecord], reference: datetime
    ) -> int | None:
        dates = [_as_utc(p.last_commit_date) for p in projects if p.last_commit_date]
        if not dates:
            return None
        gap = reference - max(dates)
        return max(math.floor(gap.total_seconds() / 86400), 0)

    @staticmethod
    def _extract_frameworks(projects: Sequence[ProjectRecord]) -> list[str]:
        found: list[str] = []
        for project in projects:
            text = (
                f"{project.name} {project.description or ''} {' '.join(project.languages)}"
            ).lower()
            for framework in FRAMEWORK_KEYWORDS:
                if framework in text and framework not in found:
                    found.append(framework)
        return found

    # --- Feedback ---

    def _build_feedback(
        self,
        scores: dict[str, int],
        overall: int,
        project_count: int,
        has_profile_readme: bool,
        details: PortfolioDetails,
    ) -> PortfolioBreakdown:
        strengths: list[str] = []
        weaknesses: list[str] = []
        suggestions: list[str] = []

        if scores["project_quality"] >= STRONG_CATEGORY:
            strengths.append("High-quality projects with good complexity")
            if details.substantial_projects >= 3:
                strengths.append(
                    f"{details.substantial_projects} substantial, original projects"
                )
        elif scores["project_quality"] < WEAK_CATEGORY:
            weaknesses.append("Projects need more complexity and features")
            suggestions.append(
                "Build substantial projects with 20+ commits and detailed documentation"
            )

        if scores["documentation"] >= STRONG_CATEGORY:
            strengths.append("Well-documented projects")
            if has_profile_readme:
                strengths.append("Professional GitHub profile README")
        elif scores["documentation"] < WEAK_CATEGORY:
            weaknesses.append("Projects lack proper documentation")
            suggestions.append(
                "Add detailed README files with setup instructions, screenshots, and tech stack"
            )

        if scores["tech_diversity"] >= STRONG_CATEGORY:
            strengths.append("Diverse technology stack")
            if len(details.languages) >= 5:
                strengths.append(
                    f"Experience with {len(details.languages)} programming languages"
                )
        elif scores["tech_diversity"] < WEAK_CATEGORY:
            weaknesses.append("Limited technology diversity")
            suggestions.append("Learn and use different programming languages and frameworks")

        if scores["consistency"] >= STRONG_CATEGORY:
            strengths.append("Consistent development activity")
        elif scores["consistency"] < WEAK_CATEGORY:
            weaknesses.append("Inconsistent development activity")
            suggestions.append("Commit code regularly and maintain active projects")

        if scores["professionalism"] >= STRONG_CATEGORY:
            strengths.append("Professional portfolio presentation")
        elif scores["professionalism"] < WEAK_CATEGORY:
            suggestions.append(
                "Share your projects on social media and developer communities to gain visibility"
            )

        if not has_profile_readme:
            suggestions.append(
                "Create a GitHub profile README to showcase your skills and projects"
            )

        if project_count < 3:
            suggestions.append("Build more projects to showcase your skills (aim for 5-8)")
        elif project_count >= 10:
            strengths.append(f"Impressive portfolio with {project_count} projects")

        if overall < GOOD_OVERALL and not suggestions:
            suggestions.append(
                "Deepen your strongest project: add tests, a live demo and a detailed README"
            )

        return PortfolioBreakdown(
            strengths=strengths,
            weaknesses=weaknesses,
            suggestions=suggestions[:MAX_SUGGESTIONS],
            details=details,
        )
