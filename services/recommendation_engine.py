"""Project Recommendation Engine.

Ranks catalog templates by how many of a user's skill gaps they fill.
Each gap-filling skill is worth points by tier:
- essential: 10
- preferred: 5
- niceToHave: 2

A score of 20+ is high priority, 10+ medium, anything else low. Templates
that fill no gap are pinned to low priority with a score of 1 so they sort
after every gap-filling template.

Optional live mode merges roadmap.sh templates into the local catalog.
The live fetch never fails the request: errors and timeouts fall back to
the local catalog.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

from app.config import Settings, get_settings
from app.logging_config import get_logger
from app.metrics import (
    LIVE_TEMPLATE_FETCH_DURATION,
    LIVE_TEMPLATE_FETCHES,
    RECOMMENDATIONS_GENERATED,
    SCORING_DURATION,
)
from app.models import (
    MissingSkills,
    Priority,
    ProjectRecommendation,
    ProjectTemplate,
    SkillGapAnalysis,
    SkillMatch,
    SkillMatchType,
    SkillTier,
)
from services.roadmap_fetcher import RoadmapTemplateSource
from services.skill_matcher import match_skills
from services.template_catalog import load_catalog, merge_catalogs

logger = get_logger(__name__)

GAP_POINTS: dict[SkillTier, int] = {
    SkillTier.ESSENTIAL: 10,
    SkillTier.PREFERRED: 5,
    SkillTier.NICE_TO_HAVE: 2,
}

HIGH_PRIORITY_SCORE = 20
MEDIUM_PRIORITY_SCORE = 10
NO_GAP_SCORE = 1


def classify_priority(score: int) -> Priority:
    if score >= HIGH_PRIORITY_SCORE:
        return Priority.HIGH
    if score >= MEDIUM_PRIORITY_SCORE:
        return Priority.MEDIUM
    return Priority.LOW


def calculate_priority_score(
    skills_taught: Sequence[str],
    present_skills: Sequence[str],
    missing_skills: MissingSkills,
) -> tuple[int, Priority, list[str], int, list[SkillMatch]]:
    """Score a template's taught skills against a user's gaps.

    Returns:
        (score, priority, gaps filled, essential gaps addressed, skill matches)
    """
    matches = match_skills(skills_taught, present_skills, missing_skills)

    score = 0
    gaps_filled: list[str] = []
    critical = 0
    for match in matches:
        if match.type is not SkillMatchType.FILLS_GAP or match.priority is None:
            continue
        gaps_filled.append(match.skill)
        score += GAP_POINTS[match.priority]
        if match.priority is SkillTier.ESSENTIAL:
            critical += 1

    return score, classify_priority(score), gaps_filled, critical, matches


class RecommendationEngine:
    """Builds ranked project recommendations from a skill gap analysis."""

    def __init__(
        self,
        catalog: Sequence[ProjectTemplate] | None = None,
        live_source: RoadmapTemplateSource | None = None,
    ) -> None:
        self._catalog = tuple(catalog) if catalog is not None else None
        self.live_source = live_source

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RecommendationEngine:
        """Engine over the configured catalog, with roadmap.sh when enabled."""
        settings = settings or get_settings()
        live_source = (
            RoadmapTemplateSource(base_url=settings.roadmap_base_url)
            if settings.live_templates_enabled
            else None
        )
        return cls(catalog=load_catalog(settings.template_catalog_path), live_source=live_source)

    @property
    def catalog(self) -> tuple[ProjectTemplate, ...]:
        if self._catalog is None:
            self._catalog = load_catalog()
        return self._catalog

    @SCORING_DURATION.labels(component="recommendations").time()
    def generate(
        self,
        gap_analysis: SkillGapAnalysis,
        catalog: Sequence[ProjectTemplate] | None = None,
    ) -> list[ProjectRecommendation]:
        """Rank templates for a gap analysis, highest priority score first.

        Ties keep catalog order.
        """
        templates = self.catalog if catalog is None else catalog
        recommendations = [self._recommend(template, gap_analysis) for template in templates]
        recommendations.sort(key=lambda r: r.priority_score, reverse=True)

        for recommendation in recommendations:
            RECOMMENDATIONS_GENERATED.labels(priority=recommendation.priority.value).inc()
        logger.debug(
            "recommendations_generated",
            role=gap_analysis.role,
            templates=len(templates),
            high=sum(1 for r in recommendations if r.priority is Priority.HIGH),
        )
        return recommendations

    async def generate_with_live_templates(
        self,
        gap_analysis: SkillGapAnalysis,
        timeout: float | None = None,
    ) -> list[ProjectRecommendation]:
        """Generate recommendations over the local catalog plus live templates.

        Live templates only add ids the local catalog lacks. Any fetch failure
        or timeout degrades to the local catalog.
        """
        local = self.catalog
        extra = await self._fetch_live_templates(gap_analysis.role, timeout)
        return self.generate(gap_analysis, merge_catalogs(local, extra))

    async def _fetch_live_templates(
        self, role: str, timeout: float | None
    ) -> list[ProjectTemplate]:
        if self.live_source is None:
            return []
        if timeout is None:
            timeout = get_settings().template_fetch_timeout

        start = time.monotonic()
        try:
            templates = await asyncio.wait_for(
                self.live_source.fetch_templates(role), timeout=timeout
            )
        except TimeoutError:
            LIVE_TEMPLATE_FETCHES.labels(status="timeout").inc()
            logger.warning("live_templates_unavailable", role=role, reason="timeout", timeout=timeout)
            return []
        except Exception as e:
            LIVE_TEMPLATE_FETCHES.labels(status="error").inc()
            logger.warning(
                "live_templates_unavailable",
                role=role,
                reason="error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return []
        finally:
            LIVE_TEMPLATE_FETCH_DURATION.observe(time.monotonic() - start)

        LIVE_TEMPLATE_FETCHES.labels(status="success").inc()
        return templates

    def _recommend(
        self, template: ProjectTemplate, gap_analysis: SkillGapAnalysis
    ) -> ProjectRecommendation:
        score, priority, gaps_filled, critical, matches = calculate_priority_score(
            template.skills_taught,
            gap_analysis.present_skills,
            gap_analysis.missing_skills,
        )
        if not gaps_filled:
            score, priority = NO_GAP_SCORE, Priority.LOW

        return ProjectRecommendation(
            **template.model_dump(),
            priority_score=score,
            priority=priority,
            gaps_filled=gaps_filled,
            skill_matches=matches,
            critical_gaps_addressed=critical,
        )
