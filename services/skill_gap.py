"""Skill gap analysis against a role taxonomy.

For every tier of the role, a skill is covered when any present skill
fuzzy-matches it and missing otherwise. Coverage is weighted per skill
(essential 3, preferred 2, nice-to-have 1).
"""

from __future__ import annotations

from collections.abc import Sequence

from app.logging_config import get_logger
from app.metrics import SKILL_GAP_ANALYSES
from app.models import MissingSkills, SkillGapAnalysis, SkillGapStatus, SkillGapSummary
from services.role_taxonomy import DEFAULT_TAXONOMY, TIER_WEIGHTS, RoleTaxonomy
from services.scoring_utils import percentage
from services.skill_matcher import TIER_ORDER, matches_any

logger = get_logger(__name__)

MAX_PRIORITY_SKILLS = 5

# Coverage thresholds, evaluated top-down.
STATUS_THRESHOLDS: list[tuple[int, SkillGapStatus]] = [
    (90, SkillGapStatus.EXCELLENT),
    (70, SkillGapStatus.GOOD),
    (40, SkillGapStatus.NEEDS_WORK),
    (0, SkillGapStatus.BEGINNER),
]

STATUS_MESSAGES: dict[SkillGapStatus, str] = {
    SkillGapStatus.EXCELLENT: (
        "You cover {coverage}% of what a {title} needs. Polish the remaining gaps "
        "and start applying."
    ),
    SkillGapStatus.GOOD: (
        "Solid foundation: {coverage}% coverage for a {title}. A few targeted projects "
        "will close the gap."
    ),
    SkillGapStatus.NEEDS_WORK: (
        "You cover {coverage}% of the {title} skill set. Focus on the essential skills first."
    ),
    SkillGapStatus.BEGINNER: (
        "You are at the start of the {title} path ({coverage}% coverage). Begin with the "
        "essentials and build small projects."
    ),
}


class SkillGapAnalyzer:
    """Computes tiered missing skills and weighted coverage for a role."""

    def __init__(self, taxonomy: RoleTaxonomy = DEFAULT_TAXONOMY) -> None:
        self.taxonomy = taxonomy

    def analyze(self, present_skills: Sequence[str], role: str) -> SkillGapAnalysis:
        """Analyze present skills against a role.

        Raises:
            InvalidRoleError: role is not in the taxonomy.
        """
        requirements = self.taxonomy.requirements_for(role)
        present = list(present_skills)

        missing: dict[str, list[str]] = {}
        covered_weight = 0
        for tier in TIER_ORDER:
            tier_missing: list[str] = []
            for skill in requirements.for_tier(tier):
                if matches_any(skill, present):
                    covered_weight += TIER_WEIGHTS[tier]
                else:
                    tier_missing.append(skill)
            missing[tier.value] = tier_missing

        coverage = percentage(covered_weight, requirements.total_weight)

        SKILL_GAP_ANALYSES.labels(role=role.strip().lower()).inc()
        logger.debug(
            "skill_gap_analyzed",
            role=role,
            taxonomy_version=self.taxonomy.version,
            coverage=coverage,
            missing_essential=len(missing["essential"]),
        )

        return SkillGapAnalysis(
            role=role,
            present_skills=present,
            missing_skills=MissingSkills.model_validate(missing),
            coverage_percentage=coverage,
        )

    def summarize(self, analysis: SkillGapAnalysis) -> SkillGapSummary:
        """Status, top missing skills and a short message for an analysis."""
        coverage = analysis.coverage_percentage
        status = next(s for threshold, s in STATUS_THRESHOLDS if coverage >= threshold)

        # Highest tier first: essential, preferred, niceToHave.
        priority = analysis.missing_skills.flatten()[:MAX_PRIORITY_SKILLS]

        if analysis.role in self.taxonomy:
            title = self.taxonomy.requirements_for(analysis.role).title
        else:
            title = f"{analysis.role} developer"

        return SkillGapSummary(
            status=status,
            priority=priority,
            message=STATUS_MESSAGES[status].format(coverage=coverage, title=title),
        )
