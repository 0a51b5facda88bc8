"""Job match scoring.

Compares a job's required skills with the skills a user demonstrates in
their projects: project languages, a baseline of version-control skills
every GitHub user has, and frameworks/tools detected in descriptions.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from app.config import get_settings
from app.logging_config import get_logger
from app.metrics import JOB_MATCHES_COMPUTED, SCORING_DURATION
from app.models import JobMatchBreakdown, JobMatchResult, ProjectRecord
from services.scoring_utils import percentage
from services.skill_detection import detect_skills, has_responsive_design
from services.skill_matcher import matches_any, normalize

logger = get_logger(__name__)

BASELINE_SKILLS = frozenset({"git", "version control", "github"})


def dedupe_skills(skills: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling."""
    seen: set[str] = set()
    unique: list[str] = []
    for skill in skills:
        key = normalize(skill)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(skill)
    return unique


class JobMatchScorer:
    """Scores how well a user's projects cover a job's required skills."""

    def __init__(self, max_recommended: int | None = None) -> None:
        if max_recommended is None:
            max_recommended = get_settings().max_recommended_projects
        self.max_recommended = max_recommended

    @staticmethod
    def build_user_skills(projects: Iterable[ProjectRecord]) -> set[str]:
        """Lower-cased skills demonstrated across a project set."""
        skills = set(BASELINE_SKILLS)
        for project in projects:
            skills.update(lang.lower() for lang in project.languages)
            if project.description:
                skills.update(s.lower() for s in detect_skills(project.description))
                if has_responsive_design(project.description):
                    skills.add("responsive design")
        return skills

    @staticmethod
    def extract_required_skills(job_description: str) -> list[str]:
        """Skills a job posting mentions, for callers without a parsed list."""
        skills = detect_skills(job_description)
        if has_responsive_design(job_description):
            skills.append("Responsive Design")
        return skills

    @SCORING_DURATION.labels(component="job_match").time()
    def score(
        self,
        required_skills: Sequence[str],
        user_projects: Sequence[ProjectRecord],
    ) -> JobMatchResult:
        """Match required skills against the user's projects."""
        required = dedupe_skills(required_skills)
        user_skills = self.build_user_skills(user_projects)

        matched: list[str] = []
        missing: list[str] = []
        for skill in required:
            if matches_any(skill, user_skills):
                matched.append(skill)
            else:
                missing.append(skill)

        match_percentage = percentage(len(matched), len(required))

        JOB_MATCHES_COMPUTED.inc()
        logger.debug(
            "job_match_scored",
            required=len(required),
            matched=len(matched),
            match_percentage=match_percentage,
        )

        return JobMatchResult(
            match_percentage=match_percentage,
            matched_skills=matched,
            missing_skills=missing,
            recommended_projects=self._recommend_projects(matched, user_projects),
            breakdown=JobMatchBreakdown(
                essential_match=len(matched),
                total_required=len(required),
                total_matched=len(matched),
            ),
        )

    def score_description(
        self,
        job_description: str,
        user_projects: Sequence[ProjectRecord],
    ) -> JobMatchResult:
        return self.score(self.extract_required_skills(job_description), user_projects)

    def _recommend_projects(
        self,
        matched_skills: list[str],
        projects: Sequence[ProjectRecord],
    ) -> list[str]:
        """Ids of projects whose languages show a matched skill, most starred first."""
        if not matched_skills:
            return []
        relevant = [
            project
            for project in projects
            if any(matches_any(lang, matched_skills) for lang in project.languages)
        ]
        relevant.sort(key=lambda p: p.stars, reverse=True)
        return [p.id for p in relevant[: self.max_recommended]]
