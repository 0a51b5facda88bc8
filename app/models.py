"""Value objects exchanged with the scoring and recommendation services.

Every model is frozen: services build fresh instances per call and never
mutate them afterwards. JSON output uses camelCase aliases so persistence
and presentation layers can store results unchanged; Python callers may use
either the field name or the alias.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Category(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    DEVOPS = "devops"
    MOBILE = "mobile"


class Role(str, Enum):
    """Roles shipped with the default taxonomy."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    DEVOPS = "devops"


class SkillTier(str, Enum):
    ESSENTIAL = "essential"
    PREFERRED = "preferred"
    NICE_TO_HAVE = "niceToHave"


class SkillMatchType(str, Enum):
    NEW = "new"
    FILLS_GAP = "fills_gap"
    REINFORCES = "reinforces"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TimeBucket(str, Enum):
    WEEKEND = "weekend"
    WEEK = "week"
    EXTENDED = "extended"


class SortKey(str, Enum):
    PRIORITY = "priority"
    DIFFICULTY = "difficulty"
    TIME = "time"
    SKILLS = "skills"


class SkillGapStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needs-work"
    BEGINNER = "beginner"


class ValueObject(BaseModel):
    """Base for all immutable records."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# --- Input records ---


class ProjectRecord(ValueObject):
    """A user's repository as supplied by the persistence layer."""

    id: str
    name: str
    description: str | None = None
    url: str | None = None
    languages: dict[str, int] = Field(default_factory=dict)
    stars: int = 0
    forks: int = 0
    last_commit_date: datetime | None = None
    complexity_score: int | None = None
    dependency_files: dict[str, str] = Field(default_factory=dict)


# --- Skill gap ---


class MissingSkills(ValueObject):
    essential: list[str] = Field(default_factory=list)
    preferred: list[str] = Field(default_factory=list)
    nice_to_have: list[str] = Field(default_factory=list)

    def for_tier(self, tier: SkillTier) -> list[str]:
        return {
            SkillTier.ESSENTIAL: self.essential,
            SkillTier.PREFERRED: self.preferred,
            SkillTier.NICE_TO_HAVE: self.nice_to_have,
        }[tier]

    def flatten(self) -> list[str]:
        return [*self.essential, *self.preferred, *self.nice_to_have]


class SkillGapAnalysis(ValueObject):
    role: str
    present_skills: list[str] = Field(default_factory=list)
    missing_skills: MissingSkills = Field(default_factory=MissingSkills)
    coverage_percentage: int = Field(default=0, ge=0, le=100)


class SkillGapSummary(ValueObject):
    status: SkillGapStatus
    priority: list[str] = Field(default_factory=list, max_length=5)
    message: str


# --- Job match ---


class JobMatchBreakdown(ValueObject):
    essential_match: int = 0
    total_required: int = 0
    total_matched: int = 0


class JobMatchResult(ValueObject):
    match_percentage: int = Field(ge=0, le=100)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    recommended_projects: list[str] = Field(default_factory=list)
    breakdown: JobMatchBreakdown = Field(default_factory=JobMatchBreakdown)


# --- Templates & recommendations ---


class LearningResource(ValueObject):
    title: str
    url: str
    type: str = Field(pattern=r"^(tutorial|docs|video|article|example)$")
    provider: str | None = None
    duration: str | None = None


class ProjectTemplate(ValueObject):
    id: str
    name: str
    description: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    difficulty: Difficulty
    time_estimate: str = ""
    skills_taught: list[str] = Field(default_factory=list)
    category: Category
    features: list[str] = Field(default_factory=list)
    learning_resources: list[LearningResource] = Field(default_factory=list)


class SkillMatch(ValueObject):
    skill: str
    type: SkillMatchType
    priority: SkillTier | None = None


class ProjectRecommendation(ProjectTemplate):
    priority_score: int = Field(ge=0)
    priority: Priority
    gaps_filled: list[str] = Field(default_factory=list)
    skill_matches: list[SkillMatch] = Field(default_factory=list)
    critical_gaps_addressed: int = 0


class FilterState(ValueObject):
    """Recommendation query. None (or "all") disables a predicate."""

    difficulty: Difficulty | None = None
    category: Category | None = None
    time_commitment: TimeBucket | None = None
    skills: list[str] = Field(default_factory=list)
    sort_by: SortKey = SortKey.PRIORITY
    priority_level: Priority | None = None

    @field_validator(
        "difficulty", "category", "time_commitment", "priority_level", mode="before"
    )
    @classmethod
    def _all_is_wildcard(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and v.lower() == "all"):
            return None
        return v


# --- Portfolio ---


class PortfolioDetails(ValueObject):
    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    days_since_last_commit: int | None = None
    substantial_projects: int = 0
    total_stars: int = 0
    total_forks: int = 0


class PortfolioBreakdown(ValueObject):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    details: PortfolioDetails = Field(default_factory=PortfolioDetails)


class PortfolioScoreResult(ValueObject):
    overall_score: int = Field(ge=0, le=100)
    rank: str
    project_quality_score: int = Field(ge=0, le=100)
    tech_diversity_score: int = Field(ge=0, le=100)
    documentation_score: int = Field(ge=0, le=100)
    consistency_score: int = Field(ge=0, le=100)
    professionalism_score: int = Field(default=0, ge=0, le=100)
    has_profile_readme: bool = False
    breakdown: PortfolioBreakdown = Field(default_factory=PortfolioBreakdown)
