"""Role -> skill tier taxonomy.

The taxonomy is plain configuration: a versioned, immutable table handed
to the skill-gap analyzer at construction time. DEFAULT_TAXONOMY covers
the four roles the product ships with; tests and callers can build their
own tables.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from app.exceptions import InvalidRoleError
from app.models import Role, SkillTier

# Weight each tier contributes per skill to coverage.
TIER_WEIGHTS: dict[SkillTier, int] = {
    SkillTier.ESSENTIAL: 3,
    SkillTier.PREFERRED: 2,
    SkillTier.NICE_TO_HAVE: 1,
}


class RoleRequirements(BaseModel):
    """Skills a role expects, grouped by tier."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    essential: tuple[str, ...] = ()
    preferred: tuple[str, ...] = ()
    nice_to_have: tuple[str, ...] = Field(default=(), alias="niceToHave")

    def for_tier(self, tier: SkillTier) -> tuple[str, ...]:
        return {
            SkillTier.ESSENTIAL: self.essential,
            SkillTier.PREFERRED: self.preferred,
            SkillTier.NICE_TO_HAVE: self.nice_to_have,
        }[tier]

    @property
    def total_weight(self) -> int:
        return sum(len(self.for_tier(tier)) * weight for tier, weight in TIER_WEIGHTS.items())


class RoleTaxonomy:
    """Immutable role table keyed by lower-cased role name."""

    def __init__(self, version: str, roles: Mapping[str, RoleRequirements]) -> None:
        self.version = version
        self._roles: Mapping[str, RoleRequirements] = MappingProxyType(
            {name.strip().lower(): reqs for name, reqs in roles.items()}
        )

    @property
    def roles(self) -> list[str]:
        return list(self._roles.keys())

    def __contains__(self, role: object) -> bool:
        return isinstance(role, str) and role.strip().lower() in self._roles

    def requirements_for(self, role: str) -> RoleRequirements:
        """Look up a role, failing fast on unknown names."""
        key = role.strip().lower() if isinstance(role, str) else ""
        try:
            return self._roles[key]
        except KeyError:
            raise InvalidRoleError(str(role), self.roles) from None

    def __repr__(self) -> str:
        return f"<RoleTaxonomy v{self.version}: {', '.join(self.roles)}>"


DEFAULT_TAXONOMY = RoleTaxonomy(
    version="2025.1",
    roles={
        Role.FRONTEND: RoleRequirements(
            title="Frontend Developer",
            essential=(
                "JavaScript",
                "TypeScript",
                "React",
                "HTML",
                "CSS",
                "Git",
                "REST API",
                "Responsive Design",
            ),
            preferred=("Testing", "Webpack", "npm", "State Management"),
            niceToHave=("Next.js", "Accessibility", "Performance Optimization", "GraphQL"),
        ),
        Role.BACKEND: RoleRequirements(
            title="Backend Developer",
            essential=(
                "Node.js",
                "Express",
                "SQL",
                "PostgreSQL",
                "REST API",
                "Git",
                "Authentication",
            ),
            preferred=("Docker", "Testing", "Redis", "MongoDB", "TypeScript"),
            niceToHave=("GraphQL", "Microservices", "Message Queues", "AWS"),
        ),
        Role.FULLSTACK: RoleRequirements(
            title="Full Stack Developer",
            essential=(
                "JavaScript",
                "React",
                "Node.js",
                "HTML",
                "CSS",
                "SQL",
                "REST API",
                "Git",
            ),
            preferred=(
                "TypeScript",
                "Express",
                "PostgreSQL",
                "Docker",
                "Testing",
                "Authentication",
            ),
            niceToHave=("Next.js", "GraphQL", "AWS", "CI/CD", "Redis"),
        ),
        Role.DEVOPS: RoleRequirements(
            title="DevOps Engineer",
            essential=("Linux", "Docker", "Kubernetes", "CI/CD", "Git", "Bash", "AWS"),
            preferred=("Terraform", "Ansible", "Monitoring", "Python", "Networking"),
            niceToHave=("Helm", "Prometheus", "Grafana", "Security", "Go"),
        ),
    },
)
