"""Skill normalization and fuzzy matching.

Two skills match when their normalized forms are equal, when one contains
the other, or when both belong to the same synonym group. Containment is
deliberately permissive ("react" matches "react native", "c" matches
"c++"), so the relation is symmetric but not transitive.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.models import MissingSkills, SkillMatch, SkillMatchType, SkillTier

SYNONYM_GROUPS: tuple[frozenset[str], ...] = (
    frozenset({"js", "javascript"}),
    frozenset({"ts", "typescript"}),
    frozenset({"node", "nodejs", "node.js"}),
    frozenset({"react", "reactjs", "react.js"}),
    frozenset({"vue", "vuejs", "vue.js"}),
    frozenset({"docker", "containerization"}),
    frozenset({"kubernetes", "k8s"}),
    frozenset({"postgres", "postgresql"}),
    frozenset({"go", "golang"}),
)

# Tiers are consulted in this order when tagging a gap.
TIER_ORDER: tuple[SkillTier, ...] = (
    SkillTier.ESSENTIAL,
    SkillTier.PREFERRED,
    SkillTier.NICE_TO_HAVE,
)


def normalize(skill: str) -> str:
    return skill.strip().lower()


def skills_match(first: str, second: str) -> bool:
    """Fuzzy equality between two skill names."""
    a = normalize(first)
    b = normalize(second)

    if a == b:
        return True
    # An empty string is a substring of everything.
    if not a or not b:
        return False
    if a in b or b in a:
        return True
    return any(a in group and b in group for group in SYNONYM_GROUPS)


def matches_any(skill: str, candidates: Iterable[str]) -> bool:
    return any(skills_match(skill, candidate) for candidate in candidates)


def match_skills(
    project_skills: Iterable[str],
    user_skills: Iterable[str],
    missing_skills: MissingSkills,
) -> list[SkillMatch]:
    """Tag each project skill relative to what the user has and lacks.

    A skill the user already has reinforces; otherwise it fills the gap of
    the highest tier it matches; otherwise it is new.
    """
    user = list(user_skills)
    matches: list[SkillMatch] = []

    for skill in project_skills:
        if matches_any(skill, user):
            matches.append(SkillMatch(skill=skill, type=SkillMatchType.REINFORCES))
            continue

        tier = next(
            (t for t in TIER_ORDER if matches_any(skill, missing_skills.for_tier(t))),
            None,
        )
        if tier is not None:
            matches.append(
                SkillMatch(skill=skill, type=SkillMatchType.FILLS_GAP, priority=tier)
            )
        else:
            matches.append(SkillMatch(skill=skill, type=SkillMatchType.NEW))

    return matches
