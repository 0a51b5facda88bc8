"""Keyword-based skill detection over free text.

Finds frameworks, tools, databases and platforms mentioned in project
descriptions or job postings. Detection is keyword matching only, no
language understanding: each canonical skill has a list of spellings,
matched case-insensitively on word boundaries.
"""

from __future__ import annotations

import re


def _keywords(*spellings: str) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(s) for s in spellings)
    return re.compile(rf"(?<![\w.])(?:{alternatives})(?!\w)", re.IGNORECASE)


# Canonical skill name -> spellings. Order is the output order.
SKILL_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    # Frontend
    ("React", _keywords("react", "reactjs", "react.js")),
    ("React Native", _keywords("react native", "react-native")),
    ("Next.js", _keywords("next.js", "nextjs")),
    ("Vue", _keywords("vue", "vuejs", "vue.js")),
    ("Angular", _keywords("angular", "angularjs")),
    ("Svelte", _keywords("svelte", "sveltekit")),
    ("Tailwind CSS", _keywords("tailwind", "tailwindcss")),
    ("Bootstrap", _keywords("bootstrap")),
    ("Redux", _keywords("redux")),
    ("Zustand", _keywords("zustand")),
    ("TypeScript", _keywords("typescript")),
    # Backend
    ("Node.js", _keywords("node", "nodejs", "node.js")),
    ("Express", _keywords("express", "expressjs", "express.js")),
    ("Django", _keywords("django")),
    ("Flask", _keywords("flask")),
    ("FastAPI", _keywords("fastapi")),
    ("Spring", _keywords("spring", "spring boot")),
    ("Laravel", _keywords("laravel")),
    ("Rails", _keywords("rails", "ruby on rails")),
    ("REST API", _keywords("rest api", "restful api", "restful")),
    ("GraphQL", _keywords("graphql")),
    # Databases
    ("MongoDB", _keywords("mongodb", "mongo", "mongoose")),
    ("PostgreSQL", _keywords("postgresql", "postgres")),
    ("MySQL", _keywords("mysql")),
    ("SQLite", _keywords("sqlite")),
    ("Redis", _keywords("redis")),
    ("Firebase", _keywords("firebase")),
    ("Supabase", _keywords("supabase")),
    # Cloud & DevOps
    ("Docker", _keywords("docker", "dockerfile")),
    ("Kubernetes", _keywords("kubernetes", "k8s")),
    ("AWS", _keywords("aws", "amazon web services")),
    ("Azure", _keywords("azure")),
    ("GCP", _keywords("gcp", "google cloud")),
    ("Vercel", _keywords("vercel")),
    ("Netlify", _keywords("netlify")),
    ("CI/CD", _keywords("ci/cd", "cicd", "continuous integration", "github actions")),
    # Tooling
    ("Git", _keywords("git")),
    ("Webpack", _keywords("webpack")),
    ("Vite", _keywords("vite")),
    ("Jest", _keywords("jest")),
    (
        "Testing",
        _keywords("testing", "unit test", "unit tests", "integration test", "integration tests"),
    ),
]

RESPONSIVE_DESIGN_PATTERN = _keywords(
    "responsive",
    "mobile-friendly",
    "mobile friendly",
    "mobile responsive",
    "adaptive design",
    "media queries",
    "mobile-first",
    "mobile first",
    "cross-device",
    "multi-device",
    "tablet",
    "smartphone",
)

LANGUAGE_ALIASES: dict[str, str] = {
    "javascript": "JavaScript",
    "js": "JavaScript",
    "typescript": "TypeScript",
    "ts": "TypeScript",
    "python": "Python",
    "py": "Python",
    "java": "Java",
    "csharp": "C#",
    "c#": "C#",
    "cpp": "C++",
    "c++": "C++",
    "html": "HTML",
    "css": "CSS",
    "sql": "SQL",
    "go": "Go",
    "golang": "Go",
    "rust": "Rust",
    "ruby": "Ruby",
    "php": "PHP",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "dart": "Dart",
    "shell": "Shell",
    "bash": "Bash",
}


def detect_skills(text: str | None) -> list[str]:
    """Return canonical skill names mentioned in text (table order)."""
    if not text:
        return []
    return [skill for skill, pattern in SKILL_PATTERNS if pattern.search(text)]


def has_responsive_design(text: str | None) -> bool:
    if not text:
        return False
    return RESPONSIVE_DESIGN_PATTERN.search(text) is not None


def normalize_language(name: str) -> str:
    """Map a language name or alias to its display form."""
    stripped = name.strip()
    return LANGUAGE_ALIASES.get(stripped.lower(), stripped)
