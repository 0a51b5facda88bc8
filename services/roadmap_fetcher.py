"""Live project templates from roadmap.sh.

Maps a role to a roadmap.sh project listing, downloads it and turns the
project links into best-effort ProjectTemplate records. Field inference
is keyword based: difficulty from the title, tech stack and category from
the roadmap path, time estimate from difficulty.

Fetch failures raise ExternalServiceError. The recommendation engine is
responsible for isolating them.
"""

from __future__ import annotations

import asyncio
import re
from typing import Protocol

import httpx

from app.config import get_settings
from app.exceptions import ExternalServiceError
from app.logging_config import get_logger
from app.models import Category, Difficulty, LearningResource, ProjectTemplate

logger = get_logger(__name__)

DEFAULT_ROADMAP_PATH = "software-design-architecture"

ROLE_PATHS: dict[str, str] = {
    "frontend developer": "frontend",
    "frontend": "frontend",
    "backend developer": "backend",
    "backend": "backend",
    "full stack developer": "full-stack",
    "fullstack": "full-stack",
    "full-stack": "full-stack",
    "devops engineer": "devops",
    "devops": "devops",
    "software engineer": DEFAULT_ROADMAP_PATH,
}

PATH_CATEGORIES: dict[str, Category] = {
    "frontend": Category.FRONTEND,
    "backend": Category.BACKEND,
    "full-stack": Category.FULLSTACK,
    "devops": Category.DEVOPS,
}

PATH_TECH_STACKS: dict[str, list[str]] = {
    "frontend": ["HTML", "CSS", "JavaScript", "React"],
    "backend": ["Node.js", "Express", "PostgreSQL"],
    "full-stack": ["React", "Node.js", "Express", "PostgreSQL"],
    "devops": ["Docker", "Kubernetes", "CI/CD", "Linux"],
}

PATH_SKILLS: dict[str, list[str]] = {
    "frontend": ["JavaScript", "HTML", "CSS"],
    "backend": ["Node.js", "Express", "Database design"],
    "full-stack": ["JavaScript", "Node.js", "REST API"],
    "devops": ["Linux", "Automation", "Infrastructure"],
}

TITLE_SKILLS: dict[str, list[str]] = {
    "api": ["REST API", "API design"],
    "auth": ["Authentication", "JWT"],
    "database": ["Database design", "SQL"],
    "docker": ["Docker", "Containerization"],
    "testing": ["Testing", "Unit tests"],
    "deployment": ["Deployment", "CI/CD"],
}

BEGINNER_WORDS = ("basic", "simple", "intro")
ADVANCED_WORDS = ("advanced", "complex", "scalable")

TIME_ESTIMATES: dict[Difficulty, str] = {
    Difficulty.BEGINNER: "1-3 days",
    Difficulty.INTERMEDIATE: "1-2 weeks",
    Difficulty.ADVANCED: "2-4 weeks",
}

# [Title](/projects/slug) and <a href="/projects/slug">Title</a>
MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((/projects/[^)\s]+)\)")
HTML_LINK = re.compile(
    r"<a\s[^>]*href=[\"'](/projects/[^\"']+)[\"'][^>]*>(.*?)</a>",
    re.IGNORECASE | re.DOTALL,
)
TAG = re.compile(r"<[^>]+>")

RETRYABLE_STATUS = (429, 502, 503, 504)

# The GitHub token is only ever sent to these hosts.
GITHUB_HOSTS = frozenset({"github.com", "api.github.com", "raw.githubusercontent.com"})


class TextFetcher(Protocol):
    """Anything that can download a page as text."""

    async def fetch(self, url: str) -> str: ...


class HttpTextFetcher:
    """httpx-backed TextFetcher with bounded retries on transient failures."""

    def __init__(
        self,
        timeout: float | None = None,
        max_retries: int = 2,
        backoff: float = 0.5,
    ) -> None:
        settings = get_settings()
        self.timeout = timeout if timeout is not None else settings.template_fetch_timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self._headers = {"Accept": "text/html, text/markdown;q=0.9, */*;q=0.8"}
        self._github_token = settings.github_token

    def _headers_for(self, url: str) -> dict[str, str]:
        headers = dict(self._headers)
        if self._github_token and httpx.URL(url).host in GITHUB_HOSTS:
            headers["Authorization"] = f"Bearer {self._github_token.get_secret_value()}"
        return headers

    async def fetch(self, url: str) -> str:
        last_exception: Exception | None = None

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = await client.get(url, headers=self._headers_for(url))
                except httpx.RequestError as exc:
                    last_exception = exc
                    if attempt < self.max_retries:
                        await self._wait(attempt, url, reason="connection")
                        continue
                    raise ExternalServiceError(
                        "roadmap", f"Could not reach {url}"
                    ) from exc

                status = response.status_code
                if status in RETRYABLE_STATUS and attempt < self.max_retries:
                    await self._wait(attempt, url, reason=str(status))
                    continue
                if status >= 400:
                    raise ExternalServiceError(
                        "roadmap", f"{url} returned status {status}"
                    )
                return response.text

        raise ExternalServiceError("roadmap", f"Fetching {url} failed") from last_exception

    async def _wait(self, attempt: int, url: str, reason: str) -> None:
        wait = self.backoff * (2**attempt)
        logger.warning(
            "roadmap_fetch_retry",
            attempt=attempt + 1,
            wait_seconds=wait,
            reason=reason,
            url=url,
        )
        await asyncio.sleep(wait)


def infer_difficulty(title: str) -> Difficulty:
    lowered = title.lower()
    if any(word in lowered for word in BEGINNER_WORDS):
        return Difficulty.BEGINNER
    if any(word in lowered for word in ADVANCED_WORDS):
        return Difficulty.ADVANCED
    return Difficulty.INTERMEDIATE


def infer_skills(title: str, roadmap_path: str) -> list[str]:
    lowered = title.lower()
    skills: list[str] = []
    for keyword, related in TITLE_SKILLS.items():
        if keyword in lowered:
            skills.extend(related)
    skills.extend(PATH_SKILLS.get(roadmap_path, []))
    return list(dict.fromkeys(skills))


class RoadmapTemplateSource:
    """Project templates scraped from roadmap.sh project listings."""

    def __init__(self, fetcher: TextFetcher | None = None, base_url: str | None = None) -> None:
        self.fetcher = fetcher or HttpTextFetcher()
        self.base_url = (base_url or get_settings().roadmap_base_url).rstrip("/")

    @staticmethod
    def roadmap_path(role: str) -> str:
        return ROLE_PATHS.get(role.strip().lower(), DEFAULT_ROADMAP_PATH)

    def project_url(self, role: str) -> str:
        return f"{self.base_url}/{self.roadmap_path(role)}/projects"

    def parse(self, content: str, roadmap_path: str) -> list[ProjectTemplate]:
        """Turn project links into templates, first occurrence of each id wins."""
        links: list[tuple[int, str, str]] = []
        for match in MARKDOWN_LINK.finditer(content):
            links.append((match.start(), match.group(1), match.group(2)))
        for match in HTML_LINK.finditer(content):
            links.append((match.start(), TAG.sub("", match.group(2)), match.group(1)))
        links.sort(key=lambda link: link[0])

        templates: list[ProjectTemplate] = []
        seen: set[str] = set()
        for _, raw_title, href in links:
            title = " ".join(raw_title.split())
            slug = href.removeprefix("/projects/").strip("/").lower()
            if not title or not slug or slug in seen:
                continue
            seen.add(slug)
            templates.append(self._build_template(slug, title, href, roadmap_path))
        return templates

    def _build_template(
        self, slug: str, title: str, href: str, roadmap_path: str
    ) -> ProjectTemplate:
        difficulty = infer_difficulty(title)
        return ProjectTemplate(
            id=slug,
            name=title,
            description=f"Build {title} - a {roadmap_path} project from roadmap.sh",
            tech_stack=PATH_TECH_STACKS.get(roadmap_path, ["JavaScript"]),
            difficulty=difficulty,
            time_estimate=TIME_ESTIMATES[difficulty],
            skills_taught=infer_skills(title, roadmap_path),
            category=PATH_CATEGORIES.get(roadmap_path, Category.BACKEND),
            learning_resources=[
                LearningResource(
                    title=f"{title} - Roadmap.sh",
                    url=f"{self.base_url}{href}",
                    type="article",
                    provider="roadmap.sh",
                )
            ],
        )

    async def fetch_templates(self, role: str) -> list[ProjectTemplate]:
        """Fetch and parse the project listing for a role.

        Raises:
            ExternalServiceError: The listing could not be downloaded.
        """
        roadmap_path = self.roadmap_path(role)
        content = await self.fetcher.fetch(self.project_url(role))
        templates = self.parse(content, roadmap_path)
        logger.info(
            "roadmap_templates_parsed",
            role=role,
            roadmap_path=roadmap_path,
            templates=len(templates),
        )
        return templates
