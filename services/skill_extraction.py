"""Skill extraction across a project set.

Every project contributes base skills synchronously (languages and
keywords in its description). On top of that, one asyncio task per project
runs a two-stage extraction strategy:

1. fast_local_extract: cheap local analysis (dependency manifests)
2. slow_external_extract: an external analysis provider, only consulted
   when the fast path finds nothing

Each stage has its own timeout. A task that fails or times out contributes
nothing and never aborts the batch. Task results are unioned into the
result set as they complete.
"""

from __future__ import annotations

import asyncio
import json
import re
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Sequence

from app.config import get_settings
from app.logging_config import get_logger
from app.metrics import EXTRACTION_TASKS
from app.models import ProjectRecord
from services.skill_detection import detect_skills, has_responsive_design, normalize_language

logger = get_logger(__name__)

# Dependency name (lower-cased) -> skill
DEPENDENCY_SKILLS: dict[str, str] = {
    # JavaScript / TypeScript
    "react": "React",
    "react-dom": "React",
    "react-native": "React Native",
    "next": "Next.js",
    "vue": "Vue",
    "nuxt": "Nuxt",
    "@angular/core": "Angular",
    "svelte": "Svelte",
    "tailwindcss": "Tailwind CSS",
    "bootstrap": "Bootstrap",
    "redux": "Redux",
    "@reduxjs/toolkit": "Redux",
    "zustand": "Zustand",
    "typescript": "TypeScript",
    "express": "Express",
    "fastify": "Fastify",
    "@nestjs/core": "NestJS",
    "graphql": "GraphQL",
    "@apollo/server": "GraphQL",
    "mongoose": "MongoDB",
    "mongodb": "MongoDB",
    "pg": "PostgreSQL",
    "prisma": "Prisma",
    "@prisma/client": "Prisma",
    "mysql2": "MySQL",
    "redis": "Redis",
    "ioredis": "Redis",
    "firebase": "Firebase",
    "@supabase/supabase-js": "Supabase",
    "jsonwebtoken": "Authentication",
    "passport": "Authentication",
    "next-auth": "Authentication",
    "jest": "Testing",
    "vitest": "Testing",
    "mocha": "Testing",
    "cypress": "Testing",
    "@playwright/test": "Testing",
    "webpack": "Webpack",
    "vite": "Vite",
    "socket.io": "WebSockets",
    "amqplib": "Message Queues",
    "kafkajs": "Message Queues",
    # Python
    "django": "Django",
    "djangorestframework": "REST API",
    "flask": "Flask",
    "fastapi": "FastAPI",
    "sqlalchemy": "SQL",
    "psycopg2": "PostgreSQL",
    "psycopg2-binary": "PostgreSQL",
    "asyncpg": "PostgreSQL",
    "pymongo": "MongoDB",
    "celery": "Message Queues",
    "pika": "Message Queues",
    "pytest": "Testing",
    "pandas": "Pandas",
    "numpy": "NumPy",
    "scikit-learn": "Machine Learning",
    "torch": "Machine Learning",
    "tensorflow": "Machine Learning",
    "boto3": "AWS",
    "pyjwt": "Authentication",
    # Go
    "github.com/gin-gonic/gin": "Gin",
    "github.com/labstack/echo/v4": "Echo",
    "github.com/gofiber/fiber/v2": "Fiber",
    "gorm.io/gorm": "SQL",
    "github.com/jackc/pgx/v5": "PostgreSQL",
    "github.com/lib/pq": "PostgreSQL",
    "github.com/redis/go-redis/v9": "Redis",
    "github.com/golang-jwt/jwt/v5": "Authentication",
    "github.com/stretchr/testify": "Testing",
    "k8s.io/client-go": "Kubernetes",
    "github.com/aws/aws-sdk-go-v2": "AWS",
    # Ruby
    "rails": "Rails",
    "sinatra": "Sinatra",
    "devise": "Authentication",
    "rspec": "Testing",
    "rspec-rails": "Testing",
    "sidekiq": "Message Queues",
    # Rust
    "actix-web": "Actix",
    "axum": "Axum",
    "tokio": "Async Rust",
    "diesel": "SQL",
    "sqlx": "SQL",
    "serde": "Serde",
    # Java
    "spring-boot-starter-web": "Spring",
    "spring-boot-starter-data-jpa": "SQL",
    "spring-boot-starter-security": "Authentication",
    "junit-jupiter": "Testing",
    "junit": "Testing",
    "postgresql": "PostgreSQL",
    "kafka-clients": "Message Queues",
    # PHP
    "laravel/framework": "Laravel",
    "symfony/framework-bundle": "Symfony",
    "phpunit/phpunit": "Testing",
    "firebase/php-jwt": "Authentication",
}

# Manifest file -> skill its presence implies
MANIFEST_SKILLS: dict[str, str] = {
    "package.json": "npm",
    "requirements.txt": "Python",
    "pyproject.toml": "Python",
    "go.mod": "Go",
    "gemfile": "Ruby",
    "cargo.toml": "Rust",
    "pom.xml": "Maven",
    "composer.json": "PHP",
    "dockerfile": "Docker",
    "docker-compose.yml": "Docker",
    "docker-compose.yaml": "Docker",
}

REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")
GO_REQUIRE = re.compile(r"^\s*(?:require\s+)?([a-z0-9.-]+\.[a-z]+/\S+)\s+v", re.MULTILINE)
GEM_LINE = re.compile(r"""^\s*gem\s+["']([^"']+)["']""", re.MULTILINE)
POM_ARTIFACT = re.compile(r"<artifactId>\s*([^<\s]+)\s*</artifactId>")


def _requirement_name(spec: str) -> str | None:
    match = REQUIREMENT_NAME.match(spec)
    return match.group(1).lower() if match else None


def _parse_package_json(text: str) -> Iterable[str]:
    data = json.loads(text)
    for section in ("dependencies", "devDependencies", "peerDependencies"):
        yield from data.get(section, {}) or {}


def _parse_requirements(text: str) -> Iterable[str]:
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        name = _requirement_name(line)
        if name:
            yield name


def _parse_pyproject(text: str) -> Iterable[str]:
    data = tomllib.loads(text)
    project = data.get("project", {})
    specs = list(project.get("dependencies", []))
    for extra in project.get("optional-dependencies", {}).values():
        specs.extend(extra)
    for spec in specs:
        name = _requirement_name(spec)
        if name:
            yield name
    poetry = data.get("tool", {}).get("poetry", {})
    yield from poetry.get("dependencies", {})
    yield from poetry.get("dev-dependencies", {})


def _parse_go_mod(text: str) -> Iterable[str]:
    return GO_REQUIRE.findall(text)


def _parse_gemfile(text: str) -> Iterable[str]:
    return GEM_LINE.findall(text)


def _parse_cargo(text: str) -> Iterable[str]:
    data = tomllib.loads(text)
    for section in ("dependencies", "dev-dependencies"):
        yield from data.get(section, {})


def _parse_pom(text: str) -> Iterable[str]:
    return POM_ARTIFACT.findall(text)


def _parse_composer(text: str) -> Iterable[str]:
    data = json.loads(text)
    for section in ("require", "require-dev"):
        yield from data.get(section, {}) or {}


MANIFEST_PARSERS: dict[str, Callable[[str], Iterable[str]]] = {
    "package.json": _parse_package_json,
    "requirements.txt": _parse_requirements,
    "pyproject.toml": _parse_pyproject,
    "go.mod": _parse_go_mod,
    "gemfile": _parse_gemfile,
    "cargo.toml": _parse_cargo,
    "pom.xml": _parse_pom,
    "composer.json": _parse_composer,
}


def skills_from_manifest(filename: str, text: str) -> set[str]:
    """Skills implied by one dependency file. Unknown files yield nothing.

    Raises:
        ValueError: The manifest is not valid JSON/TOML.
    """
    key = filename.rsplit("/", 1)[-1].lower()
    skills: set[str] = set()
    if key in MANIFEST_SKILLS:
        skills.add(MANIFEST_SKILLS[key])

    parser = MANIFEST_PARSERS.get(key)
    if parser is None:
        return skills
    for dependency in parser(text):
        skill = DEPENDENCY_SKILLS.get(str(dependency).lower())
        if skill:
            skills.add(skill)
    return skills


class SkillExtractionStrategy(ABC):
    """Two-stage per-project skill extraction."""

    name: str = "base"

    @abstractmethod
    async def fast_local_extract(self, project: ProjectRecord) -> set[str] | None:
        """Cheap local extraction. None or an empty set means nothing found."""
        ...

    @abstractmethod
    async def slow_external_extract(self, project: ProjectRecord) -> set[str]:
        """Expensive extraction, used only when the fast path found nothing."""
        ...

    def __repr__(self) -> str:
        return f"<SkillExtractionStrategy: {self.name}>"


SlowExtractor = Callable[[ProjectRecord], Awaitable[set[str]]]


class DependencyFileStrategy(SkillExtractionStrategy):
    """Reads dependency manifests; delegates the slow path to a pluggable coroutine."""

    name = "dependency_files"

    def __init__(self, slow_extractor: SlowExtractor | None = None) -> None:
        self.slow_extractor = slow_extractor

    async def fast_local_extract(self, project: ProjectRecord) -> set[str] | None:
        if not project.dependency_files:
            return None

        skills: set[str] = set()
        for filename, text in project.dependency_files.items():
            try:
                skills |= skills_from_manifest(filename, text)
            except (ValueError, AttributeError, TypeError) as e:
                logger.debug(
                    "manifest_unparseable",
                    project_id=project.id,
                    filename=filename,
                    error=str(e),
                )
        return skills or None

    async def slow_external_extract(self, project: ProjectRecord) -> set[str]:
        if self.slow_extractor is None:
            return set()
        return set(await self.slow_extractor(project))


class SkillExtractionExecutor:
    """Fans skill extraction out over projects with per-task timeouts."""

    def __init__(
        self,
        strategy: SkillExtractionStrategy | None = None,
        fast_timeout: float | None = None,
        slow_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.strategy = strategy or DependencyFileStrategy()
        self.fast_timeout = fast_timeout or settings.extraction_fast_timeout
        self.slow_timeout = slow_timeout or settings.extraction_slow_timeout

    @staticmethod
    def base_skills(project: ProjectRecord) -> set[str]:
        """Languages plus skills named in the description."""
        skills = {normalize_language(lang) for lang in project.languages if lang.strip()}
        skills.update(detect_skills(project.description))
        if has_responsive_design(project.description):
            skills.add("Responsive Design")
        return skills

    async def extract(
        self,
        projects: Sequence[ProjectRecord],
        cancel_event: asyncio.Event | None = None,
    ) -> set[str]:
        """Union of skills across projects.

        Setting `cancel_event` stops waiting, cancels outstanding tasks and
        returns what the finished tasks produced.
        """
        skills: set[str] = set()
        for project in projects:
            skills |= self.base_skills(project)
        if not projects:
            return skills

        pending = {
            asyncio.create_task(self._extract_project(p), name=f"extract:{p.id}")
            for p in projects
        }
        cancel_waiter = asyncio.create_task(cancel_event.wait()) if cancel_event else None

        try:
            while pending:
                waiting = (pending | {cancel_waiter}) if cancel_waiter else pending
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    if task is cancel_waiter:
                        continue
                    pending.discard(task)
                    skills |= task.result()
                if cancel_waiter is not None and cancel_waiter.done():
                    logger.info("skill_extraction_cancelled", outstanding=len(pending))
                    break
        finally:
            for task in pending:
                task.cancel()
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
                EXTRACTION_TASKS.labels(outcome="cancelled").inc(len(pending))

        logger.debug("skills_extracted", projects=len(projects), skills=len(skills))
        return skills

    async def _extract_project(self, project: ProjectRecord) -> set[str]:
        fast = await self._run_stage(
            "fast", self.strategy.fast_local_extract(project), self.fast_timeout, project
        )
        if fast:
            EXTRACTION_TASKS.labels(outcome="fast").inc()
            return set(fast)

        slow = await self._run_stage(
            "slow", self.strategy.slow_external_extract(project), self.slow_timeout, project
        )
        EXTRACTION_TASKS.labels(outcome="slow" if slow else "empty").inc()
        return set(slow or ())

    async def _run_stage(
        self,
        stage: str,
        coro: Awaitable[set[str] | None],
        timeout: float,
        project: ProjectRecord,
    ) -> set[str] | None:
        try:
            return await asyncio.wait_for(coro, timeout=timeout)
        except TimeoutError:
            EXTRACTION_TASKS.labels(outcome=f"{stage}_timeout").inc()
            logger.warning(
                "skill_extraction_timeout",
                stage=stage,
                project_id=project.id,
                timeout=timeout,
            )
        except Exception as e:
            EXTRACTION_TASKS.labels(outcome=f"{stage}_error").inc()
            logger.warning(
                "skill_extraction_failed",
                stage=stage,
                project_id=project.id,
                error=str(e),
                error_type=type(e).__name__,
            )
        return None
