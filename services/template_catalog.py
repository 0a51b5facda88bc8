"""Static project template catalog.

Templates ship as JSON next to this module. The catalog is read once per
path and cached; entries without an id, a name or any taught skill are
skipped, as are entries that fail validation.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.config import get_settings
from app.exceptions import CatalogError
from app.logging_config import get_logger
from app.models import ProjectTemplate

logger = get_logger(__name__)

BUNDLED_CATALOG = Path(__file__).parent / "data" / "project_templates.json"


def _is_usable(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and bool(entry.get("id"))
        and bool(entry.get("name"))
        and bool(entry.get("skillsTaught"))
    )


@lru_cache(maxsize=8)
def _load(path: Path) -> tuple[ProjectTemplate, ...]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("template_catalog_unreadable", path=str(path), error=str(e))
        raise CatalogError(f"Cannot read template catalog {path}: {e}") from e

    entries = raw.get("templates", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise CatalogError(f"Template catalog {path} has no template list")

    templates: list[ProjectTemplate] = []
    for entry in entries:
        if not _is_usable(entry):
            logger.warning("template_skipped", reason="incomplete", entry_id=_entry_id(entry))
            continue
        try:
            templates.append(ProjectTemplate.model_validate(entry))
        except PydanticValidationError as e:
            logger.warning(
                "template_skipped",
                reason="invalid",
                entry_id=_entry_id(entry),
                errors=e.error_count(),
            )

    logger.info("template_catalog_loaded", path=str(path), templates=len(templates))
    return tuple(templates)


def _entry_id(entry: Any) -> str | None:
    return entry.get("id") if isinstance(entry, dict) else None


def load_catalog(path: str | Path | None = None) -> tuple[ProjectTemplate, ...]:
    """Load the template catalog.

    Args:
        path: Catalog file. Defaults to the configured path, then the bundled file.

    Raises:
        CatalogError: The file cannot be read or is not a catalog.
    """
    if path is None:
        path = get_settings().template_catalog_path or BUNDLED_CATALOG
    return _load(Path(path).resolve())


def merge_catalogs(
    local: Sequence[ProjectTemplate],
    extra: Iterable[ProjectTemplate],
) -> list[ProjectTemplate]:
    """Append extra templates whose id is not present yet. Local entries win."""
    merged = list(local)
    seen = {t.id for t in merged}
    for template in extra:
        if template.id in seen:
            continue
        seen.add(template.id)
        merged.append(template)
    return merged


def clear_catalog_cache() -> None:
    _load.cache_clear()
