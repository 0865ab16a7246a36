"""JSON-file persistence for the template collection.

The whole collection is read and written as one JSON array on every operation.
There is no cross-process locking: one user, one process.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from slack_templates.errors import (
    DuplicateNameError,
    TemplateNotFoundError,
    TransportError,
    ValidationError,
)
from slack_templates.models import Template, templates_to_records, validate_template_records

logger = logging.getLogger(__name__)

TEMPLATES_FILENAME = "slack-templates.json"


class TemplateStore:
    """Template collection stored as a JSON array at *path*."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser().resolve()
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> list[Template]:
        """Read all templates. A missing file is an empty collection."""
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read templates from %s: %s", self._path, exc)
            raise TransportError(str(exc), title="Failed to load templates") from exc
        if not raw.strip():
            return []
        try:
            return validate_template_records(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Stored templates at %s are unreadable: %s", self._path, exc)
            raise TransportError(
                f"Stored templates are corrupt: {exc}",
                title="Failed to load templates",
            ) from exc

    async def save(self, templates: list[Template]) -> None:
        """Replace the whole persisted collection. Atomic write: .tmp then rename."""
        tmp = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(templates_to_records(templates), indent=2, ensure_ascii=False)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.error("Failed to save templates to %s: %s", self._path, exc)
            tmp.unlink(missing_ok=True)
            raise TransportError(str(exc), title="Failed to save templates") from exc
        logger.debug("Saved %d template(s) to %s", len(templates), self._path)

    async def get(self, name: str) -> Template:
        for template in await self.load():
            if template.name == name:
                return template
        raise TemplateNotFoundError(f"No template named '{name}'")

    async def create(self, template: Template) -> list[Template]:
        """Append *template*; fails with DuplicateNameError if the name is taken."""
        async with self._lock:
            templates = await self.load()
            if any(t.name == template.name for t in templates):
                raise DuplicateNameError("Please specify a different name")
            templates.append(template)
            await self.save(templates)
            logger.info("Created template '%s'", template.name)
            return templates

    async def update(self, template: Template, original_name: str) -> list[Template]:
        """Replace the template called *original_name* with *template* wholesale."""
        async with self._lock:
            templates = await self.load()
            if not any(t.name == original_name for t in templates):
                raise TemplateNotFoundError(f"No template named '{original_name}'")
            if template.name != original_name and any(t.name == template.name for t in templates):
                raise DuplicateNameError("Please specify a different name")
            updated = [template if t.name == original_name else t for t in templates]
            await self.save(updated)
            logger.info("Updated template '%s'", original_name)
            return updated

    async def delete(self, name: str) -> list[Template]:
        """Drop the template called *name* and return what remains."""
        async with self._lock:
            templates = await self.load()
            remaining = [t for t in templates if t.name != name]
            await self.save(remaining)
            logger.info("Deleted template '%s'", name)
            return remaining
