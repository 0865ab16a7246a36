"""Reading and writing template collections to user-chosen JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from slack_templates.errors import NotFoundError, TransportError, ValidationError
from slack_templates.models import Template, templates_to_records, validate_template_records

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_PATH = Path.home() / "Downloads" / "slack-templates.json"


def check_file_exists(path: str | Path) -> bool:
    return Path(path).expanduser().exists()


def read_templates_from_file(path: str | Path | None) -> list[Template]:
    if not path or not str(path).strip():
        raise ValidationError("Please enter a file path")

    file_path = Path(path).expanduser()
    if file_path.suffix.lower() != ".json":
        raise ValidationError("Please select a JSON file")

    try:
        raw = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(f"File not found: {file_path}") from exc
    except UnicodeDecodeError as exc:
        raise ValidationError("Invalid template format") from exc
    except OSError as exc:
        raise TransportError(str(exc)) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid template format") from exc

    templates = validate_template_records(data)
    logger.info("Read %d template(s) from %s", len(templates), file_path)
    return templates


def write_templates_to_file(path: str | Path, templates: list[Template]) -> Path:
    file_path = Path(path).expanduser()
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(
            json.dumps(templates_to_records(templates), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as exc:
        raise TransportError(str(exc)) from exc
    logger.info("Wrote %d template(s) to %s", len(templates), file_path)
    return file_path
