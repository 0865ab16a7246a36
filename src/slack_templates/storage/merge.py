from __future__ import annotations

from slack_templates.models import Template


def merge_templates(
    imported: list[Template],
    existing: list[Template],
    overwrite: bool,
) -> list[Template]:
    """Merge two template lists by name.

    With *overwrite* the imported copy wins a name collision: untouched
    existing entries come first, then every imported one. Without it the
    existing copy wins and only new imported names are appended.
    """
    if overwrite:
        imported_names = {t.name for t in imported}
        kept = [t for t in existing if t.name not in imported_names]
        return kept + list(imported)

    existing_names = {t.name for t in existing}
    new = [t for t in imported if t.name not in existing_names]
    return list(existing) + new
