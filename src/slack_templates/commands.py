"""Operations called by front ends (CLI, launchers, bots).

Every function here takes its collaborators explicitly, converts
``TemplateError`` into a notice for the user, and returns a ``CommandResult``
instead of raising. Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from slack_templates.errors import (
    DuplicateNameError,
    ErrorKind,
    NotFoundError,
    TemplateError,
    ValidationError,
)
from slack_templates.models import Channel, Template
from slack_templates.notify import Notice, Notifier
from slack_templates.slack.client import SlackSession, fetch_all_channels, find_channel_by_id
from slack_templates.slack.sender import send_message
from slack_templates.slack.threads import validate_and_normalize_thread_ts
from slack_templates.storage.io import (
    DEFAULT_EXPORT_PATH,
    check_file_exists,
    read_templates_from_file,
    write_templates_to_file,
)
from slack_templates.storage.merge import merge_templates
from slack_templates.storage.store import TemplateStore

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a front-end operation."""

    ok: bool
    value: Any = None
    error_kind: ErrorKind | None = None
    message: str | None = None


async def _succeed(notifier: Notifier, title: str, message: str | None = None, value: Any = None) -> CommandResult:
    await notifier.notify(Notice("success", title, message))
    return CommandResult(ok=True, value=value, message=message)


async def _fail(notifier: Notifier, exc: TemplateError, title: str | None = None) -> CommandResult:
    await notifier.notify(Notice("failure", title or exc.title, exc.message))
    return CommandResult(ok=False, error_kind=exc.kind, message=exc.message)


# -- templates ----------------------------------------------------------------


async def load_templates(store: TemplateStore, notifier: Notifier) -> list[Template]:
    """Load all templates; on failure notify and return an empty list."""
    try:
        return await store.load()
    except TemplateError as exc:
        await _fail(notifier, exc, "Failed to load templates")
        return []


async def list_templates(store: TemplateStore, notifier: Notifier) -> CommandResult:
    """Like load_templates, but reports failure instead of an empty list."""
    try:
        templates = await store.load()
    except TemplateError as exc:
        result = await _fail(notifier, exc, "Failed to load templates")
        result.value = []
        return result
    return CommandResult(ok=True, value=templates)


async def get_template(store: TemplateStore, notifier: Notifier, name: str) -> CommandResult:
    try:
        template = await store.get(name)
    except TemplateError as exc:
        return await _fail(notifier, exc)
    return CommandResult(ok=True, value=template)


async def save_templates(store: TemplateStore, templates: list[Template], notifier: Notifier) -> CommandResult:
    try:
        await store.save(templates)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Failed to save templates")
    return CommandResult(ok=True, value=templates)


def _require_fields(name: str, content: str, channel_id: str) -> None:
    if not name.strip():
        raise ValidationError("Please enter a template name")
    if not content.strip():
        raise ValidationError("Please enter a message")
    if not channel_id:
        raise ValidationError("Please select a channel")


async def _build_template(
    session: SlackSession,
    *,
    name: str,
    content: str,
    channel_id: str,
    thread_ts: str | None,
) -> Template:
    """Validate form input against Slack and return the template to store."""
    _require_fields(name, content, channel_id)
    client = await session.client()
    normalized_ts = await validate_and_normalize_thread_ts(thread_ts, channel_id, client)

    channel = find_channel_by_id(await fetch_all_channels(client), channel_id)
    if channel is None:
        raise NotFoundError("Selected channel not found")

    return Template(
        name=name.strip(),
        content=content.strip(),
        channel_id=channel.id,
        channel_name=channel.name,
        thread_ts=normalized_ts,
    )


async def create_template(
    store: TemplateStore,
    session: SlackSession,
    notifier: Notifier,
    *,
    name: str,
    content: str,
    channel_id: str,
    thread_ts: str | None = None,
) -> CommandResult:
    try:
        # Duplicate names fail here, before any Slack round trip.
        if any(t.name == name.strip() for t in await store.load()):
            raise DuplicateNameError("Please specify a different name")
        template = await _build_template(
            session, name=name, content=content, channel_id=channel_id, thread_ts=thread_ts
        )
        await store.create(template)
    except DuplicateNameError as exc:
        return await _fail(notifier, exc)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Failed to create template")
    return await _succeed(notifier, "Template created successfully", value=template)


async def update_template(
    store: TemplateStore,
    session: SlackSession,
    notifier: Notifier,
    original_name: str,
    *,
    name: str,
    content: str,
    channel_id: str,
    thread_ts: str | None = None,
) -> CommandResult:
    try:
        template = await _build_template(
            session, name=name, content=content, channel_id=channel_id, thread_ts=thread_ts
        )
        templates = await store.update(template, original_name)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Failed to update template")
    return await _succeed(notifier, "Template updated successfully", value=templates)


async def delete_template(store: TemplateStore, notifier: Notifier, name: str) -> CommandResult:
    try:
        remaining = await store.delete(name)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Failed to delete template")
    return await _succeed(notifier, "Template deleted successfully", value=remaining)


# -- slack --------------------------------------------------------------------


async def list_channels(session: SlackSession, notifier: Notifier) -> CommandResult:
    try:
        client = await session.client()
        channels: list[Channel] = await fetch_all_channels(client)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Failed to fetch channel list")
    return CommandResult(ok=True, value=channels)


async def post_message(
    session: SlackSession,
    notifier: Notifier,
    channel_id: str,
    message: str,
    thread_ts: str | None = None,
) -> CommandResult:
    try:
        client = await session.client()
        ts = await send_message(client, channel_id, message, thread_ts)
    except TemplateError as exc:
        return await _fail(notifier, exc)
    return await _succeed(notifier, "Message sent successfully", value=ts)


async def send_template(
    store: TemplateStore,
    session: SlackSession,
    notifier: Notifier,
    name: str,
) -> CommandResult:
    found = await get_template(store, notifier, name)
    if not found.ok:
        return found
    template: Template = found.value
    return await post_message(session, notifier, template.channel_id, template.content, template.thread_ts)


# -- import / export ----------------------------------------------------------


async def import_templates(
    store: TemplateStore,
    notifier: Notifier,
    path: str | Path | None = None,
    overwrite: bool = False,
) -> CommandResult:
    """Merge templates from a JSON file into the store."""
    try:
        imported = read_templates_from_file(path if path is not None else DEFAULT_EXPORT_PATH)
        existing = await store.load()
        merged = merge_templates(imported, existing, overwrite)
        await store.save(merged)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Import failed")
    return await _succeed(
        notifier,
        "Import successful",
        f"Imported {len(imported)} templates",
        value=merged,
    )


async def export_templates(
    store: TemplateStore,
    notifier: Notifier,
    path: str | Path | None = None,
    overwrite: bool = False,
) -> CommandResult:
    """Write every stored template to a JSON file.

    An existing file is only replaced when *overwrite* is set.
    """
    target = Path(path).expanduser() if path is not None else DEFAULT_EXPORT_PATH
    if check_file_exists(target) and not overwrite:
        exc = ValidationError(f"Do you want to overwrite {target}?", title="File already exists")
        return await _fail(notifier, exc)
    try:
        templates = await store.load()
        write_templates_to_file(target, templates)
    except TemplateError as exc:
        return await _fail(notifier, exc, "Export failed")
    return await _succeed(
        notifier,
        "Export successful",
        f"Exported {len(templates)} templates to {target}",
        value=target,
    )
