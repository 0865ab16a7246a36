from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from slack_templates.errors import NotInChannelError, TransportError
from slack_templates.slack.client import (
    CHANNEL_NOT_FOUND,
    NOT_IN_CHANNEL,
    TRANSPORT_ERRORS,
    slack_error_code,
)
from slack_templates.slack.threads import validate_and_normalize_thread_ts
from slack_templates.slack.variables import expand_variables

logger = logging.getLogger(__name__)

MEMBERS_PAGE_SIZE = 1000


async def _channel_member_ids(client: Any, channel_id: str) -> set[str]:
    members: set[str] = set()
    cursor: str | None = None
    while True:
        kwargs: dict[str, Any] = {"channel": channel_id, "limit": MEMBERS_PAGE_SIZE}
        if cursor:
            kwargs["cursor"] = cursor
        resp = await client.conversations_members(**kwargs)
        members.update(resp.get("members") or [])
        cursor = (resp.get("response_metadata") or {}).get("next_cursor")
        if not cursor:
            return members


async def check_channel_membership(channel_id: str, client: Any) -> None:
    """Raise NotInChannelError unless the token's user belongs to *channel_id*.

    Only the structured Slack error code is inspected: ``not_in_channel`` and
    ``channel_not_found`` both mean the user cannot see the channel.
    """
    try:
        identity = await client.auth_test()
        user_id = identity.get("user_id")
        if not user_id:
            raise TransportError("Failed to get user ID")
        members = await _channel_member_ids(client, channel_id)
    except TRANSPORT_ERRORS as exc:
        if slack_error_code(exc) in (NOT_IN_CHANNEL, CHANNEL_NOT_FOUND):
            raise NotInChannelError() from exc
        logger.error("Membership check failed for %s: %s", channel_id, exc)
        raise TransportError(str(exc), title="Failed to check channel membership") from exc

    if user_id not in members:
        raise NotInChannelError()


async def send_message(
    client: Any,
    channel_id: str,
    message: str,
    thread_ts: str | None = None,
    *,
    now: datetime | None = None,
) -> str | None:
    """Check membership, validate the thread, expand variables, post.

    Returns the ``ts`` of the posted message. Each step stops the sequence on
    failure; nothing is posted unless all checks pass.
    """
    await check_channel_membership(channel_id, client)

    normalized_ts = await validate_and_normalize_thread_ts(thread_ts, channel_id, client)
    text = await expand_variables(message, client, now=now)

    kwargs: dict[str, Any] = {"channel": channel_id, "text": text}
    if normalized_ts:
        kwargs["thread_ts"] = normalized_ts
    try:
        resp = await client.chat_postMessage(**kwargs)
    except TRANSPORT_ERRORS as exc:
        logger.error("chat.postMessage to %s failed: %s", channel_id, exc)
        raise TransportError(str(exc), title="Failed to send message") from exc

    logger.info(
        "Posted message to %s%s",
        channel_id,
        f" (thread {normalized_ts})" if normalized_ts else "",
    )
    return resp.get("ts")
