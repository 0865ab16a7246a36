"""Thread identifier normalization.

Slack identifies a thread by the ``ts`` of its parent message, formatted as
``seconds.microseconds``. Permalinks show the same value as ``p`` followed by
the digits with the decimal point removed, e.g. ``p1234567891234567``.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from slack_templates.errors import InvalidThreadFormatError, ThreadNotFoundError
from slack_templates.slack.client import TRANSPORT_ERRORS

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"^[0-9]+$")
_THREAD_TS_RE = re.compile(r"^[0-9]+\.[0-9]+$")
MICROS_DIGITS = 6


def normalize_thread_ts(raw: str | None) -> str | None:
    """Convert *raw* to canonical ``seconds.micros`` form without any network call.

    Returns None for empty input; raises InvalidThreadFormatError otherwise
    when the result is not a decimal timestamp.
    """
    if raw is None or not raw.strip():
        return None

    ts = raw.strip()
    if ts.startswith("p"):
        ts = ts[1:]

    if _DIGITS_RE.match(ts) and len(ts) > MICROS_DIGITS:
        ts = f"{ts[:-MICROS_DIGITS]}.{ts[-MICROS_DIGITS:]}"

    if not _THREAD_TS_RE.match(ts):
        raise InvalidThreadFormatError()
    return ts


async def validate_and_normalize_thread_ts(
    raw: str | None,
    channel_id: str,
    client: Any,
) -> str | None:
    """Normalize *raw* and confirm the thread exists in *channel_id*.

    One ``conversations.replies`` lookup, no retry. Any failure of the lookup is
    reported as ThreadNotFoundError.
    """
    ts = normalize_thread_ts(raw)
    if ts is None:
        return None

    try:
        resp = await client.conversations_replies(channel=channel_id, ts=ts, limit=1)
    except TRANSPORT_ERRORS as exc:
        logger.info("Thread lookup failed for %s in %s: %s", ts, channel_id, exc)
        raise ThreadNotFoundError() from exc

    if not resp.get("messages"):
        logger.info("Thread %s not found in %s", ts, channel_id)
        raise ThreadNotFoundError()
    return ts
