from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

from slack_templates.errors import TransportError
from slack_templates.slack.client import TRANSPORT_ERRORS

logger = logging.getLogger(__name__)

# {key} placeholders; there is no escape for a literal brace.
_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")

UNKNOWN_USER = "unknown"

# Shown to users composing a template.
VARIABLES_HELP = """\
Available variables for the message template:
{date} - Date (YYYY-MM-DD)
{time} - Time (HH:mm)
{datetime} - Date and time (YYYY-MM-DD HH:mm)
{user} - User Name"""


def build_variables(user: str | None, now: datetime) -> dict[str, str]:
    date = now.strftime("%Y-%m-%d")
    time = now.strftime("%H:%M")
    return {
        "date": date,
        "time": time,
        "datetime": f"{date} {time}",
        "user": user or UNKNOWN_USER,
    }


def substitute(message: str, variables: dict[str, str]) -> str:
    """Replace each known ``{key}``; unknown keys stay as written."""
    return _PLACEHOLDER_RE.sub(lambda m: variables.get(m.group(1), m.group(0)), message)


async def expand_variables(message: str, client: Any, now: datetime | None = None) -> str:
    """Fill ``{date}``, ``{time}``, ``{datetime}`` and ``{user}`` in *message*."""
    try:
        identity = await client.auth_test()
    except TRANSPORT_ERRORS as exc:
        logger.error("auth.test failed: %s", exc)
        raise TransportError(str(exc), title="Failed to look up user") from exc

    variables = build_variables(identity.get("user"), now or datetime.now())
    return substitute(message, variables)
