from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from typing import Any, Protocol

import aiohttp
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from slack_templates.errors import ChannelPermissionError, TransportError
from slack_templates.models import Channel

logger = logging.getLogger(__name__)

# Slack error codes that mean the user cannot post to the channel.
NOT_IN_CHANNEL = "not_in_channel"
CHANNEL_NOT_FOUND = "channel_not_found"

CHANNEL_TYPES = "public_channel,private_channel"
CHANNEL_PAGE_SIZE = 200

# Anything the Slack client can raise for a failed round trip.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    SlackClientError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
)


class TokenProvider(Protocol):
    async def get_token(self) -> str | None: ...


class StaticTokenProvider:
    """Token known up front, e.g. read from config.yaml."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    async def get_token(self) -> str | None:
        return self._token


class EnvTokenProvider:
    """Reads the token from the environment on every call."""

    def __init__(self, var: str = "SLACK_TOKEN") -> None:
        self._var = var

    async def get_token(self) -> str | None:
        return os.environ.get(self._var)


ClientFactory = Callable[[str], Any]


def _default_client_factory(token: str) -> AsyncWebClient:
    return AsyncWebClient(token=token)


class SlackSession:
    """Capability object handed to every operation that talks to Slack."""

    def __init__(
        self,
        token_provider: TokenProvider,
        client_factory: ClientFactory = _default_client_factory,
    ) -> None:
        self._token_provider = token_provider
        self._client_factory = client_factory

    async def client(self) -> Any:
        token = await self._token_provider.get_token()
        if not token:
            raise ChannelPermissionError(
                "Failed to get authentication credentials",
                title="Not authenticated",
            )
        return self._client_factory(token)


def slack_error_code(exc: BaseException) -> str | None:
    """Return the structured ``error`` field of a Slack API error, if any."""
    if not isinstance(exc, SlackApiError) or exc.response is None:
        return None
    return exc.response.get("error")


async def fetch_all_channels(client: Any) -> list[Channel]:
    """List every non-archived public and private channel visible to the token."""
    channels: list[Channel] = []
    cursor: str | None = None
    try:
        while True:
            kwargs: dict[str, Any] = {
                "types": CHANNEL_TYPES,
                "exclude_archived": True,
                "limit": CHANNEL_PAGE_SIZE,
            }
            if cursor:
                kwargs["cursor"] = cursor
            resp = await client.conversations_list(**kwargs)
            for ch in resp.get("channels") or []:
                if ch.get("id") and ch.get("name") and not ch.get("is_archived"):
                    channels.append(Channel(id=ch["id"], name=ch["name"]))
            cursor = (resp.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break
    except TRANSPORT_ERRORS as exc:
        logger.error("conversations.list failed: %s", exc)
        raise TransportError(str(exc), title="Failed to fetch channel list") from exc

    logger.debug("Fetched %d channel(s)", len(channels))
    return channels


def find_channel_by_id(channels: list[Channel], channel_id: str) -> Channel | None:
    return next((c for c in channels if c.id == channel_id), None)
