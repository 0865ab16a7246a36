from __future__ import annotations

import pytest

from slack_templates.notify import RecordingNotifier
from slack_templates.slack.client import SlackSession, StaticTokenProvider
from slack_templates.storage.store import TemplateStore


class FakeSlackClient:
    """Stands in for AsyncWebClient; responses are plain dicts."""

    def __init__(self) -> None:
        self.user: str | None = "bob"
        self.user_id: str | None = "U1"
        self.members: dict[str, list[str]] = {"C1": ["U1", "U2"]}
        self.threads: dict[tuple[str, str], list[dict]] = {
            ("C1", "1234567891.234567"): [{"ts": "1234567891.234567", "text": "parent"}],
        }
        self.channel_pages: list[list[dict]] = [
            [{"id": "C1", "name": "general"}, {"id": "C2", "name": "random"}],
        ]
        self.errors: dict[str, BaseException] = {}
        self.calls: list[tuple[str, dict]] = []
        self.posted: list[dict] = []

    def _record(self, method: str, kwargs: dict) -> None:
        self.calls.append((method, kwargs))
        if method in self.errors:
            raise self.errors[method]

    async def auth_test(self, **kwargs):
        self._record("auth_test", kwargs)
        return {"ok": True, "user": self.user, "user_id": self.user_id}

    async def conversations_members(self, **kwargs):
        self._record("conversations_members", kwargs)
        return {"ok": True, "members": self.members.get(kwargs["channel"], [])}

    async def conversations_replies(self, **kwargs):
        self._record("conversations_replies", kwargs)
        messages = self.threads.get((kwargs["channel"], kwargs["ts"]), [])
        return {"ok": True, "messages": messages[: kwargs.get("limit", 100)]}

    async def conversations_list(self, **kwargs):
        self._record("conversations_list", kwargs)
        page = int(kwargs.get("cursor") or 0)
        next_cursor = str(page + 1) if page + 1 < len(self.channel_pages) else ""
        return {
            "ok": True,
            "channels": self.channel_pages[page],
            "response_metadata": {"next_cursor": next_cursor},
        }

    async def chat_postMessage(self, **kwargs):
        self._record("chat_postMessage", kwargs)
        self.posted.append(kwargs)
        return {"ok": True, "ts": "1700000000.000100"}

    def called(self, method: str) -> list[dict]:
        return [kw for name, kw in self.calls if name == method]


@pytest.fixture
def slack_client() -> FakeSlackClient:
    return FakeSlackClient()


@pytest.fixture
def session(slack_client) -> SlackSession:
    return SlackSession(StaticTokenProvider("xoxp-test"), client_factory=lambda _token: slack_client)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store(tmp_path) -> TemplateStore:
    return TemplateStore(tmp_path / "slack-templates.json")
