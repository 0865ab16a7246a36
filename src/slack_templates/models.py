from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from slack_templates.errors import ValidationError

# Keys written by older releases that stored templates in a support-path file.
_LEGACY_KEYS = {
    "slackChannelId": "channelId",
    "slackChannelName": "channelName",
}


@dataclass
class Template:
    """A named, reusable message body bound to a channel and optional thread."""

    name: str
    content: str
    channel_id: str
    channel_name: str
    thread_ts: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "content": self.content,
            "channelId": self.channel_id,
            "channelName": self.channel_name,
        }
        if self.thread_ts:
            data["threadTimestamp"] = self.thread_ts
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Template":
        record = _canonical_record(data)
        return cls(
            name=record["name"],
            content=record["content"],
            channel_id=record["channelId"],
            channel_name=record["channelName"],
            thread_ts=record.get("threadTimestamp") or None,
        )


@dataclass(frozen=True)
class Channel:
    id: str
    name: str


def _canonical_record(data: dict[str, Any]) -> dict[str, Any]:
    record = dict(data)
    for legacy, key in _LEGACY_KEYS.items():
        if key not in record and legacy in record:
            record[key] = record.pop(legacy)
    return record


def _is_valid_record(record: Any) -> bool:
    if not isinstance(record, dict):
        return False
    record = _canonical_record(record)
    thread_ts = record.get("threadTimestamp")
    return (
        isinstance(record.get("name"), str)
        and isinstance(record.get("content"), str)
        and isinstance(record.get("channelId"), str)
        and isinstance(record.get("channelName"), str)
        and (thread_ts is None or isinstance(thread_ts, str))
    )


def validate_template_records(data: Any) -> list[Template]:
    """Check a decoded JSON document and convert it to templates.

    Raises ValidationError unless *data* is a list of template records.
    """
    if not isinstance(data, list) or not all(_is_valid_record(item) for item in data):
        raise ValidationError("Invalid template format")
    return [Template.from_dict(item) for item in data]


def templates_to_records(templates: list[Template]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in templates]
