from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    DUPLICATE_NAME = "duplicate_name"
    TRANSPORT = "transport"


class TemplateError(Exception):
    """Base class for every failure surfaced to a front end.

    ``title`` is a short headline for a notification; the exception message is
    the detail line.
    """

    kind: ErrorKind = ErrorKind.TRANSPORT
    title: str = "Error"

    def __init__(self, message: str, *, title: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title


class ValidationError(TemplateError):
    kind = ErrorKind.VALIDATION
    title = "Invalid input"


class InvalidThreadFormatError(ValidationError):
    title = "Invalid thread"

    def __init__(self, message: str = "Thread ID must contain only numbers", **kwargs) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(TemplateError):
    kind = ErrorKind.NOT_FOUND
    title = "Not found"


class ThreadNotFoundError(NotFoundError):
    title = "Invalid thread"

    def __init__(
        self,
        message: str = "The specified thread does not exist in this channel",
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)


class TemplateNotFoundError(NotFoundError):
    title = "Template not found"


class ChannelPermissionError(TemplateError):
    kind = ErrorKind.PERMISSION
    title = "Permission denied"


class NotInChannelError(ChannelPermissionError):
    title = "Not in channel"

    def __init__(
        self,
        message: str = "You need to join the channel before sending messages",
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)


class DuplicateNameError(TemplateError):
    kind = ErrorKind.DUPLICATE_NAME
    title = "Template with the same name already exists"


class TransportError(TemplateError):
    """Wrapped Slack API or storage failure."""

    kind = ErrorKind.TRANSPORT
    title = "Request failed"
