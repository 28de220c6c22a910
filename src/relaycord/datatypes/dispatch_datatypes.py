"""
Data structures used by the message dispatch pipeline.

This module defines the content envelope, the per-call dispatch options, the
error categories understood by ``report_error`` and the typed result returned
by ``try_send``/``try_edit``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import discord


class RelaycordError(Exception):
    """Base class for errors raised by relaycord."""


class ContentField(Enum):
    """Message parts that carry a size limit."""

    TEXT = "content"
    EMBED = "embed"
    DESCRIPTION = "description"
    TITLE = "title"
    AUTHOR_NAME = "author name"
    FOOTER_TEXT = "footer text"
    FIELD_COUNT = "field count"
    FIELD_NAME = "field name"
    FIELD_VALUE = "field value"

    def __str__(self) -> str:
        return self.value


class ContentTooLarge(RelaycordError):
    """
    A message part exceeds the platform limit.

    Attributes:
        field: The offending part.
        limit: The maximum allowed size.
        actual: The size that was supplied.
        index: Position of the embed field, for per-field checks.
    """

    def __init__(self, field: ContentField, limit: int, actual: int, index: int | None = None) -> None:
        self.field = field
        self.limit = limit
        self.actual = actual
        self.index = index
        where = f"{field} #{index}" if index is not None else str(field)
        unit = "" if field is ContentField.FIELD_COUNT else " characters"
        super().__init__(f"Message {where} exceeds {limit}{unit} (got {actual})")


class ErrorCategory(Enum):
    """Categories attached to technical errors passed to ``report_error``."""

    API = "api"
    DATABASE = "database"
    INTERNAL = "internal"

    @property
    def label(self) -> str:
        return {
            ErrorCategory.API: "API error",
            ErrorCategory.DATABASE: "Database error",
            ErrorCategory.INTERNAL: "Internal error",
        }[self]

    @classmethod
    def parse(cls, value: "ErrorCategory | str") -> "ErrorCategory":
        """Accept an enum member or its name/value in any case (``"db"`` means database)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "db":
            return cls.DATABASE
        for category in cls:
            if key in (category.value, category.name.lower()):
                return category
        raise ValueError(f"Unknown error category: {value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class DispatchOptions:
    """Options for a single send.

    Attributes:
        disable_everyone: Suppress ``@everyone``/``@here`` pings.
        auto_delete: Delete the sent message after ``delete_after_ms``.
        delete_after_ms: Delay before the automatic delete (0 = immediately).
    """

    disable_everyone: bool = True
    auto_delete: bool = False
    delete_after_ms: int = 0

    def __post_init__(self) -> None:
        if self.delete_after_ms < 0:
            raise ValueError("delete_after_ms must be >= 0")

    @classmethod
    def coerce(cls, options: "DispatchOptions | Mapping[str, Any] | None") -> "DispatchOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(
            disable_everyone=bool(options.get("disable_everyone", True)),
            auto_delete=bool(options.get("auto_delete", False)),
            delete_after_ms=int(options.get("delete_after_ms", 0) or 0),
        )

    @property
    def allowed_mentions(self) -> discord.AllowedMentions:
        if self.disable_everyone:
            return discord.AllowedMentions(everyone=False)
        return discord.AllowedMentions(everyone=True)


@dataclass(slots=True)
class MessageContent:
    """
    Normalised outbound payload: plain text, an embed, or both.

    Use :meth:`coerce` to turn caller input into an envelope:

    - ``MessageContent`` is returned unchanged
    - ``discord.Embed`` becomes rich content without text
    - a mapping is unpacked through its ``content`` (or ``text``) and
      ``embed`` (or ``rich_content``) keys; dict embeds go through
      ``discord.Embed.from_dict``
    - anything else is stringified as plain text

    Raises:
        ValueError: If a mapping carries neither text nor an embed, or its
            embed is not an ``Embed``/mapping.
    """

    text: str | None = None
    embed: discord.Embed | None = None

    @property
    def is_rich(self) -> bool:
        return self.embed is not None

    @classmethod
    def coerce(cls, content: Any) -> "MessageContent":
        if isinstance(content, cls):
            return content
        if isinstance(content, discord.Embed):
            return cls(embed=content)
        if isinstance(content, Mapping):
            return cls.from_mapping(content)
        return cls(text=str(content))

    @classmethod
    def from_mapping(cls, content: Mapping[str, Any]) -> "MessageContent":
        text = content.get("content", content.get("text"))
        embed = content.get("embed", content.get("rich_content"))
        if isinstance(embed, Mapping):
            embed = discord.Embed.from_dict(dict(embed))
        elif embed is not None and not isinstance(embed, discord.Embed):
            raise ValueError(f"Embed must be a discord.Embed or mapping, not {type(embed).__name__}")
        if text is None and embed is None:
            raise ValueError(f"Message mapping has no text or embed (keys: {sorted(map(str, content))})")
        return cls(text=None if text is None else str(text), embed=embed)

    def as_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``send``/``edit``, skipping absent parts."""
        kwargs: dict[str, Any] = {}
        if self.text is not None:
            kwargs["content"] = self.text
        if self.embed is not None:
            kwargs["embed"] = self.embed
        return kwargs


@dataclass(slots=True)
class DispatchResult:
    """
    Outcome of a dispatch attempt.

    Exactly one of three states holds: a message was produced, the send was
    suppressed by channel permissions (``message`` and ``error`` both None), or
    validation failed before any platform call (``error`` set).
    """

    message: discord.Message | None = None
    error: ContentTooLarge | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def suppressed(self) -> bool:
        return self.message is None and self.error is None

    def unwrap(self) -> discord.Message | None:
        """Return the message (or None when suppressed); raise the validation error if any."""
        if self.error is not None:
            raise self.error
        return self.message
