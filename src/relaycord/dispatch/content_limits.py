"""
Platform size limits for outbound messages.

``check_content`` walks the limits in a fixed order and reports the first
violation as a :class:`ContentTooLarge` value instead of raising, so callers
can decide whether to raise or branch on it.
"""

from __future__ import annotations

import discord

from relaycord.datatypes.dispatch_datatypes import ContentField, ContentTooLarge, MessageContent

MAX_TEXT_LENGTH = 2000
MAX_EMBED_TOTAL = 6000
MAX_DESCRIPTION_LENGTH = 2048
MAX_TITLE_LENGTH = 256
MAX_AUTHOR_NAME_LENGTH = 256
MAX_FOOTER_TEXT_LENGTH = 2048
MAX_FIELD_COUNT = 25
MAX_FIELD_NAME_LENGTH = 256
MAX_FIELD_VALUE_LENGTH = 1024


def _length(value: object) -> int:
    return len(value) if isinstance(value, str) else 0


def _exceeds(field: ContentField, limit: int, actual: int, index: int | None = None) -> ContentTooLarge | None:
    return ContentTooLarge(field, limit, actual, index) if actual > limit else None


def check_embed(embed: discord.Embed) -> ContentTooLarge | None:
    """Return the first embed limit violation, or None."""
    error = (
        _exceeds(ContentField.EMBED, MAX_EMBED_TOTAL, len(embed))
        or _exceeds(ContentField.DESCRIPTION, MAX_DESCRIPTION_LENGTH, _length(embed.description))
        or _exceeds(ContentField.TITLE, MAX_TITLE_LENGTH, _length(embed.title))
        or _exceeds(ContentField.AUTHOR_NAME, MAX_AUTHOR_NAME_LENGTH, _length(getattr(embed.author, "name", None)))
        or _exceeds(ContentField.FOOTER_TEXT, MAX_FOOTER_TEXT_LENGTH, _length(getattr(embed.footer, "text", None)))
    )
    if error:
        return error

    fields = list(embed.fields or [])
    error = _exceeds(ContentField.FIELD_COUNT, MAX_FIELD_COUNT, len(fields))
    if error:
        return error

    for index, field in enumerate(fields):
        error = (
            _exceeds(ContentField.FIELD_NAME, MAX_FIELD_NAME_LENGTH, _length(field.name), index)
            or _exceeds(ContentField.FIELD_VALUE, MAX_FIELD_VALUE_LENGTH, _length(field.value), index)
        )
        if error:
            return error
    return None


def check_content(content: MessageContent) -> ContentTooLarge | None:
    """
    Validate a normalised payload against the platform limits.

    Order: text, embed total, description, title, author name, footer text,
    field count, then each field's name and value.

    Returns:
        ContentTooLarge | None: The first violation, or None when the payload fits.
    """
    error = _exceeds(ContentField.TEXT, MAX_TEXT_LENGTH, _length(content.text))
    if error or content.embed is None:
        return error
    return check_embed(content.embed)
