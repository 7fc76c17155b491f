"""Encoding and decoding of the five predefined XML entities.

Only ``&lt;``, ``&gt;``, ``&quot;``, ``&apos;`` and ``&amp;`` are handled.
Numeric character references and custom entities pass through untouched.
"""

from typing import Optional

# &amp; is decoded last: "&amp;lt;" decodes to the literal "&lt;"
_DECODE_TABLE = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),
)

# & is encoded first
_CONTENT_ENCODE_TABLE = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

_ATTRIBUTE_ENCODE_TABLE = _CONTENT_ENCODE_TABLE + (
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def decode_entities(text: Optional[str]) -> str:
    """Replace the predefined entity references in ``text`` with their characters."""
    if text is None:
        return ""
    if "&" not in text:
        return text
    for entity, char in _DECODE_TABLE:
        text = text.replace(entity, char)
    return text


def encode_entities(text: Optional[str]) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in element content."""
    if text is None:
        return ""
    for char, entity in _CONTENT_ENCODE_TABLE:
        text = text.replace(char, entity)
    return text


def encode_attribute_entities(text: Optional[str]) -> str:
    """Escape ``& < > " '`` for use inside a quoted attribute value."""
    if text is None:
        return ""
    for char, entity in _ATTRIBUTE_ENCODE_TABLE:
        text = text.replace(char, entity)
    return text
