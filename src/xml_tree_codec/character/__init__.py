"""Character-level processing for the XML tree codec.

Key Components:
    decode_entities: Predefined entity references to characters
    encode_entities: Characters to entity references for element content
    encode_attribute_entities: Same, additionally escaping quotes
"""

from .entities import (
    decode_entities,
    encode_attribute_entities,
    encode_entities,
)

__all__ = [
    "decode_entities",
    "encode_attribute_entities",
    "encode_entities",
]
