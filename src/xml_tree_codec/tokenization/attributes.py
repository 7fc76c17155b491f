"""Attribute parsing for opening tags."""

import re
from typing import Dict

from xml_tree_codec.character import decode_entities

# name = "value" or name = 'value'; the value may not contain its own quote
ATTRIBUTE_PATTERN = re.compile(r"(\w[\w\-:.]*)\s*=\s*([\"'])(.*?)\2", re.S)


def parse_attributes(region: str, lower_case: bool = False) -> Dict[str, str]:
    """Extract decoded name/value pairs from the attribute region of a tag.

    Args:
        region: Text following the element name, e.g. ``id="1" class='a'/``
        lower_case: Fold attribute names to lower case

    Returns:
        Attributes in document order; a repeated name keeps its last value
    """
    attributes: Dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(region):
        name = match.group(1).lower() if lower_case else match.group(1)
        attributes[name] = decode_entities(match.group(3))
    return attributes
