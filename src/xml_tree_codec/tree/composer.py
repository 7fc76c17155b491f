"""Rendering of document trees back into XML text.

Composition is best-effort and never fails: keys that are not valid element
names are skipped, and values of unexpected types are rendered through
``str``. The input tree is never modified; sorting works on copies.
"""

import re
from functools import cmp_to_key
from typing import Any, Iterable, List, Optional

from xml_tree_codec.character import encode_attribute_entities, encode_entities
from xml_tree_codec.shared import ComposerConfig, get_logger
from xml_tree_codec.shared.config import Comparator

from .nodes import NodeType, first_key, node_type

VALID_TAG_NAME_PATTERN = re.compile(r"\w[\w\-:.]*")


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class XMLComposer:
    """Renders trees produced by :class:`XMLTreeBuilder` (or built by hand).

    Examples:
        >>> XMLComposer().compose({"I": ["1", "2"]}, "R")
        '<?xml version="1.0"?>\\n<R>\\n\\t<I>1</I>\\n\\t<I>2</I>\\n</R>\\n'
    """

    def __init__(
        self,
        config: Optional[ComposerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ComposerConfig()
        self.logger = get_logger(__name__, correlation_id, "composer")

    def compose(
        self,
        node: Any,
        name: Optional[str] = None,
        pi_nodes: Optional[Iterable[str]] = None,
        dtd_nodes: Optional[Iterable[str]] = None
    ) -> str:
        """Render a document: prolog followed by the element body.

        Args:
            node: Tree to render
            name: Document element name; when omitted ``node`` is taken to be a
                wrapper whose first key names the document element
            pi_nodes: Captured processing instructions, replayed verbatim in
                place of the default XML header
            dtd_nodes: Captured DTD declarations, replayed verbatim
        """
        xml = self.compose_prolog(pi_nodes, dtd_nodes) + self.compose_body(node, name)

        self.logger.debug(
            "Composed document",
            extra={"document_name": name, "output_length": len(xml)}
        )
        return xml

    def compose_prolog(
        self,
        pi_nodes: Optional[Iterable[str]] = None,
        dtd_nodes: Optional[Iterable[str]] = None
    ) -> str:
        eol = self.config.eol
        pi_nodes = list(pi_nodes or ())
        lines: List[str] = []

        if pi_nodes:
            lines.extend(f"<{pi}>{eol}" for pi in pi_nodes)
        else:
            lines.append(self.config.xml_header + eol)

        lines.extend(f"<{dtd}>{eol}" for dtd in dtd_nodes or ())
        return "".join(lines)

    def compose_body(self, node: Any, name: Optional[str] = None) -> str:
        """Render ``node`` as an element named ``name``, without prolog."""
        if name is None and isinstance(node, dict):
            name = first_key(node)
            if name is not None:
                node = node[name]
        if name is None:
            return ""

        parts: List[str] = []
        self._compose_node(node, name, 0, parts)
        return "".join(parts)

    def _compose_node(self, node: Any, name: str, depth: int, parts: List[str]) -> None:
        """Render ``node`` and everything below it into ``parts``.

        Work still to be done is kept on a stack: ``(node, name, depth)``
        entries to render, and plain strings (closing tags) to emit as-is.
        """
        pending: List[Any] = [(node, name, depth)]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                parts.append(item)
                continue

            node, name, depth = item
            kind = node_type(node)
            if kind is NodeType.ELEMENT:
                follow = self._compose_element(node, name, depth, parts)
            elif kind is NodeType.SEQUENCE:
                follow = [
                    (member, name, depth)
                    for member in self._ordered(node, self.config.same_name_sorter)
                ]
            else:
                self._compose_scalar(node, name, depth, parts)
                continue
            pending.extend(reversed(follow))

    def _compose_element(self, node: dict, name: str, depth: int, parts: List[str]) -> List[Any]:
        """Write the opening of an element and return its remaining work."""
        config = self.config
        indent = config.indent_string * depth
        parts.append(f"{indent}<{name}")

        attributes = node.get(config.attributes_key)
        if isinstance(attributes, dict):
            for key in self._ordered(attributes, config.attribute_sorter):
                value = encode_attribute_entities(_as_text(attributes[key]))
                parts.append(f' {key}="{value}"')

        content_keys = [key for key in node if key != config.attributes_key]
        if not content_keys:
            parts.append(f"/>{config.eol}")
            return []

        parts.append(">")
        if config.data_key in node:
            parts.append(encode_entities(_as_text(node[config.data_key])))

        child_keys = [key for key in content_keys if key != config.data_key]
        if not child_keys:
            parts.append(f"</{name}>{config.eol}")
            return []

        parts.append(config.eol)
        valid_keys = [
            key for key in child_keys
            if isinstance(key, str) and VALID_TAG_NAME_PATTERN.fullmatch(key)
        ]
        follow: List[Any] = [
            (node[key], key, depth + 1)
            for key in self._ordered(valid_keys, config.name_sorter)
        ]
        follow.append(f"{indent}</{name}>{config.eol}")
        return follow

    def _compose_scalar(self, node: Any, name: str, depth: int, parts: List[str]) -> None:
        text = _as_text(node)
        if self.config.escape_scalar_text:
            text = encode_entities(text)
        indent = self.config.indent_string * depth
        parts.append(f"{indent}<{name}>{text}</{name}>{self.config.eol}")

    @staticmethod
    def _ordered(items: Iterable[Any], comparator: Optional[Comparator]) -> List[Any]:
        if comparator is None:
            return list(items)
        return sorted(items, key=cmp_to_key(comparator))
