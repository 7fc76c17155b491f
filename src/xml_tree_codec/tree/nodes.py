"""Node variants of the document tree.

A node is one of:

* a *Scalar*: a plain ``str`` holding collapsed text,
* an :class:`Element`: a ``dict`` mapping child names to nodes, with optional
  reserved keys for attributes and the element's own text,
* a :class:`Sequence`: a ``list`` of sibling nodes sharing one tag name.

The variants subclass the builtin containers, so trees compare equal to plain
dictionaries and lists and serialize directly with :mod:`json`. Trees built by
hand from plain ``dict``/``list`` values are accepted everywhere a tree is.
"""

from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from xml_tree_codec.shared.config import DEFAULT_ATTRIBUTES_KEY, DEFAULT_DATA_KEY


class Element(dict):
    """An element: child name -> node, plus reserved attribute and text keys."""

    def get_attributes(self, attributes_key: str = DEFAULT_ATTRIBUTES_KEY) -> Dict[str, str]:
        """Return the preserved attribute mapping, empty when absent."""
        attributes = self.get(attributes_key)
        return attributes if isinstance(attributes, dict) else {}

    def get_text(self, data_key: str = DEFAULT_DATA_KEY) -> Optional[str]:
        """Return the element's own text, or ``None``."""
        return self.get(data_key)

    def iter_children(
        self,
        attributes_key: str = DEFAULT_ATTRIBUTES_KEY,
        data_key: str = DEFAULT_DATA_KEY
    ) -> Iterator[Tuple[str, "Node"]]:
        """Iterate ``(name, node)`` pairs, skipping the reserved keys."""
        for name, value in self.items():
            if name not in (attributes_key, data_key):
                yield name, value

    def __repr__(self) -> str:
        return f"Element({dict.__repr__(self)})"


class Sequence(list):
    """Ordered same-name siblings. Never contains another Sequence."""

    def __repr__(self) -> str:
        return f"Sequence({list.__repr__(self)})"


Node = Union[str, Element, Sequence]


class NodeType(Enum):
    """Variant tag returned by :func:`node_type`."""

    SCALAR = auto()
    ELEMENT = auto()
    SEQUENCE = auto()


def node_type(value: Any) -> NodeType:
    """Classify a tree value; plain ``dict``/``list`` count as their variants."""
    if isinstance(value, dict):
        return NodeType.ELEMENT
    if isinstance(value, list):
        return NodeType.SEQUENCE
    return NodeType.SCALAR


def always_array(value: Any) -> List[Any]:
    """Return ``value`` as a list, wrapping anything that is not one.

    Convenient for children that may appear once or several times:

        >>> always_array("1")
        ['1']
        >>> always_array(["1", "2"])
        ['1', '2']
    """
    if isinstance(value, list):
        return value
    return [value]


def first_key(mapping: Dict[str, Any]) -> Optional[str]:
    """Return the first key of ``mapping`` in insertion order, or ``None``."""
    return next(iter(mapping), None)
