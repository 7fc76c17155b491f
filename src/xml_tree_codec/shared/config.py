"""Configuration classes for parsing and composing.

Both configurations are immutable dataclasses built once per call and safe to
share between threads. Every recognized option is an explicit field with its
default; unknown option names are rejected.
"""

import difflib
import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Optional

from .errors import XMLTreeCodecError

# Old-style comparison function: negative, zero or positive
Comparator = Callable[[Any, Any], int]

DEFAULT_ATTRIBUTES_KEY = "_Attribs"
DEFAULT_DATA_KEY = "_Data"
DEFAULT_XML_HEADER = '<?xml version="1.0"?>'


class ConfigError(XMLTreeCodecError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _validate_reserved_keys(attributes_key: str, data_key: str) -> None:
    if not attributes_key:
        raise ConfigValidationError(
            "attributes_key cannot be empty", field_name="attributes_key"
        )
    if not data_key:
        raise ConfigValidationError("data_key cannot be empty", field_name="data_key")
    if attributes_key == data_key:
        raise ConfigValidationError(
            f"attributes_key and data_key must differ (both {data_key!r})",
            field_name="data_key",
            suggestions=["Use the defaults '_Attribs' and '_Data'"],
        )


def _override(config: Any, kwargs: Dict[str, Any]) -> Any:
    """Return a copy of ``config`` with ``kwargs`` applied, rejecting unknown names."""
    known = [f.name for f in fields(config)]
    for name in kwargs:
        if name not in known:
            raise ConfigValidationError(
                f"Unknown option for {type(config).__name__}: {name}",
                field_name=name,
                suggestions=difflib.get_close_matches(name, known),
            )
    return replace(config, **kwargs)


@dataclass(frozen=True)
class ParserConfig:
    """Options controlling how text is turned into a tree.

    Attributes:
        preserve_document_node: Keep the top-level element as a wrapper key
        preserve_attributes: Nest attributes under ``attributes_key`` instead
            of merging them into the element's children
        preserve_whitespace: Keep text content untrimmed
        lower_case: Fold element names, attribute names and the reserved keys
            to lower case
        force_arrays: Wrap single children below the document element in
            one-element sequences
        attributes_key: Reserved key for preserved attributes
        data_key: Reserved key for an element's own text
    """

    preserve_document_node: bool = False
    preserve_attributes: bool = False
    preserve_whitespace: bool = False
    lower_case: bool = False
    force_arrays: bool = False
    attributes_key: str = DEFAULT_ATTRIBUTES_KEY
    data_key: str = DEFAULT_DATA_KEY

    def __post_init__(self) -> None:
        """Validate reserved keys and apply name folding."""
        _validate_reserved_keys(self.attributes_key, self.data_key)
        if self.lower_case:
            object.__setattr__(self, "attributes_key", self.attributes_key.lower())
            object.__setattr__(self, "data_key", self.data_key.lower())
            _validate_reserved_keys(self.attributes_key, self.data_key)

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> ParserConfig().override(preserve_attributes=True).preserve_attributes
            True
        """
        return _override(self, kwargs)

    def composer_config(self, **kwargs: Any) -> "ComposerConfig":
        """Build a composer configuration sharing this parser's reserved keys."""
        options: Dict[str, Any] = {
            "attributes_key": self.attributes_key,
            "data_key": self.data_key,
        }
        options.update(kwargs)
        return ComposerConfig().override(**options)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, rejecting unknown keys."""
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def round_trip(cls) -> "ParserConfig":
        """Preset keeping everything the composer needs to rebuild the document."""
        return cls(preserve_document_node=True, preserve_attributes=True)


@dataclass(frozen=True)
class ComposerConfig:
    """Options controlling how a tree is rendered back to text.

    The three sorters are old-style comparison functions. ``name_sorter``
    orders child element names, ``same_name_sorter`` orders the members of a
    sequence and ``attribute_sorter`` orders attribute names. When a sorter is
    not given, insertion order is kept.

    pixl-xml sorts all three alphabetically by default. Pass
    :func:`alphabetical` for each sorter to reproduce its output order::

        ComposerConfig(
            name_sorter=alphabetical,
            same_name_sorter=alphabetical,
            attribute_sorter=alphabetical,
        )
    """

    indent_string: str = "\t"
    eol: str = "\n"
    name_sorter: Optional[Comparator] = field(default=None, compare=False)
    same_name_sorter: Optional[Comparator] = field(default=None, compare=False)
    attribute_sorter: Optional[Comparator] = field(default=None, compare=False)
    attributes_key: str = DEFAULT_ATTRIBUTES_KEY
    data_key: str = DEFAULT_DATA_KEY
    escape_scalar_text: bool = False
    xml_header: str = DEFAULT_XML_HEADER

    _SORTERS = ("name_sorter", "same_name_sorter", "attribute_sorter")

    def __post_init__(self) -> None:
        """Validate composer configuration."""
        _validate_reserved_keys(self.attributes_key, self.data_key)
        for name in self._SORTERS:
            sorter = getattr(self, name)
            if sorter is not None and not callable(sorter):
                raise ConfigValidationError(
                    f"{name} must be callable or None", field_name=name
                )

    def override(self, **kwargs: Any) -> "ComposerConfig":
        """Create a new configuration with specific overrides."""
        return _override(self, kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary; sorters are not serializable and are left out."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in self._SORTERS
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComposerConfig":
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ComposerConfig":
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def compact(cls) -> "ComposerConfig":
        """Preset producing single-line output."""
        return cls(indent_string="", eol="")


def alphabetical(left: Any, right: Any) -> int:
    """Comparator ordering values by their string form."""
    left_text, right_text = str(left), str(right)
    return (left_text > right_text) - (left_text < right_text)
