"""Tests for parser and composer configuration."""

import json
from dataclasses import FrozenInstanceError

import pytest

from xml_tree_codec.shared.config import (
    DEFAULT_ATTRIBUTES_KEY,
    DEFAULT_DATA_KEY,
    ComposerConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    alphabetical,
)


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self):
        """Test default parser configuration values."""
        config = ParserConfig()

        assert config.preserve_document_node is False
        assert config.preserve_attributes is False
        assert config.preserve_whitespace is False
        assert config.lower_case is False
        assert config.force_arrays is False
        assert config.attributes_key == DEFAULT_ATTRIBUTES_KEY == "_Attribs"
        assert config.data_key == DEFAULT_DATA_KEY == "_Data"

    def test_immutable(self):
        """Test configurations cannot be changed in place."""
        config = ParserConfig()
        with pytest.raises(FrozenInstanceError):
            config.lower_case = True

    def test_lower_case_folds_reserved_keys(self):
        """Test lower-casing also applies to the reserved keys."""
        config = ParserConfig(lower_case=True)
        assert config.attributes_key == "_attribs"
        assert config.data_key == "_data"

    def test_reserved_key_validation(self):
        """Test reserved keys must be non-empty and distinct."""
        with pytest.raises(ConfigValidationError, match="data_key cannot be empty"):
            ParserConfig(data_key="")

        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig(attributes_key="k", data_key="k")
        assert exc_info.value.field_name == "data_key"
        assert exc_info.value.suggestions

    def test_keys_colliding_after_folding(self):
        """Test keys differing only in case collide once folded."""
        ParserConfig(attributes_key="Key", data_key="KEY")
        with pytest.raises(ConfigValidationError):
            ParserConfig(attributes_key="Key", data_key="KEY", lower_case=True)

    def test_override(self):
        """Test overriding returns a new configuration."""
        config = ParserConfig()
        updated = config.override(preserve_attributes=True, data_key="#text")

        assert updated.preserve_attributes is True
        assert updated.data_key == "#text"
        assert config.preserve_attributes is False

    def test_override_unknown_option(self):
        """Test unknown options are rejected with suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(preserve_atributes=True)

        assert exc_info.value.field_name == "preserve_atributes"
        assert "preserve_attributes" in exc_info.value.suggestions
        assert isinstance(exc_info.value, ConfigError)

    def test_serialization(self):
        """Test dictionary and JSON round trips."""
        config = ParserConfig(force_arrays=True, attributes_key="@")
        data = config.to_dict()

        assert data["force_arrays"] is True
        assert data["attributes_key"] == "@"
        assert ParserConfig.from_dict(data) == config
        assert ParserConfig.from_json(config.to_json()) == config
        assert json.loads(config.to_json())["force_arrays"] is True

    def test_from_dict_rejects_unknown(self):
        """Test unknown keys in serialized data are rejected."""
        with pytest.raises(ConfigValidationError):
            ParserConfig.from_dict({"bogus": 1})

    def test_round_trip_preset(self):
        """Test the preset keeps the document node and attributes."""
        config = ParserConfig.round_trip()
        assert config.preserve_document_node is True
        assert config.preserve_attributes is True

    def test_composer_config_shares_keys(self):
        """Test a derived composer configuration uses the same reserved keys."""
        composer = ParserConfig(attributes_key="@", data_key="#").composer_config(eol="")
        assert composer.attributes_key == "@"
        assert composer.data_key == "#"
        assert composer.eol == ""


class TestComposerConfig:
    """Test suite for ComposerConfig."""

    def test_default_configuration(self):
        """Test default composer configuration values."""
        config = ComposerConfig()

        assert config.indent_string == "\t"
        assert config.eol == "\n"
        assert config.name_sorter is None
        assert config.same_name_sorter is None
        assert config.attribute_sorter is None
        assert config.escape_scalar_text is False
        assert config.xml_header == '<?xml version="1.0"?>'

    def test_sorters_must_be_callable(self):
        """Test non-callable sorters are rejected."""
        with pytest.raises(ConfigValidationError, match="name_sorter must be callable"):
            ComposerConfig(name_sorter="alphabetical")

    def test_to_dict_omits_sorters(self):
        """Test sorters are not part of the serialized form."""
        data = ComposerConfig(name_sorter=alphabetical).to_dict()
        assert "name_sorter" not in data
        assert data["indent_string"] == "\t"
        assert ComposerConfig.from_json(ComposerConfig().to_json()) == ComposerConfig()

    def test_sorters_ignored_in_equality(self):
        """Test configurations differing only in sorters compare equal."""
        assert ComposerConfig(name_sorter=alphabetical) == ComposerConfig()

    def test_compact_preset(self):
        """Test the compact preset drops indentation and line breaks."""
        config = ComposerConfig.compact()
        assert config.indent_string == ""
        assert config.eol == ""


class TestAlphabetical:
    """Test the alphabetical comparator."""

    def test_ordering(self):
        """Test negative, zero and positive results."""
        assert alphabetical("a", "b") < 0
        assert alphabetical("b", "b") == 0
        assert alphabetical("b", "a") > 0

    def test_compares_string_forms(self):
        """Test non-string values are compared by their text."""
        assert alphabetical(10, 9) < 0
