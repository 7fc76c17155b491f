"""Test module for xml_tree_codec package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xml_tree_codec

    # Assert
    assert xml_tree_codec is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_tree_codec

    # Assert
    assert isinstance(xml_tree_codec.__version__, str)
    assert xml_tree_codec.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import xml_tree_codec

    # Assert
    assert xml_tree_codec.__author__ == "XML Tree Codec Team"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import xml_tree_codec

    # Assert
    for name in xml_tree_codec.__all__:
        assert hasattr(xml_tree_codec, name), name
    assert {"parse", "stringify", "XMLParser", "ParserConfig"} <= set(xml_tree_codec.__all__)


def test_top_level_round_trip() -> None:
    """Test the level-1 functions work together from the package root."""
    # Arrange
    from xml_tree_codec import parse, stringify

    # Act
    tree = parse("<Doc><A>1</A><A>2</A></Doc>")
    xml = stringify(tree, "Doc")

    # Assert
    assert parse(xml) == tree == {"A": ["1", "2"]}
