#!/usr/bin/env python3
"""
Quick Start Guide for the XML Tree Codec.

This example walks through parsing a document into a tree, working with the
tree, handling parse errors, and composing the tree back into XML.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_tree_codec import (
    ComposerConfig,
    ParserConfig,
    XMLParser,
    alphabetical,
    parse,
    parse_string,
    stringify,
)
from xml_tree_codec.tree import always_array

CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE Catalog SYSTEM "catalog.dtd">
<Catalog>
    <!-- prices in USD -->
    <Book id="b1" genre="fiction">
        <Title>My Book</Title>
        <Price>19.99</Price>
    </Book>
    <Book id="b2">
        <Title>Tom &amp; Jerry</Title>
        <Notes><![CDATA[Uses <b>bold</b> markup]]></Notes>
    </Book>
    <Owner>Library</Owner>
</Catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - XML Tree Codec")
    print("=" * 45)

    # Step 1: Parse text into a tree
    print("\n📄 Step 1: Parsing")
    print("-" * 30)

    tree = parse(CATALOG)
    print(json.dumps(tree, indent=2))

    # Step 2: Walk the tree
    print("\n🔍 Step 2: Walking the Tree")
    print("-" * 30)

    for book in always_array(tree["Book"]):
        print(f"  - {book['id']}: {book['Title']}")
    print(f"✅ Owner: {tree['Owner']}")

    # Step 3: Keep attributes apart from child elements
    print("\n🏷️  Step 3: Preserving Attributes")
    print("-" * 30)

    result = parse_string(CATALOG, preserve_attributes=True)
    first_book = result.tree["Book"][0]
    print(f"✅ Attributes: {first_book['_Attribs']}")
    print(f"📊 Elements built: {result.performance.elements_built}")

    # Step 4: Handle errors
    print("\n⚠️  Step 4: Error Handling")
    print("-" * 30)

    broken = parse_string("<Catalog>\n  <Book>\n</Catalog>")
    print(f"❌ Success: {broken.success}")
    print(f"   {broken.error_message}")

    # Step 5: Compose back to XML
    print("\n🧩 Step 5: Composing")
    print("-" * 30)

    print(stringify({"b": "2", "a": "1"}, "Sorted", name_sorter=alphabetical))

    parser = XMLParser(CATALOG, ParserConfig.round_trip())
    print(parser.compose(indent_string="  "))
    print(parser.compose(ComposerConfig.compact()))

    print("\n🎉 Quick start completed!")


if __name__ == "__main__":
    quick_start_example()
