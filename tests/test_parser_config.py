"""
Testes do formato de blocos ``name:..;;`` (importação/exportação de parsers).
"""
import pytest

from core.exceptions import InvalidParserDefinitionError
from core.models import ParserDefinition
from core.parser_config import (
    definition_from_block,
    format_config_block,
    format_config_blocks,
    parse_config_block,
    split_config_blocks,
    split_keywords,
)

BLOCK = (
    "name:My Bank;;\n"
    "matches:MY BANK,  Statement , ;;\n"
    "metadata:Account: (?<Acc>\\d+);;\n"
    "table:(?<date>\\d\\d/\\d\\d) (?<amt>[\\d.]+)"
)


class TestParseBlock:

    def test_reads_all_fields(self):
        data = parse_config_block(BLOCK)
        assert data["name"] == "My Bank"
        assert data["matches"] == "MY BANK,  Statement ,"
        assert data["metadata"] == r"Account: (?<Acc>\d+)"
        assert data["table"] == r"(?<date>\d\d/\d\d) (?<amt>[\d.]+)"

    def test_keys_are_case_insensitive(self):
        data = parse_config_block("Name:X;;\nMATCHES:a;;\nTable:t;;")
        assert data["name"] == "X"
        assert data["matches"] == "a"
        assert data["table"] == "t"

    def test_value_keeps_colons(self):
        data = parse_config_block("name:A;;\nmatches:x;;\nmetadata:Total: (?<T>\\d+)")
        assert data["metadata"] == r"Total: (?<T>\d+)"

    def test_missing_fields_are_empty(self):
        data = parse_config_block("name:A;;\nmatches:x")
        assert data["metadata"] == ""
        assert data["table"] == ""


def test_split_keywords_discards_empty_tokens():
    assert split_keywords("MY BANK,  Statement , ,") == ["MY BANK", "Statement"]
    assert split_keywords("") == []


def test_definition_from_block():
    definition = definition_from_block(BLOCK)
    assert definition.name == "My Bank"
    assert definition.match_keywords == ("MY BANK", "Statement")
    assert definition.is_custom


@pytest.mark.parametrize("block", [
    "matches:a;;\nmetadata:x",
    "name:A;;\nmetadata:x",
    "name:A;;\nmatches: , ;;",
])
def test_definition_requires_name_and_matches(block):
    with pytest.raises(InvalidParserDefinitionError):
        definition_from_block(block)


def test_split_blocks_by_separator_line_and_blank_line():
    blob = "name:A;;\nmatches:a\n---\nname:B;;\nmatches:b\n\nname:C;;\nmatches:c\n"
    blocks = split_config_blocks(blob)
    assert [parse_config_block(b)["name"] for b in blocks] == ["A", "B", "C"]


def test_format_blocks_uses_separator():
    a = ParserDefinition(name="A", match_keywords=("x", "y"), metadata_pattern="m", is_custom=True)
    b = ParserDefinition(name="B", match_keywords=("z",), is_custom=True)
    assert format_config_block(a) == "name:A;;\nmatches:x, y;;\nmetadata:m;;\ntable:"
    text = format_config_blocks([a, b])
    assert "\n\n---\n\n" in text
    assert [parse_config_block(block)["name"] for block in split_config_blocks(text)] == ["A", "B"]
