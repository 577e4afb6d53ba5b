import re

import pytest

from core.exceptions import InvalidPatternError
from core.patterns import (
    compile_metadata_pattern,
    compile_pattern,
    compile_table_pattern,
    to_python_syntax,
)


class TestToPythonSyntax:

    def test_translates_named_groups(self):
        assert to_python_syntax(r"A: (?<Acc>\d+) B: (?<Bal>\d+)") == r"A: (?P<Acc>\d+) B: (?P<Bal>\d+)"

    def test_keeps_lookbehinds(self):
        assert to_python_syntax(r"(?<=Rs\.)\d+(?<!0)") == r"(?<=Rs\.)\d+(?<!0)"

    def test_keeps_escaped_parenthesis(self):
        assert to_python_syntax(r"\(?<x") == r"\(?<x"

    def test_escaped_backslash_before_named_group(self):
        assert to_python_syntax(r"\\(?<n>\d+)") == r"\\(?P<n>\d+)"
        assert to_python_syntax(r"\\\(?<x") == r"\\\(?<x"

    def test_literal_backslash_then_named_group_compiles(self):
        pattern = compile_pattern(r"C:\\(?<dir>\w+)")
        assert pattern.search(r"C:\Users").group("dir") == "Users"

    def test_python_syntax_untouched(self):
        assert to_python_syntax(r"(?P<Name>\w+)") == r"(?P<Name>\w+)"


class TestCompilePattern:

    def test_empty_pattern_raises(self):
        with pytest.raises(InvalidPatternError):
            compile_pattern("   ")

    def test_error_message_contains_compiler_error(self):
        with pytest.raises(InvalidPatternError) as exc:
            compile_pattern("(unclosed")
        assert "Invalid Regex" in str(exc.value)
        assert "missing )" in str(exc.value)

    def test_metadata_pattern_uses_dotall(self):
        pattern = compile_metadata_pattern(r"a.b")
        assert pattern.flags & re.DOTALL
        assert pattern.search("a\nb")

    def test_table_pattern_has_no_dotall(self):
        pattern = compile_table_pattern(r"a.b")
        assert not pattern.flags & re.DOTALL

    def test_empty_optional_pattern_is_none(self):
        assert compile_metadata_pattern("") is None
        assert compile_table_pattern(None) is None

    def test_compiled_pattern_passes_through(self):
        compiled = re.compile(r"x")
        assert compile_table_pattern(compiled) is compiled
