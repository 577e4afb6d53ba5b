"""
Testes unitários do extrator padrão.

Valida o formato canônico (largura 7), cabeçalhos, limpeza de células e o
isolamento de falhas entre a regex de metadados e a de tabela.
"""
import re
import unittest

from core.extractors import (
    CANONICAL_WIDTH,
    clean_cell,
    extract_metadata,
    extract_table,
    fit_row,
    general_document_parser,
    humanize_header,
)


class TestRowHelpers(unittest.TestCase):

    def test_fit_row_pads_and_truncates(self):
        self.assertEqual(fit_row(["a", "b"]), ["a", "b", "", "", "", "", ""])
        self.assertEqual(fit_row([str(i) for i in range(9)]), ["0", "1", "2", "3", "4", "5", "6"])

    def test_humanize_header(self):
        self.assertEqual(humanize_header("opening_balance"), "Opening balance")
        self.assertEqual(humanize_header("Account_Number"), "Account Number")
        self.assertEqual(humanize_header("amt"), "Amt")

    def test_clean_cell_removes_commas_and_spaces(self):
        self.assertEqual(clean_cell("  1,23,456.00 "), "123456.00")
        self.assertEqual(clean_cell(None), "")


class TestGeneralDocumentParser(unittest.TestCase):

    def test_every_row_has_canonical_width(self):
        text = "Account: 99 01/02 1,000.00 A 02/02 50.00 B"
        result = general_document_parser(
            text,
            metadata_pattern=r"Account: (?<Account>\d+)",
            table_pattern=r"(?<date>\d\d/\d\d) (?<amount>[\d,.]+) (?<flag>\w)",
        )
        self.assertEqual(len(result.all_rows), 4)
        for row in result.all_rows:
            self.assertEqual(len(row), CANONICAL_WIDTH)

    def test_wide_table_is_truncated(self):
        pattern = r"" + r" ".join(f"(?<c{i}>\\w)" for i in range(9))
        result = general_document_parser("a b c d e f g h i", table_pattern=pattern)
        self.assertEqual(result.header_row, ["C0", "C1", "C2", "C3", "C4", "C5", "C6"])
        self.assertEqual(result.data_rows, [["a", "b", "c", "d", "e", "f", "g"]])

    def test_combined_stream_splits_back(self):
        text = "Account: 99 Holder: Ann 01/02 1,000.00"
        result = general_document_parser(
            text,
            metadata_pattern=r"Account: (?<Account>\d+) Holder: (?<Holder>\w+)",
            table_pattern=r"(?<date>\d\d/\d\d) (?<amount>[\d,.]+)",
        )
        self.assertEqual(result.metadata_fields, {"Account": "99", "Holder": "Ann"})
        self.assertEqual(result.all_rows[0], ["Account", "99", "", "", "", "", ""])
        self.assertEqual(result.all_rows[1], ["Holder", "Ann", "", "", "", "", ""])
        self.assertEqual(result.header_row, ["Date", "Amount", "", "", "", "", ""])
        self.assertEqual(result.data_rows, [["01/02", "1000.00", "", "", "", "", ""]])

    def test_positional_groups_get_col_headers(self):
        result = general_document_parser("x=1 y=2", table_pattern=r"(\w)=(\d)")
        self.assertEqual(result.header_row, ["Col 1", "Col 2", "", "", "", "", ""])
        self.assertEqual(result.data_rows[1][:2], ["y", "2"])

    def test_metadata_applied_once_with_dotall(self):
        text = "Name: Ann\nsomething\nCode: 7 Code: 8"
        result = general_document_parser(text, metadata_pattern=r"Name: (?<Name>\w+).*?Code: (?<Code>\d)")
        self.assertEqual(result.metadata_fields, {"Name": "Ann", "Code": "7"})

    def test_unmatched_optional_group_is_empty_string(self):
        result = general_document_parser("Name: Ann", metadata_pattern=r"Name: (?<Name>\w+)(?<Extra> X)?")
        self.assertEqual(result.metadata_fields, {"Name": "Ann", "Extra": ""})

    def test_greedy_metadata_pattern_captures_trailing_text(self):
        """Padrão sem âncora final captura o resto da linha; o extrator não corrige."""
        result = general_document_parser("Name: Jane Doe Total: 500", metadata_pattern=r"Name:\s+(?<Name>.*)")
        self.assertEqual(result.metadata_fields, {"Name": "Jane Doe Total: 500"})

    def test_idempotent(self):
        text = "Account: 99 01/02 1,000.00 02/02 5.00"
        args = (text, r"Account: (?<Account>\d+)", r"(?<date>\d\d/\d\d) (?<amount>[\d,.]+)")
        first = general_document_parser(*args)
        second = general_document_parser(*args)
        self.assertEqual(first.metadata_fields, second.metadata_fields)
        self.assertEqual(first.all_rows, second.all_rows)

    def test_no_match_yields_empty_header_and_rows(self):
        result = general_document_parser("nothing here", r"Account: (?<A>\d+)", r"(?<d>\d\d/\d\d)")
        self.assertEqual(result.metadata_fields, {})
        self.assertEqual(result.header_row, [])
        self.assertEqual(result.data_rows, [])

    def test_without_table_pattern_header_is_the_only_empty_row(self):
        result = general_document_parser("Account: 42", r"Account: (?<A>\d+)")
        self.assertEqual(result.all_rows, [["A", "42", "", "", "", "", ""], []])
        self.assertEqual(result.header_row, [])

    def test_invalid_table_pattern_does_not_affect_metadata(self):
        with self.assertLogs("core.extractors", level="ERROR"):
            result = general_document_parser("Account: 99", r"Account: (?<A>\d+)", r"(?<broken")
        self.assertEqual(result.metadata_fields, {"A": "99"})
        self.assertEqual(result.data_rows, [])

    def test_invalid_metadata_pattern_does_not_affect_table(self):
        with self.assertLogs("core.extractors", level="ERROR"):
            result = general_document_parser("01/02 5.00", r"[unclosed", r"(?<date>\d\d/\d\d) (?<amt>[\d.]+)")
        self.assertEqual(result.metadata_fields, {})
        self.assertEqual(result.data_rows, [["01/02", "5.00", "", "", "", "", ""]])

    def test_precompiled_patterns_are_used_as_is(self):
        meta = re.compile(r"NAME: (?P<Name>\w+)", re.IGNORECASE)
        result = general_document_parser("name: ann", metadata_pattern=meta)
        self.assertEqual(result.metadata_fields, {"Name": "ann"})


def test_extract_metadata_without_match_is_empty():
    assert extract_metadata("abc", r"(?<X>\d+)") == {}


def test_extract_table_without_pattern_is_empty():
    assert extract_table("abc", None) == ([], [])
