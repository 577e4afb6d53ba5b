"""
Testes dos exportadores (tabela detalhada e consolidadas).
"""
import csv
import unittest

import pytest

from core.exporters import CsvExporter, consolidated_rows, detailed_rows, safe_file_stem, tsv_text
from core.models import STATUS_ERROR, ConsolidatedTable, DocumentRecord

HEADER = ["Date", "Amount", "", "", "", "", ""]


def _documents():
    return [
        DocumentRecord(
            file_name="a.pdf",
            doc_type="Alpha Statement",
            metadata_fields={"Account": "123"},
            header_row=HEADER,
            data_rows=[["01/02", "1000.00", "", "", "", "", ""]],
        ),
        DocumentRecord(file_name="b.pdf", doc_type="FAILED", status=STATUS_ERROR, message="Unrecognized document type"),
    ]


class TestDetailedRows(unittest.TestCase):

    def test_layout(self):
        rows = detailed_rows(_documents())

        self.assertEqual(rows[0], ["Source: a.pdf (Alpha Statement)", "", "", "", "", "", ""])
        self.assertEqual(rows[1], ["Account", "123", "", "", "", "", ""])
        self.assertEqual(rows[2], HEADER)
        self.assertEqual(rows[3], ["01/02", "1000.00", "", "", "", "", ""])
        self.assertEqual(rows[4][0], "Source: b.pdf (FAILED)")
        self.assertEqual(len(rows), 5)
        self.assertEqual({len(r) for r in rows}, {7})

    def test_inline_metadata_columns(self):
        rows = detailed_rows(_documents(), inline_metadata=True)

        self.assertEqual(rows[1], [*HEADER, "Account"])
        self.assertEqual(rows[2], ["01/02", "1000.00", "", "", "", "", "", "123"])
        self.assertEqual({len(r) for r in rows}, {8})

    def test_empty(self):
        self.assertEqual(detailed_rows([]), [])


def test_tsv_text():
    assert tsv_text([["a", "b"], ["1", ""]]) == "a\tb\n1\t"


def test_consolidated_rows():
    table = ConsolidatedTable("Tipo", ["Source File", "A"], [["x.pdf", "1"]])
    assert consolidated_rows(table) == [["Source File", "A"], ["x.pdf", "1"]]


def test_safe_file_stem():
    assert safe_file_stem("GST Challan (Custom)") == "GST_Challan_Custom"
    assert safe_file_stem("One-shot Regex") == "One-shot_Regex"
    assert safe_file_stem("///") == "documents"


class TestCsvExporter:

    def _read(self, path):
        with open(path, encoding="utf-8-sig", newline="") as f:
            return list(csv.reader(f))

    def test_export_detailed(self, tmp_path):
        destination = tmp_path / "out" / "detailed_extraction.csv"
        CsvExporter(sep=",").export(_documents(), str(destination))

        rows = self._read(destination)
        assert rows[0][0] == "Source: a.pdf (Alpha Statement)"
        assert rows[1][:2] == ["Account", "123"]
        assert rows[3][:2] == ["01/02", "1000.00"]
        assert len(rows) == 5

    def test_export_empty_raises(self, tmp_path):
        with pytest.raises(ValueError):
            CsvExporter().export([], str(tmp_path / "x.csv"))

    def test_export_consolidated(self, tmp_path):
        tables = [
            ConsolidatedTable("Alpha Statement", ["Source File", "Account"], [["a.pdf", "123"]]),
            ConsolidatedTable("One-shot Regex", ["Source File", "Match"], [["b.pdf", "x"], ["b.pdf", "y"]]),
        ]

        written = CsvExporter(sep=",").export_consolidated(tables, str(tmp_path))

        assert [p.name for p in written] == [
            "consolidated_Alpha_Statement.csv",
            "consolidated_One-shot_Regex.csv",
        ]
        assert self._read(written[0]) == [["Source File", "Account"], ["a.pdf", "123"]]
        assert len(self._read(written[1])) == 3

    def test_default_settings(self):
        exporter = CsvExporter()
        assert exporter.encoding == "utf-8-sig"
        assert exporter.inline_metadata is False
