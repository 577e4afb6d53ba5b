"""
Guias de tributos: GST Challan, GSTR-3B e TDS.
"""
import re

from core.extractors import CANONICAL_WIDTH, fit_row, metadata_rows
from core.models import ExtractionResult, ParserDefinition
from core.patterns import compile_metadata_pattern, compile_table_pattern
from core.registry import register_parser

GST_HEADERS = ["Head", "Tax", "Interest", "Penalty", "Fees", "Others", "Total"]

_GST_TOTAL_AMOUNT_RE = re.compile(r"Total Amount\s+([\d,]+)")


def gst_challan_parser(text, metadata_pattern, table_pattern, doc_type=None) -> ExtractionResult:
    """
    Extração da guia de pagamento do GST.

    Cabeçalho fixo (Head..Total). Quando a guia não traz uma linha ``Total``
    na tabela, sintetiza uma linha ``Grand Total`` a partir do "Total Amount".
    """
    metadata_fields = {}
    meta_rx = compile_metadata_pattern(metadata_pattern)
    meta_match = meta_rx.search(text) if meta_rx else None
    if meta_match:
        metadata_fields = {k: (v or "") for k, v in meta_match.groupdict().items()}

    table_rx = compile_table_pattern(table_pattern)
    matches = list(table_rx.finditer(text)) if table_rx else []
    data_rows = [
        [m.group("name"), m.group("tax"), m.group("interest"), m.group("penalty"),
         m.group("fees"), m.group("others"), m.group("total")]
        for m in matches
    ]

    total_match = _GST_TOTAL_AMOUNT_RE.search(text)
    if total_match and not any(m.group("name") == "Total" for m in matches):
        data_rows.append(["Grand Total", "-", "-", "-", "-", "-", total_match.group(1).replace(",", "")])

    return ExtractionResult(
        metadata_fields=metadata_fields,
        all_rows=[*metadata_rows(metadata_fields), fit_row(GST_HEADERS, CANONICAL_WIDTH), *data_rows],
    )


register_parser(ParserDefinition(
    name="GST Challan",
    match_keywords=("GOODS AND SERVICES TAX", "PAYMENT RECEIPT"),
    metadata_pattern=re.compile(
        r"Date : (?P<DepositDate>\d\d[/-]\d\d[/-]\d{4}) .* GSTIN: (?P<GSTIN>.*?) .* "
        r"Name:\s+(?P<Name>.*?) Address.* \s+(?P<StateName>[^\d]+?)\s+SGST",
        re.DOTALL,
    ),
    table_pattern=re.compile(
        r"(?P<name>\w+)\(.*?\)\s+(?P<tax>-|\d+)\s+(?P<interest>-|\d+)\s+(?P<penalty>-|\d+)\s+"
        r"(?P<fees>-|\d+)\s+(?P<others>-|\d+)\s+(?P<total>-|\d+)\s+"
    ),
    extract_fn=gst_challan_parser,
))

register_parser(ParserDefinition(
    name="GSTR-3B",
    match_keywords=("Form GSTR-3B", "See rule 61(5)"),
    metadata_pattern=re.compile(
        r"Year (?P<Year>[\d-]+)\s+Period\s+(?P<Period>.*)\s+GSTIN\s+of\s+the\s+supplier\s+(?P<GSTIN>\w+)\s+"
        r"2\(a\)\.\s+Legal\s+name\s+of\s+the\s+registered\s+person\s+(?P<Name>.*)\s+2\(b\).*"
        r"Date of ARN (?P<ARN_Date>[\d/]+)"
    ),
    table_pattern=re.compile(
        r"\([a-e]\s?\) (?P<Particular>[A-Z].*?) (?P<TaxableValue>\d+\.\d\d|-)\s+(?P<IGST>\d+\.\d\d|-)\s+"
        r"(?P<CGST>\d+\.\d\d|-)\s+(?P<SGST>\d+\.\d\d|-)\s+(?P<Cess>\d+\.\d\d|-)\s+"
    ),
))

register_parser(ParserDefinition(
    name="TDS",
    match_keywords=("INCOME TAX DEPARTMENT", "Challan Receipt"),
    metadata_pattern=re.compile(
        r"Name : (?P<Name>.*?)\s+Ass.* Nature of Payment : (?P<SectionNo>\w+)\s+"
        r"Amount \(in\s+Rs\.\) : ₹ (?P<Amount>\d[\d,.]*).*(?P<DepositDate>\d\d\-\s?\w{3}-\d{4})"
    ),
))
