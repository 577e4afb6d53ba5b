"""
Extratos bancários: Union, Canara, RBL, IDBI, PNB e ICICI.
"""
import re

from core.extractors import CANONICAL_WIDTH, fit_row, general_document_parser, metadata_rows
from core.models import ExtractionResult, ParserDefinition
from core.patterns import compile_metadata_pattern, compile_table_pattern
from core.registry import register_parser

IDBI_HEADERS = ["Date", "Particulars/Description", "Type", "Amount", "Serial No", "Balance", ""]


def idbi_statement_parser(text, metadata_pattern, table_pattern, doc_type=None) -> ExtractionResult:
    """
    Extrato IDBI: campos renomeados (``N/A`` quando ausentes) e valores de
    débito (``Dr.``) com sinal negativo.
    """
    meta_rx = compile_metadata_pattern(metadata_pattern)
    meta_match = meta_rx.search(text) if meta_rx else None
    name = (meta_match.group("Name") or "").strip() if meta_match else ""
    account = (meta_match.group("AccNo") or "") if meta_match else ""
    metadata_fields = {
        "Account Name": name or "N/A",
        "Account Number": account or "N/A",
    }

    table_rx = compile_table_pattern(table_pattern)
    data_rows = []
    for m in (table_rx.finditer(text) if table_rx else []):
        amount = f"-{m.group('Amt')}" if m.group("type") == "Dr." else m.group("Amt")
        data_rows.append([
            m.group("date"),
            m.group("particular").strip(),
            m.group("type"),
            amount.replace(",", ""),
            m.group("serialNo"),
            m.group("Bal").replace(",", ""),
            "",
        ])

    return ExtractionResult(
        metadata_fields=metadata_fields,
        all_rows=[*metadata_rows(metadata_fields), fit_row(IDBI_HEADERS, CANONICAL_WIDTH), *data_rows],
    )


register_parser(ParserDefinition(
    name="Union Bank Statement",
    match_keywords=("Union Bank of India", "Statement of Account"),
    metadata_pattern=re.compile(
        r"Statement of Account\s+(?P<Account_Holder_Name>.*?)\s+.* Account No\s+(?P<Account_Number>\d+)",
        re.IGNORECASE | re.DOTALL,
    ),
    table_pattern=re.compile(
        r"(?P<date>\d\d-\d\d-\d{4})\s+\d\d:\d\d:\d\d\s+(?P<particulars>.*?)\s+"
        r"(?P<amt>[\d,]+\.\d\s?\d)\s+(?P<bal>-?\s?[\d,]+\.\d\s?\d)"
    ),
))

register_parser(ParserDefinition(
    name="Canara Bank Statement",
    match_keywords=("Canara Bank does not",),
    metadata_pattern=re.compile(
        r"Account Number (?P<Account_Number>\d+).* Opening Balance Rs\. (?P<Opening_Balance>-?[\d,]+\.\d\d)\s+"
        r"Closing Balance Rs\. (?P<Closing_Balance>-?[\d,]+\.\d\d)",
        re.DOTALL,
    ),
    table_pattern=re.compile(
        r"\s\s(?P<date>\d\d-\d\d-\d{4})\s+\d\d:\d\d:\d\d\s+(?P<particulars>.*?)\s+"
        r"(?P<amt>[\d+,]+\.\d\d)\s+(?P<bal>-?[\d+,]+\.\d\d)"
    ),
))

register_parser(ParserDefinition(
    name="RBL Bank Statement",
    match_keywords=("RBL BANK LTD",),
    metadata_pattern=re.compile(
        r"Account Name: (?P<Account_Name>.*?) Home Branch: .* in Account Number:\s+(?P<Account_Number>\d+)\s+.* "
        r"Opening Balance: ₹ (?P<Opening_Balance>[\d,]+\.\d{2})\s+Count Of Debit: \d+\s+"
        r"Closing Balance: ₹ (?P<Closing_Balance>[\d,]+\.\d{2})",
        re.DOTALL,
    ),
    table_pattern=re.compile(
        r"(?P<date>\d\d/\d\d/\d{4})\s+\d\d/\d\d/\d{4}\s+(?P<particular>.*?)\s+"
        r"(?P<amt>[\d,]+\.\s?\d\s?\d)\s+(?P<bal>[\d,]+\s?\.\s?\d\s?\d)"
    ),
    extract_fn=general_document_parser,
))

register_parser(ParserDefinition(
    name="IDBI Bank Statement",
    match_keywords=("IDBI Bank or other authorities",),
    metadata_pattern=re.compile(r"^(?P<Name>.*?) Address .* A/C NO: (?P<AccNo>\d+)", re.DOTALL),
    table_pattern=re.compile(
        r"(?P<date>\d\d/\d\d/\d{4})\s+(?P<particular>.*?)\s+(?P<type>Dr\.|Cr\.)\s+\w{3}\s+"
        r"(?P<Amt>[\d,]+\.\d{2})\s+\d\d/\d\d/\d{4}\s+\d\d:\d\d:\d\d\s+(?P<serialNo>\d+)\s+"
        r"(?P<Bal>-?[\d,]+\.\d{2})"
    ),
    extract_fn=idbi_statement_parser,
))

register_parser(ParserDefinition(
    name="PNB",
    match_keywords=("Stk Stmt: Stock Statement", "Trf: Transfer"),
    metadata_pattern=re.compile(
        r"Account Number (?P<AccountNumber>\d+).*?Account Name: (?P<Name>.*?) Customer Address"
    ),
    table_pattern=re.compile(
        r"(?P<TxnNo>[A-Z]{1}\d+) (?P<date>\d\d/\d\d/\d{4}) (?P<description>.*?) "
        r"(?P<Amt>-?\s?\d[\d,.\s]+\d) (?P<bal>\d[\d,.\s]+\d) (?P<Effect>Cr|Dr)"
    ),
))

register_parser(ParserDefinition(
    name="ICICI",
    match_keywords=("PAN can be updated online or at the nearest ICICI Bank Branch .",),
    metadata_pattern=re.compile(
        r"^.*?  (?P<Name>.*?)  .* (?P<OpeningDate>\d\d-\d\d-\d{4}) B/F (?P<OpeningBalance>[\d,.]+)",
        re.DOTALL,
    ),
    table_pattern=re.compile(
        r"(?P<Date>\d\d-\d\d-\d{4}) (?P<Particular>.*?) (?P<Amount>[\d,]+\.\d\d) (?P<Balance>[\d,.]+) "
    ),
))
