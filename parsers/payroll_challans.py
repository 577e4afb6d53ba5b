"""
Guias trabalhistas: Professional Tax e Provident Fund (recibo e guia combinada).

Nenhum destes tem tabela; só metadados, consolidados por tipo depois do lote.
"""
import re

from core.models import ParserDefinition
from core.registry import register_parser

register_parser(ParserDefinition(
    name="Professional Tax Challan",
    match_keywords=("CHALLAN MTR Form Number-6",),
    metadata_pattern=re.compile(
        r"Full Name (?P<name>.*) Location.*From (?P<period>.*) Flat.*TAX (?P<amt>\d+\.\d{2}).*"
        r"RBI Date (?P<paymentDate>\d\d/\d\d/\d{4})",
        re.DOTALL,
    ),
))

register_parser(ParserDefinition(
    name="Provident Fund Challan Receipts",
    match_keywords=("Payment Confirmation Receipt", "TRRN No"),
    metadata_pattern=re.compile(
        r"ID : (?P<Name>.*?) Establishment Name .*? (?P<WageMonth>\w+-\d{2,4}) Wage Month : (?P<Amt>\d[\d,.]*).*? "
        r"(Payment|Realization|Payment Confirmation) Date : (?P<PaymentDate>\d{2}-\w+-\d{4})",
        re.DOTALL,
    ),
))

register_parser(ParserDefinition(
    name="Provident Fund Challan",
    match_keywords=(
        "COMBINED CHALLAN OF A/C NO. 01, 02, 10, 21 & 22 (With EMPLOYEES' PROVIDENT FUND ORGANISATION",
    ),
    metadata_pattern=re.compile(
        r"(?P<Month>\w+) (?P<Year>\d{4}) (?P<TRRN>\d{13}) (?P<Name>.*) Total Subscribers .* "
        r"(?P<Amt>[\d,]+) Grand Total :",
        re.DOTALL,
    ),
))
