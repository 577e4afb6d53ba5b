"""
Parsers built-in (tipos de documento reconhecidos sem cadastro do operador).

A ordem de importação define a ordem de classificação: o primeiro parser
cujas palavras-chave aparecem todas no texto vence.
"""
from . import tax_challans
from . import bank_statements
from . import payroll_challans

__all__ = ["tax_challans", "bank_statements", "payroll_challans"]
