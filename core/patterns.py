"""
Compilação de padrões (regex) informados pelo operador.

Os blocos de configuração de parsers são escritos no formato herdado da
ferramenta web, onde grupos nomeados usam a sintaxe ``(?<nome>...)``.
O módulo ``re`` do Python só aceita ``(?P<nome>...)``, então a sintaxe é
traduzida antes de compilar. Lookbehinds (``(?<=``, ``(?<!``) não são tocados.

Convenções de flags:
    - Regex de metadados: DOTALL (``.`` atravessa quebras de linha), aplicada uma vez.
    - Regex de tabela: sem flags, aplicada repetidamente (todas as ocorrências).
"""
import re
from typing import Optional, Pattern

from core.exceptions import InvalidPatternError
from core.models import PatternLike

# "(?<" que não seja lookbehind; só conta como escapado com número ímpar de "\" antes
_NAMED_GROUP_RE = re.compile(r"(?<!\\)((?:\\\\)*)\(\?<(?![=!])")

METADATA_FLAGS = re.DOTALL
TABLE_FLAGS = 0


def to_python_syntax(source: str) -> str:
    """
    Traduz grupos nomeados no estilo ``(?<nome>...)`` para ``(?P<nome>...)``.

    Examples:
        >>> to_python_syntax(r"Name:\\s+(?<Name>.*)")
        'Name:\\\\s+(?P<Name>.*)'
        >>> to_python_syntax(r"(?<=R)\\d+")
        '(?<=R)\\\\d+'
    """
    return _NAMED_GROUP_RE.sub(r"\1(?P<", source)


def compile_pattern(source: str, flags: int = 0) -> Pattern:
    """
    Compila um padrão textual.

    Raises:
        InvalidPatternError: Se o padrão estiver vazio ou não compilar. A mensagem
            contém o erro original do compilador.
    """
    if source is None or not source.strip():
        raise InvalidPatternError("Pattern is empty. Please enter a valid regex.")
    try:
        return re.compile(to_python_syntax(source), flags)
    except re.error as e:
        raise InvalidPatternError(f"Invalid Regex: {e}") from e


def _compile_optional(pattern: PatternLike, flags: int) -> Optional[Pattern]:
    if pattern is None:
        return None
    if isinstance(pattern, str):
        if not pattern.strip():
            return None
        return compile_pattern(pattern, flags)
    return pattern


def compile_metadata_pattern(pattern: PatternLike) -> Optional[Pattern]:
    """Compila (se necessário) uma regex de metadados. Vazio/None -> None."""
    return _compile_optional(pattern, METADATA_FLAGS)


def compile_table_pattern(pattern: PatternLike) -> Optional[Pattern]:
    """Compila (se necessário) uma regex de tabela. Vazio/None -> None."""
    return _compile_optional(pattern, TABLE_FLAGS)
