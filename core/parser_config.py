"""
Formato texto de importação/exportação de parsers.

Um bloco tem um campo por linha, separados pelo terminador ``;;``::

    name:Minha Conta Corrente;;
    matches:Bank Statement, Account Summary;;
    metadata:Account Number: (?<AccNo>\\d+);;
    table:(?<Date>\\d{2}/\\d{2}/\\d{4})\\s+(?<Amount>[\\d,.]+)

Vários blocos no mesmo texto são separados por uma linha ``---`` ou por uma
linha em branco. Apenas ``name`` e ``matches`` são obrigatórios; um bloco sem
eles é descartado sem afetar os demais.
"""
import re
from typing import Dict, List, Optional

from core.exceptions import InvalidParserDefinitionError
from core.models import ParserDefinition

FIELD_TERMINATOR = ";;"
BLOCK_SEPARATOR = "---"

KNOWN_KEYS = ("name", "matches", "metadata", "table")

_FIELD_SPLIT_RE = re.compile(r";;[ \t]*\r?\n")
_BLOCK_SPLIT_RE = re.compile(r"^[ \t]*---[ \t]*$|\r?\n[ \t]*\r?\n", re.MULTILINE)


def split_keywords(value: Optional[str]) -> List[str]:
    """Separa a lista de palavras-chave por vírgula, descartando itens vazios."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def parse_config_block(text: str) -> Dict[str, str]:
    """
    Lê um bloco ``chave:valor;;`` e devolve os campos conhecidos.

    Chaves são case-insensitive; valores perdem espaços nas pontas. Campos
    ausentes voltam como string vazia.
    """
    data = {key: "" for key in KNOWN_KEYS}
    for part in _FIELD_SPLIT_RE.split(text.strip()):
        if ":" not in part:
            continue
        key, value = part.split(":", 1)
        key = key.strip().lower()
        if key not in data:
            continue
        value = value.strip()
        if value.endswith(FIELD_TERMINATOR):
            value = value[: -len(FIELD_TERMINATOR)].rstrip()
        data[key] = value
    return data


def split_config_blocks(blob: str) -> List[str]:
    """Quebra um texto com vários blocos (``---`` ou linha em branco)."""
    return [block.strip() for block in _BLOCK_SPLIT_RE.split(blob or "") if block and block.strip()]


def definition_from_block(text: str) -> ParserDefinition:
    """
    Converte um bloco em ``ParserDefinition`` customizado.

    Raises:
        InvalidParserDefinitionError: Se ``name`` ou ``matches`` estiverem vazios.
    """
    data = parse_config_block(text)
    name = data["name"]
    keywords = split_keywords(data["matches"])

    if not name or not data["matches"]:
        raise InvalidParserDefinitionError(
            "Parser Name (name:) and Match Strings (matches:) are required."
        )
    if not keywords:
        raise InvalidParserDefinitionError("The matches: value cannot be empty.")

    return ParserDefinition(
        name=name,
        match_keywords=tuple(keywords),
        metadata_pattern=data["metadata"] or None,
        table_pattern=data["table"] or None,
        is_custom=True,
    )


def format_config_block(definition: ParserDefinition) -> str:
    """Serializa um parser no formato de bloco."""
    return (
        f"name:{definition.name}{FIELD_TERMINATOR}\n"
        f"matches:{', '.join(definition.match_keywords)}{FIELD_TERMINATOR}\n"
        f"metadata:{definition.metadata_source}{FIELD_TERMINATOR}\n"
        f"table:{definition.table_source}"
    )


def format_config_blocks(definitions: List[ParserDefinition]) -> str:
    """Serializa vários parsers separados por ``---``."""
    return f"\n\n{BLOCK_SEPARATOR}\n\n".join(format_config_block(d) for d in definitions)
