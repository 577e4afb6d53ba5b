"""
Extrator padrão (contrato de extração).

Recebe o texto bruto e as duas regex de um parser e devolve um
``ExtractionResult`` no formato canônico:

    [linha_meta_1, ..., linha_meta_n, cabeçalho, linha_1, ..., linha_m]

Todas as linhas têm a largura canônica (7 colunas): colunas extras são
cortadas e as faltantes são preenchidas com string vazia. A única exceção é
o cabeçalho vazio ``[]`` quando não há regex de tabela ou ocorrência.

Falhas de compilação ou de execução de uma regex são registradas no log e
tratadas como "sem ocorrência" apenas para aquela regex: metadados e tabela
falham de forma independente e nunca interrompem o lote.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Tuple

from core.exceptions import InvalidPatternError
from core.models import ExtractionResult, PatternLike
from core.patterns import compile_metadata_pattern, compile_table_pattern

logger = logging.getLogger(__name__)

# Largura fixa de todas as linhas produzidas pelo extrator padrão
CANONICAL_WIDTH = 7


def fit_row(values: Iterable[str], width: int = CANONICAL_WIDTH) -> List[str]:
    """Corta ou completa (com "") uma linha até a largura informada."""
    row = list(values)[:width]
    row.extend([""] * (width - len(row)))
    return row


def humanize_header(key: str) -> str:
    """
    Converte o nome de um grupo em cabeçalho legível.

    Examples:
        >>> humanize_header("opening_balance")
        'Opening balance'
    """
    return key[:1].upper() + key[1:].replace("_", " ")


def clean_cell(value: Optional[str]) -> str:
    """Remove espaços nas pontas e vírgulas de milhar de uma célula."""
    if not value:
        return ""
    return value.strip().replace(",", "")


def metadata_rows(fields: Dict[str, str], width: int = CANONICAL_WIDTH) -> List[List[str]]:
    """Linhas ``[chave, valor, "", ...]`` que precedem o cabeçalho."""
    return [fit_row([key, value], width) for key, value in fields.items()]


def safe_compile(
    pattern: PatternLike,
    compiler: Callable[[PatternLike], Optional[Pattern]],
    label: str,
) -> Optional[Pattern]:
    """Compila a regex; em caso de erro registra no log e retorna None."""
    try:
        return compiler(pattern)
    except InvalidPatternError as e:
        logger.error(f"Regex de {label} inválida, ignorada: {e}")
        return None


def extract_metadata(text: str, pattern: PatternLike) -> Dict[str, str]:
    """
    Aplica a regex de metadados uma única vez.

    Cada grupo nomeado vira um campo (valor sem espaços nas pontas; grupo
    opcional não capturado vira string vazia). Sem ocorrência -> dict vazio.
    """
    regex = safe_compile(pattern, compile_metadata_pattern, "metadados")
    if regex is None:
        return {}

    try:
        match = regex.search(text)
    except Exception as e:
        logger.error(f"Erro ao aplicar regex de metadados: {e}")
        return {}

    if not match:
        return {}

    return {key: (value.strip() if value else "") for key, value in match.groupdict().items()}


def extract_table(
    text: str,
    pattern: PatternLike,
    width: int = CANONICAL_WIDTH,
) -> Tuple[List[str], List[List[str]]]:
    """
    Aplica a regex de tabela repetidamente (todas as ocorrências sem sobreposição).

    O cabeçalho é derivado da primeira ocorrência: grupos nomeados viram
    cabeçalhos legíveis; sem grupos nomeados, usa ``Col 1..Col N``.

    Returns:
        Tuple[List[str], List[List[str]]]: (cabeçalho, linhas). Ambos vazios se
        não houver regex ou ocorrências.
    """
    regex = safe_compile(pattern, compile_table_pattern, "tabela")
    if regex is None:
        return [], []

    try:
        matches = list(regex.finditer(text))
    except Exception as e:
        logger.error(f"Erro ao aplicar regex de tabela: {e}")
        return [], []

    if not matches:
        return [], []

    has_named_groups = bool(regex.groupindex)
    first = matches[0]
    if has_named_groups:
        headers = [humanize_header(key) for key in first.groupdict()]
    else:
        headers = [f"Col {i + 1}" for i in range(len(first.groups()))]

    rows = []
    for match in matches:
        values = match.groupdict().values() if has_named_groups else match.groups()
        rows.append(fit_row((clean_cell(v) for v in values), width))

    return fit_row(headers, width), rows


def general_document_parser(
    text: str,
    metadata_pattern: PatternLike = None,
    table_pattern: PatternLike = None,
    doc_type: Optional[str] = None,
) -> ExtractionResult:
    """
    Extrator de uso geral, usado por todo parser sem função própria.

    Args:
        text: Texto original do documento (não normalizado).
        metadata_pattern: Regex de metadados (str ou compilada) ou None.
        table_pattern: Regex de tabela (str ou compilada) ou None.
        doc_type: Nome do parser (apenas para log).

    Returns:
        ExtractionResult: Campos de metadados + fluxo combinado de linhas.

    Todas as linhas têm largura 7, com uma exceção: sem regex de tabela ou
    sem ocorrência, o cabeçalho é a lista vazia ``[]`` (largura 0) e não há
    linhas de dados.
    """
    metadata_fields = extract_metadata(text, metadata_pattern) if metadata_pattern else {}
    headers, data_rows = extract_table(text, table_pattern) if table_pattern else ([], [])

    logger.debug(
        f"[{doc_type or 'general'}] {len(metadata_fields)} campo(s) de metadados, "
        f"{len(data_rows)} linha(s) de tabela"
    )

    return ExtractionResult(
        metadata_fields=metadata_fields,
        all_rows=[*metadata_rows(metadata_fields), headers, *data_rows],
    )
