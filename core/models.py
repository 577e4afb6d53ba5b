from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple, Union

# Status possíveis de um documento processado
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_SKIPPED = "skipped"

# Sufixo exibido para diferenciar parsers customizados de built-ins homônimos
CUSTOM_SUFFIX = " (Custom)"

PatternLike = Union[str, Pattern, None]

# Assinatura das funções de extração: (texto, regex_metadados, regex_tabela, tipo_documento)
ExtractFunc = Callable[[str, Optional[Pattern], Optional[Pattern], Optional[str]], "ExtractionResult"]


def _pattern_source(pattern: PatternLike) -> str:
    if pattern is None:
        return ""
    if isinstance(pattern, str):
        return pattern
    return pattern.pattern


@dataclass(frozen=True)
class ParserDefinition:
    """
    Descrição estática de um tipo de documento.

    Attributes:
        name (str): Nome único (chave de exibição e de seleção).
        match_keywords (Tuple[str, ...]): Palavras-chave que TODAS devem aparecer no texto.
        metadata_pattern: Regex com grupos nomeados aplicada uma única vez (opcional).
        table_pattern: Regex com grupos aplicada repetidamente para as linhas (opcional).
        extract_fn: Função de extração própria; None usa o extrator padrão.
        is_custom (bool): True para parsers cadastrados pelo operador.
    """
    name: str
    match_keywords: Tuple[str, ...]
    metadata_pattern: PatternLike = None
    table_pattern: PatternLike = None
    extract_fn: Optional[ExtractFunc] = None
    is_custom: bool = False

    @property
    def display_name(self) -> str:
        """Nome exibido na lista combinada (custom recebe sufixo)."""
        return f"{self.name}{CUSTOM_SUFFIX}" if self.is_custom else self.name

    @property
    def metadata_source(self) -> str:
        return _pattern_source(self.metadata_pattern)

    @property
    def table_source(self) -> str:
        return _pattern_source(self.table_pattern)

    def to_dict(self) -> Dict[str, Any]:
        """Formato persistido no repositório de parsers customizados."""
        return {
            "name": self.name,
            "matches": list(self.match_keywords),
            "metadata": self.metadata_source,
            "table": self.table_source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserDefinition":
        """Reconstrói um parser customizado a partir do formato persistido."""
        matches = data.get("matches") or []
        if isinstance(matches, str):
            matches = matches.split(",")
        return cls(
            name=str(data.get("name", "")).strip(),
            match_keywords=tuple(m.strip() for m in matches if m and m.strip()),
            metadata_pattern=data.get("metadata") or None,
            table_pattern=data.get("table") or None,
            is_custom=True,
        )


@dataclass
class ExtractionResult:
    """
    Resultado canônico de uma extração.

    ``all_rows`` é o fluxo combinado de linhas: linhas de metadados
    (``[chave, valor, "", ...]``), seguidas do cabeçalho e das linhas de dados.
    O cabeçalho é separado dos metadados pela quantidade de campos de metadados.
    """
    metadata_fields: Dict[str, str] = field(default_factory=dict)
    all_rows: List[List[str]] = field(default_factory=list)

    @property
    def header_row(self) -> List[str]:
        meta_count = len(self.metadata_fields)
        if len(self.all_rows) > meta_count:
            return self.all_rows[meta_count]
        return []

    @property
    def data_rows(self) -> List[List[str]]:
        meta_count = len(self.metadata_fields)
        if len(self.all_rows) > meta_count + 1:
            return self.all_rows[meta_count + 1:]
        return []

    @property
    def table_rows(self) -> List[List[str]]:
        """Cabeçalho seguido das linhas de dados."""
        return self.all_rows[len(self.metadata_fields):]


@dataclass(frozen=True)
class DocumentRecord:
    """
    Registro de um arquivo processado (um por arquivo, imutável).

    Attributes:
        file_name (str): Nome do arquivo de origem.
        doc_type (str): Nome do parser aplicado (ou FAILED / SKIPPED).
        metadata_fields (Dict[str, str]): Campos únicos extraídos.
        header_row (List[str]): Cabeçalho da tabela.
        data_rows (List[List[str]]): Linhas da tabela.
        raw_text (str): Texto bruto lido do documento (para debug).
        status (str): success, error ou skipped.
        message (str): Mensagem de erro/observação (vazia em caso de sucesso).
    """
    file_name: str
    doc_type: str
    metadata_fields: Dict[str, str] = field(default_factory=dict)
    header_row: List[str] = field(default_factory=list)
    data_rows: List[List[str]] = field(default_factory=list)
    raw_text: str = ""
    status: str = STATUS_SUCCESS
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Converte o registro para dicionário. Usado para exportação."""
        return {
            "file_name": self.file_name,
            "doc_type": self.doc_type,
            "status": self.status,
            "message": self.message,
            "metadata_fields": dict(self.metadata_fields),
            "header_row": list(self.header_row),
            "data_rows": [list(r) for r in self.data_rows],
        }


@dataclass(frozen=True)
class MetadataRecord:
    """Metadados de um documento, usados na consolidação por tipo."""
    file_name: str
    doc_type: str
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ConsolidatedTable:
    """Tabela resumo de um tipo de documento."""
    doc_type: str
    header_row: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
