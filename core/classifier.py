"""
Classificação: escolhe qual regra de extração se aplica a um documento.

Modos:
    - auto: primeiro parser (ordem do registro) cujas palavras-chave aparecem
      TODAS no texto (busca case-insensitive, espaços colapsados).
    - forçado: o parser nomeado pelo operador, sem checar palavras-chave.
    - one-shot: uma regex avulsa do operador, sem consultar o registro.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern

from core.exceptions import UnrecognizedDocumentTypeError
from core.extractors import general_document_parser
from core.models import ExtractionResult, ParserDefinition
from core.patterns import compile_pattern, METADATA_FLAGS, TABLE_FLAGS
from core.registry import ParserRegistry

logger = logging.getLogger(__name__)

MODE_AUTO = "auto"
MODE_FORCED = "forced"
MODE_ONE_SHOT = "one-shot"

# Rótulo de tipo de documento usado por todos os resultados one-shot
ONE_SHOT_DOC_TYPE = "One-shot Regex"

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_for_matching(text: str) -> str:
    """Colapsa espaços e quebras de linha e passa para minúsculas."""
    return _WHITESPACE_RE.sub(" ", text or "").lower()


def matches_all_keywords(definition: ParserDefinition, normalized_text: str) -> bool:
    """
    True se todas as palavras-chave aparecem no texto já normalizado.

    Só o texto tem os espaços colapsados; a palavra-chave é apenas passada
    para minúsculas, então uma palavra-chave com espaço duplo nunca casa.
    """
    if not definition.match_keywords:
        return False
    return all(k.lower() in normalized_text for k in definition.match_keywords)


@dataclass(frozen=True)
class ClassificationMode:
    """
    Modo de classificação escolhido pelo operador.

    Attributes:
        kind (str): auto, forced ou one-shot.
        parser_name (str): Nome do parser (modo forçado).
        pattern (Optional[Pattern]): Regex compilada (modo one-shot).
        is_global (bool): One-shot aplicado como tabela (todas as ocorrências).
    """
    kind: str = MODE_AUTO
    parser_name: str = ""
    pattern: Optional[Pattern] = None
    is_global: bool = False

    @classmethod
    def auto(cls) -> "ClassificationMode":
        return cls(kind=MODE_AUTO)

    @classmethod
    def forced(cls, parser_name: str) -> "ClassificationMode":
        return cls(kind=MODE_FORCED, parser_name=parser_name.strip())

    @classmethod
    def one_shot(cls, pattern: str, is_global: bool = False) -> "ClassificationMode":
        """
        Raises:
            InvalidPatternError: Regex vazia ou que não compila.
        """
        flags = TABLE_FLAGS if is_global else METADATA_FLAGS
        return cls(kind=MODE_ONE_SHOT, pattern=compile_pattern(pattern, flags), is_global=is_global)

    @classmethod
    def parse(cls, selector: Optional[str], pattern: str = "", is_global: bool = False) -> "ClassificationMode":
        """Monta o modo a partir do seletor ``auto | <nome do parser> | one-shot``."""
        selector = (selector or "").strip()
        if not selector or selector.lower() == MODE_AUTO:
            return cls.auto()
        if selector.lower() == MODE_ONE_SHOT:
            return cls.one_shot(pattern, is_global)
        return cls.forced(selector)

    @property
    def label(self) -> str:
        if self.kind == MODE_FORCED:
            return self.parser_name
        return self.kind


@dataclass
class Classification:
    """
    Resultado da classificação de um documento.

    Attributes:
        doc_type (str): Nome exibido do tipo de documento.
        result (ExtractionResult): Campos de metadados e fluxo de linhas.
        metadata_entries (List[Dict[str, str]]): Um dicionário por registro de
            metadados a gerar. No modo normal há no máximo um; no one-shot
            global há um por ocorrência.
    """
    doc_type: str
    result: ExtractionResult
    metadata_entries: List[Dict[str, str]] = field(default_factory=list)


class Classifier:
    """
    Seleciona o parser (ou a regex avulsa) e executa a extração.

    Args:
        registry: Registro de parsers consultado nos modos auto e forçado.
        mode: Modo de classificação do lote.
    """

    def __init__(self, registry: ParserRegistry, mode: Optional[ClassificationMode] = None):
        self.registry = registry
        self.mode = mode or ClassificationMode.auto()

    def select_parser(self, text: str) -> ParserDefinition:
        """
        Escolhe o parser para o texto (modos auto e forçado).

        Raises:
            UnrecognizedDocumentTypeError: Nenhum parser casou ou nome desconhecido.
        """
        if self.mode.kind == MODE_FORCED:
            definition = self.registry.find(self.mode.parser_name)
            if definition is None:
                raise UnrecognizedDocumentTypeError(f"Unknown parser: {self.mode.parser_name}")
            return definition

        normalized = normalize_for_matching(text)
        for definition in self.registry.all_parsers():
            if matches_all_keywords(definition, normalized):
                logger.debug(f"Documento reconhecido como '{definition.display_name}'")
                return definition
        raise UnrecognizedDocumentTypeError("Unrecognized document type")

    def classify(self, text: str) -> Classification:
        """
        Classifica e extrai.

        O texto original (não normalizado) é o que vai para a extração.

        Raises:
            UnrecognizedDocumentTypeError: Documento não reconhecido.
        """
        if self.mode.kind == MODE_ONE_SHOT:
            return self._classify_one_shot(text)

        definition = self.select_parser(text)
        extract = definition.extract_fn or general_document_parser
        result = extract(text, definition.metadata_pattern, definition.table_pattern, definition.name)
        if result is None:
            raise UnrecognizedDocumentTypeError(f"Parser '{definition.name}' returned no result")

        entries = [dict(result.metadata_fields)] if result.metadata_fields else []
        return Classification(doc_type=definition.display_name, result=result, metadata_entries=entries)

    def _classify_one_shot(self, text: str) -> Classification:
        pattern = self.mode.pattern
        if not self.mode.is_global:
            result = general_document_parser(text, metadata_pattern=pattern, doc_type=ONE_SHOT_DOC_TYPE)
            entries = [dict(result.metadata_fields)] if result.metadata_fields else []
            return Classification(doc_type=ONE_SHOT_DOC_TYPE, result=result, metadata_entries=entries)

        result = general_document_parser(text, table_pattern=pattern, doc_type=ONE_SHOT_DOC_TYPE)
        entries = [one_shot_match_fields(m) for m in pattern.finditer(text)]
        return Classification(doc_type=ONE_SHOT_DOC_TYPE, result=result, metadata_entries=entries)


def one_shot_match_fields(match: "re.Match") -> Dict[str, str]:
    """
    Campos de uma ocorrência one-shot global.

    Grupos nomeados quando existem; senão ``Group N`` para os posicionais;
    senão o texto casado inteiro como ``Match``.
    """
    named = match.groupdict()
    if named:
        return {key: (value or "").strip() for key, value in named.items()}
    groups = match.groups()
    if groups:
        return {f"Group {i + 1}": (value or "").strip() for i, value in enumerate(groups)}
    return {"Match": match.group(0).strip()}
