"""
Registro de parsers (built-in + customizados).

Os built-ins se registram na importação do pacote ``parsers`` via
``register_parser``; a ordem de registro é a ordem de classificação.
Os customizados vêm de um ``ParserStore`` injetado e são avaliados antes
dos built-ins.
"""
import dataclasses
import logging
from typing import Dict, List, Optional

from core.exceptions import InvalidParserDefinitionError, InvalidPatternError
from core.interfaces import ParserStore
from core.models import ParserDefinition
from core.parser_config import (
    definition_from_block,
    format_config_blocks,
    split_config_blocks,
    split_keywords,
)
from core.patterns import compile_metadata_pattern, compile_table_pattern

logger = logging.getLogger(__name__)

# 1. O Registro (lista ordenada de parsers built-in)
BUILT_IN_PARSERS: List[ParserDefinition] = []

UPSERT_ADDED = "added"
UPSERT_UPDATED = "updated"


def register_parser(definition: ParserDefinition) -> ParserDefinition:
    """Registra um parser built-in (a ordem de chamada é a ordem de avaliação)."""
    BUILT_IN_PARSERS.append(definition)
    return definition


def validate_definition(definition: ParserDefinition) -> ParserDefinition:
    """
    Normaliza e valida um parser customizado.

    Returns:
        ParserDefinition: Cópia com nome/palavras-chave sem espaços e ``is_custom=True``.

    Raises:
        InvalidParserDefinitionError: Nome ou palavras-chave vazios.
        InvalidPatternError: Regex de metadados ou de tabela não compila.
    """
    name = (definition.name or "").strip()
    raw_keywords = definition.match_keywords or ()
    if isinstance(raw_keywords, str):
        raw_keywords = (raw_keywords,)
    keywords = []
    for keyword in raw_keywords:
        keywords.extend(split_keywords(keyword))

    if not name or not keywords:
        raise InvalidParserDefinitionError(
            "Parser Name (name:) and Match Strings (matches:) are required."
        )

    # Compila antes de qualquer alteração; a mensagem carrega o erro do compilador
    compile_metadata_pattern(definition.metadata_pattern)
    compile_table_pattern(definition.table_pattern)

    return dataclasses.replace(
        definition,
        name=name,
        match_keywords=tuple(keywords),
        is_custom=True,
    )


class ParserRegistry:
    """
    Coleção ordenada de parsers.

    Args:
        store: Repositório dos customizados. Se None, usa ``InMemoryParserStore``.
        built_ins: Lista de built-ins. Se None, usa os registrados em ``parsers``.
    """

    def __init__(self, store: Optional[ParserStore] = None, built_ins: Optional[List[ParserDefinition]] = None):
        if store is None:
            from core.parser_store import InMemoryParserStore
            store = InMemoryParserStore()
        if built_ins is None:
            import parsers  # noqa: F401  (registra os built-ins)
            built_ins = BUILT_IN_PARSERS

        self._store = store
        self._built_ins = list(built_ins)
        self._custom = self._load_custom()

    def _load_custom(self) -> List[ParserDefinition]:
        loaded = []
        for data in self._store.load():
            definition = ParserDefinition.from_dict(data)
            if not definition.name or not definition.match_keywords:
                logger.warning(f"Parser customizado sem nome/palavras-chave ignorado: {data!r}")
                continue
            loaded.append(definition)
        logger.debug(f"{len(loaded)} parser(s) customizado(s) no registro")
        return loaded

    def _persist(self, custom: List[ParserDefinition]) -> None:
        # Grava antes de trocar a lista em memória: falha na gravação não deixa estado parcial
        self._store.save([d.to_dict() for d in custom])
        self._custom = custom

    @property
    def custom_parsers(self) -> List[ParserDefinition]:
        return list(self._custom)

    @property
    def built_in_parsers(self) -> List[ParserDefinition]:
        return list(self._built_ins)

    def all_parsers(self) -> List[ParserDefinition]:
        """Customizados primeiro (exibidos com sufixo), depois os built-ins."""
        return [*self._custom, *self._built_ins]

    def find(self, name: str) -> Optional[ParserDefinition]:
        """
        Busca um parser pelo nome (modo forçado).

        Um customizado é encontrado pelo nome puro ou pelo nome com sufixo
        ``(Custom)``, e tem prioridade sobre um built-in homônimo.
        """
        wanted = (name or "").strip()
        if not wanted:
            return None
        for definition in self._custom:
            if wanted in (definition.name, definition.display_name):
                return definition
        for definition in self._built_ins:
            if definition.name == wanted:
                return definition
        return None

    def upsert(self, definition: ParserDefinition) -> str:
        """
        Adiciona ou atualiza um parser customizado.

        Returns:
            str: ``"added"`` ou ``"updated"`` (mesmo nome de um customizado existente).

        Raises:
            InvalidParserDefinitionError: Nome ou palavras-chave vazios.
            InvalidPatternError: Regex inválida (nada é alterado).
        """
        definition = validate_definition(definition)
        custom = list(self._custom)

        for i, existing in enumerate(custom):
            if existing.name == definition.name:
                custom[i] = definition
                self._persist(custom)
                logger.info(f"Parser '{definition.name}' atualizado")
                return UPSERT_UPDATED

        custom.append(definition)
        self._persist(custom)
        logger.info(f"Parser '{definition.name}' adicionado")
        return UPSERT_ADDED

    def upsert_from_text(self, block: str) -> str:
        """Lê um bloco ``name:..;;`` e faz o upsert."""
        return self.upsert(definition_from_block(block))

    def remove(self, index: int) -> ParserDefinition:
        """
        Remove o parser customizado na posição informada.

        Raises:
            IndexError: Índice fora da lista de customizados.
        """
        if index < 0 or index >= len(self._custom):
            raise IndexError(f"No custom parser at index {index}")
        custom = list(self._custom)
        removed = custom.pop(index)
        self._persist(custom)
        logger.info(f"Parser '{removed.name}' removido")
        return removed

    def replace_all_from_text(self, blob: str) -> List[ParserDefinition]:
        """
        Substitui toda a lista de customizados pelo conteúdo do texto.

        Blocos sem ``name``/``matches`` são descartados; blocos com regex
        inválida também (com aviso no log). Um bloco com nome repetido
        substitui o anterior na mesma posição, como no ``upsert``.
        """
        accepted: List[ParserDefinition] = []
        positions: Dict[str, int] = {}
        for block in split_config_blocks(blob):
            try:
                definition = validate_definition(definition_from_block(block))
            except InvalidParserDefinitionError:
                logger.debug(f"Bloco sem name/matches ignorado: {block[:60]!r}")
                continue
            except InvalidPatternError as e:
                logger.warning(f"Bloco com regex inválida ignorado: {e}")
                continue

            if definition.name in positions:
                logger.info(f"Parser '{definition.name}' repetido na importação; vale o último bloco")
                accepted[positions[definition.name]] = definition
            else:
                positions[definition.name] = len(accepted)
                accepted.append(definition)

        self._persist(accepted)
        logger.info(f"{len(accepted)} parser(s) customizado(s) importado(s)")
        return list(accepted)

    def export_text(self) -> str:
        """Serializa os customizados no formato de blocos."""
        return format_config_blocks(self._custom)

    def display_names(self) -> List[str]:
        """Nomes exibidos, na ordem de avaliação (customizados com sufixo)."""
        return [d.display_name for d in self.all_parsers()]
