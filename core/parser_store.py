"""
Repositórios de parsers customizados.

``JsonParserStore`` grava a lista em um arquivo JSON sob uma única chave
(``dataExtractorCustomParsers`` por padrão). A gravação é atômica: escreve
em arquivo temporário na mesma pasta e troca com ``os.replace``.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from core.interfaces import ParserStore

logger = logging.getLogger(__name__)


class JsonParserStore(ParserStore):
    """
    Persistência em arquivo JSON.

    Args:
        path: Caminho do arquivo. Padrão: ``CUSTOM_PARSERS_FILE`` das configurações.
        key: Chave onde a lista é guardada. Padrão: ``CUSTOM_PARSERS_KEY``.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, key: Optional[str] = None):
        if path is None or key is None:
            from config.settings import CUSTOM_PARSERS_FILE, CUSTOM_PARSERS_KEY
            path = path if path is not None else CUSTOM_PARSERS_FILE
            key = key if key is not None else CUSTOM_PARSERS_KEY
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Arquivo de parsers inválido ({self.path}): {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Arquivo de parsers sem objeto na raiz: {self.path}")
            return {}
        return data

    def load(self) -> List[Dict[str, Any]]:
        value = self._read_document().get(self.key)
        if value is None:
            return []

        # Aceita a lista serializada como string (formato do armazenamento chave-valor)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                logger.warning(f"Valor de '{self.key}' não é JSON válido: {e}")
                return []

        if not isinstance(value, list):
            logger.warning(f"Valor de '{self.key}' não é uma lista; ignorado")
            return []

        parsers = [item for item in value if isinstance(item, dict)]
        logger.debug(f"{len(parsers)} parser(s) customizado(s) carregado(s) de {self.path}")
        return parsers

    def save(self, parsers: List[Dict[str, Any]]) -> None:
        document = self._read_document()
        document[self.key] = list(parsers)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        logger.info(f"{len(parsers)} parser(s) customizado(s) salvo(s) em {self.path}")


class InMemoryParserStore(ParserStore):
    """Repositório em memória (testes e execuções sem persistência)."""

    def __init__(self, parsers: Optional[List[Dict[str, Any]]] = None):
        self._parsers = [dict(p) for p in (parsers or [])]
        self.save_count = 0

    def load(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self._parsers]

    def save(self, parsers: List[Dict[str, Any]]) -> None:
        self._parsers = [dict(p) for p in parsers]
        self.save_count += 1
