from pathlib import Path
from typing import Dict, Optional

from core.exceptions import ExtractionError
from core.interfaces import TextExtractionStrategy
from .native import NativePdfStrategy
from .plain_text import PlainTextStrategy


class FileTypeStrategy(TextExtractionStrategy):
    """
    Estratégia composta que escolhe o leitor pela extensão do arquivo.

    1.  ``.pdf`` -> NativePdfStrategy (pdfplumber).
    2.  ``.txt`` -> PlainTextStrategy.

    Erros de senha dos leitores sobem sem alteração para o processador de lotes.
    """

    def __init__(self, strategies: Optional[Dict[str, TextExtractionStrategy]] = None):
        self.strategies = strategies if strategies is not None else {
            '.pdf': NativePdfStrategy(),
            '.txt': PlainTextStrategy(),
        }

    def extract(self, file_path: str, password: str = "") -> str:
        """
        Delega para a estratégia registrada para a extensão.

        Raises:
            ExtractionError: Extensão sem estratégia registrada.
        """
        suffix = Path(file_path).suffix.lower()
        strategy = self.strategies.get(suffix)
        if strategy is None:
            raise ExtractionError(f"Tipo de arquivo não suportado: {suffix or file_path}")
        return strategy.extract(file_path, password)
