from pathlib import Path

from core.exceptions import ExtractionError
from core.interfaces import TextExtractionStrategy


class PlainTextStrategy(TextExtractionStrategy):
    """
    Leitura de dumps de texto (.txt) já extraídos de um documento.

    Útil para reprocessar o texto bruto salvo de um PDF sem abrir o PDF de novo.
    A senha é ignorada.
    """

    def __init__(self, encodings=('utf-8', 'latin-1')):
        self.encodings = encodings

    def extract(self, file_path: str, password: str = "") -> str:
        path = Path(file_path)
        if not path.exists():
            raise ExtractionError(f"Arquivo não encontrado: {file_path}")

        # Tenta múltiplos encodings pois alguns dumps usam Latin-1
        for encoding in self.encodings:
            try:
                return path.read_text(encoding=encoding)
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise ExtractionError(f"Erro ao ler {file_path}: {e}") from e
        raise ExtractionError(f"Encoding não suportado: {file_path}")
