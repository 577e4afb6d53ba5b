import logging

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect
from pdfplumber.utils.exceptions import PdfminerException

from core.exceptions import CredentialIncorrectError, CredentialRequiredError, ExtractionError
from core.interfaces import TextExtractionStrategy

logger = logging.getLogger(__name__)

# Termos que indicam erro de criptografia/senha na mensagem do pdfminer
_PASSWORD_HINTS = ("password", "encrypt", "decrypt")


def is_password_error(error: Exception) -> bool:
    """True se a exceção do pdfplumber/pdfminer indica documento protegido."""
    causes = [error]
    # PdfminerException embrulha a exceção original do pdfminer em args[0]
    if isinstance(error, PdfminerException):
        causes.extend(error.args)
    if error.__cause__ is not None:
        causes.append(error.__cause__)
    for cause in causes:
        if isinstance(cause, PDFPasswordIncorrect):
            return True
        text = f"{type(cause).__name__} {cause}".lower()
        if any(hint in text for hint in _PASSWORD_HINTS):
            return True
    return False


class NativePdfStrategy(TextExtractionStrategy):
    """
    Estratégia de leitura para PDFs vetoriais (baseados em texto).

    Utiliza a biblioteca `pdfplumber` para acessar a camada de texto do PDF diretamente.
    Lê TODAS as páginas; quebras de linha viram espaço e as páginas são unidas
    por espaço, de modo que as regex dos parsers trabalham sobre uma linha única.
    """

    def extract(self, file_path: str, password: str = "") -> str:
        """
        Extrai texto de um PDF vetorial.

        Args:
            file_path: Caminho do arquivo.
            password: Senha do PDF ("" se não houver).

        Returns:
            str: Texto de todas as páginas.

        Raises:
            CredentialRequiredError: PDF protegido e nenhuma senha informada.
            CredentialIncorrectError: Senha recusada.
            ExtractionError: Qualquer outra falha de leitura.
        """
        try:
            with pdfplumber.open(file_path, password=password or None) as pdf:
                chunks = []
                for page in pdf.pages:
                    page_text = page.extract_text() or ""
                    chunks.append(page_text.replace("\r\n", " ").replace("\n", " "))
        except OSError as e:
            raise ExtractionError(f"Erro ao abrir {file_path}: {e}") from e
        except Exception as e:
            if is_password_error(e):
                if password:
                    raise CredentialIncorrectError("Password required or incorrect.") from e
                raise CredentialRequiredError("Password required or incorrect.") from e
            raise ExtractionError(f"Falha ao ler PDF {file_path}: {e}") from e

        logger.debug(f"{file_path}: {len(chunks)} página(s) lida(s)")
        return " ".join(chunks) + " " if chunks else ""
