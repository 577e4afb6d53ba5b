import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from core.classifier import Classifier
from core.exceptions import CredentialRequiredError, ExtractorException, UnrecognizedDocumentTypeError
from core.interfaces import TextExtractionStrategy
from core.models import (
    STATUS_ERROR,
    STATUS_SKIPPED,
    STATUS_SUCCESS,
    DocumentRecord,
    MetadataRecord,
)

logger = logging.getLogger(__name__)

FAILED_DOC_TYPE = "FAILED"
SKIPPED_DOC_TYPE = "SKIPPED"
UNRECOGNIZED_MESSAGE = "Unrecognized document type"
SKIPPED_MESSAGE = "Skipped by user."

# Sequências de três espaços que a leitura nativa produz entre colunas
_TRIPLE_SPACE_RE = re.compile(r"   ")


@dataclass
class ProcessedDocument:
    """Saída do processamento de um arquivo: um registro e 0..N metadados."""
    record: DocumentRecord
    metadata_records: List[MetadataRecord] = field(default_factory=list)


def skipped_document(file_path: str) -> ProcessedDocument:
    """Registro de arquivo pulado pelo operador."""
    return ProcessedDocument(
        record=DocumentRecord(
            file_name=os.path.basename(file_path),
            doc_type=SKIPPED_DOC_TYPE,
            status=STATUS_SKIPPED,
            message=SKIPPED_MESSAGE,
        )
    )


class DocumentProcessor:
    """
    Classe orquestradora do processamento de UM arquivo.

    Responsável por coordenar o fluxo:
    1.  **Leitura**: Converte o arquivo em texto (via ``TextExtractionStrategy``).
    2.  **Classificação**: Escolhe o parser (ou a regex one-shot).
    3.  **Extração**: Aplica as regex e monta o fluxo canônico de linhas.
    4.  **Registro**: Devolve um ``DocumentRecord`` e os ``MetadataRecord``.

    Falhas de leitura e documentos não reconhecidos viram registros com
    ``status=error``. Apenas erros de senha sobem para o chamador, que decide
    pausar o lote.

    Args:
        classifier: Classificador com o modo do lote.
        reader: Estratégia de extração de texto. Se None, usa FileTypeStrategy.
                Permite injeção de dependência para testes (DIP).
    """

    def __init__(self, classifier: Classifier, reader: Optional[TextExtractionStrategy] = None):
        if reader is None:
            from strategies.fallback import FileTypeStrategy
            reader = FileTypeStrategy()
        self.classifier = classifier
        self.reader = reader

    def read_text(self, file_path: str, password: str = "") -> str:
        """
        Lê o texto do arquivo e colapsa sequências de três espaços.

        Raises:
            CredentialRequiredError: Documento protegido (ou senha recusada).
            ExtractionError: Falha na leitura.
        """
        raw_text = self.reader.extract(file_path, password)
        return _TRIPLE_SPACE_RE.sub(" ", raw_text or "")

    def process(self, file_path: str, password: str = "") -> ProcessedDocument:
        """
        Executa o pipeline de processamento para um único arquivo.

        Args:
            file_path (str): Caminho do arquivo.
            password (str): Senha a usar na leitura ("" se nenhuma).

        Returns:
            ProcessedDocument: Registro do documento + registros de metadados.

        Raises:
            CredentialRequiredError: Documento protegido; nada foi registrado.
        """
        file_name = os.path.basename(file_path)

        # 1. Leitura
        try:
            raw_text = self.read_text(file_path, password)
        except CredentialRequiredError:
            raise
        except Exception as e:
            logger.warning(f"Falha ao ler {file_name}: {e}")
            return ProcessedDocument(
                record=DocumentRecord(
                    file_name=file_name,
                    doc_type=FAILED_DOC_TYPE,
                    status=STATUS_ERROR,
                    message=str(e) or type(e).__name__,
                )
            )

        # 2 e 3. Classificação + extração
        try:
            classification = self.classifier.classify(raw_text)
        except UnrecognizedDocumentTypeError as e:
            logger.warning(f"{file_name}: {e}")
            return ProcessedDocument(
                record=DocumentRecord(
                    file_name=file_name,
                    doc_type=FAILED_DOC_TYPE,
                    raw_text=raw_text,
                    status=STATUS_ERROR,
                    message=UNRECOGNIZED_MESSAGE,
                )
            )
        except ExtractorException as e:
            logger.warning(f"{file_name}: erro na extração: {e}")
            return ProcessedDocument(
                record=DocumentRecord(
                    file_name=file_name,
                    doc_type=FAILED_DOC_TYPE,
                    raw_text=raw_text,
                    status=STATUS_ERROR,
                    message=str(e),
                )
            )
        except Exception as e:
            # Funções de extração próprias podem falhar com textos fora do layout esperado
            logger.warning(f"{file_name}: erro inesperado na extração: {e}")
            return ProcessedDocument(
                record=DocumentRecord(
                    file_name=file_name,
                    doc_type=FAILED_DOC_TYPE,
                    raw_text=raw_text,
                    status=STATUS_ERROR,
                    message=str(e) or type(e).__name__,
                )
            )

        # 4. Registro
        result = classification.result
        record = DocumentRecord(
            file_name=file_name,
            doc_type=classification.doc_type,
            metadata_fields=dict(result.metadata_fields),
            header_row=list(result.header_row),
            data_rows=[list(r) for r in result.data_rows],
            raw_text=raw_text,
            status=STATUS_SUCCESS,
        )
        metadata_records = [
            MetadataRecord(file_name=file_name, doc_type=classification.doc_type, fields=entry)
            for entry in classification.metadata_entries
            if entry
        ]

        logger.debug(
            f"{file_name}: {classification.doc_type} | {len(record.metadata_fields)} campo(s), "
            f"{len(record.data_rows)} linha(s)"
        )
        return ProcessedDocument(record=record, metadata_records=metadata_records)
