"""
Processador de Lotes (Batch Processor).

Máquina de estados que percorre uma lista de arquivos, um por vez:

    idle -> running -> running (próximo arquivo)
                    -> awaiting_credential (documento protegido)
                    -> done (fim da lista)

Em ``awaiting_credential`` o lote fica parado, sem prazo, até o operador
chamar ``submit_credential()`` (retoma NO MESMO arquivo) ou ``skip()``
(registra o arquivo como pulado e segue para o próximo).

Garantias:
- Exatamente um ``DocumentRecord`` por arquivo, na ordem da lista.
- Nenhum arquivo começa antes do anterior terminar (success, error ou skipped).
- Falhas de leitura e documentos não reconhecidos nunca interrompem o lote.
"""
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from core.batch_result import (
    KIND_ERROR,
    KIND_INFO,
    KIND_SUCCESS,
    STATE_AWAITING_CREDENTIAL,
    STATE_DONE,
    STATE_IDLE,
    STATE_RUNNING,
    BatchContext,
    BatchStatus,
    PendingCredential,
)
from core.classifier import ClassificationMode, Classifier
from core.consolidation_service import consolidate_metadata
from core.exceptions import BatchStateError, CredentialRequiredError
from core.interfaces import TextExtractionStrategy
from core.models import ConsolidatedTable, DocumentRecord, MetadataRecord
from core.processor import DocumentProcessor, ProcessedDocument, skipped_document
from core.registry import ParserRegistry

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "Processed files but found no recognized data."
EMPTY_CREDENTIAL_MESSAGE = "Please enter a password."
INCORRECT_CREDENTIAL_MESSAGE = "Incorrect password. Please try again."


def filter_supported_files(
    files: Iterable[Union[str, Path]],
    extensions: Optional[Sequence[str]] = None,
) -> List[str]:
    """Mantém só os arquivos com extensão suportada (ordem preservada)."""
    if extensions is None:
        from config.settings import SUPPORTED_EXTENSIONS
        extensions = SUPPORTED_EXTENSIONS
    allowed = {e.lower() for e in extensions}
    return [str(f) for f in files if Path(f).suffix.lower() in allowed]


class BatchProcessor:
    """
    Orquestra o processamento sequencial de um lote.

    Args:
        registry: Registro de parsers. Se None, usa um registro só com built-ins.
        reader: Estratégia de extração de texto (DIP). Se None, usa FileTypeStrategy.
        supported_extensions: Extensões aceitas no início do lote.
    """

    def __init__(
        self,
        registry: Optional[ParserRegistry] = None,
        reader: Optional[TextExtractionStrategy] = None,
        supported_extensions: Optional[Sequence[str]] = None,
    ):
        self.registry = registry or ParserRegistry()
        self.reader = reader
        self.supported_extensions = supported_extensions
        self._context = BatchContext()
        self._processor: Optional[DocumentProcessor] = None
        self._state = STATE_IDLE
        self._status = BatchStatus()

    # --- Leitura de estado -------------------------------------------------

    @property
    def state(self) -> str:
        return self._state

    @property
    def status(self) -> BatchStatus:
        return self._status

    @property
    def documents(self) -> List[DocumentRecord]:
        return list(self._context.documents)

    @property
    def metadata_records(self) -> List[MetadataRecord]:
        return list(self._context.metadata_records)

    @property
    def success_count(self) -> int:
        return self._context.success_count

    @property
    def pending_file_name(self) -> Optional[str]:
        pending = self._context.pending
        return pending.file_name if pending else None

    @property
    def pending_error_message(self) -> str:
        pending = self._context.pending
        return pending.error_message if pending else ""

    def consolidated_tables(self) -> List[ConsolidatedTable]:
        """Tabelas resumo, recalculadas a cada chamada."""
        return consolidate_metadata(self._context.metadata_records)

    # --- Ações do operador -------------------------------------------------

    def start(
        self,
        files: Iterable[Union[str, Path]],
        mode: Optional[ClassificationMode] = None,
    ) -> BatchStatus:
        """
        Inicia um novo lote, descartando todo o contexto anterior.

        Args:
            files: Arquivos na ordem de processamento (não suportados são ignorados).
            mode: Modo de classificação. Padrão: auto.

        Returns:
            BatchStatus: Status ao parar (fim do lote ou pausa por senha).
        """
        mode = mode or ClassificationMode.auto()
        accepted = filter_supported_files(files, self.supported_extensions)

        self._context = BatchContext()
        if not accepted:
            self._processor = None
            self._state = STATE_IDLE
            self._status = BatchStatus()
            logger.info("Nenhum arquivo suportado no lote")
            return self._status

        self._context = BatchContext(files=accepted, mode=mode)
        self._processor = DocumentProcessor(Classifier(self.registry, mode), reader=self.reader)
        self._state = STATE_RUNNING
        logger.info(f"Iniciando lote de {len(accepted)} arquivo(s) (modo: {mode.label})")
        return self._run()

    def submit_credential(self, credential: str, use_for_subsequent: bool = False) -> BatchStatus:
        """
        Reprocessa o arquivo pendente com a senha informada.

        Senha vazia é recusada (o lote continua pausado). Senha recusada pelo
        documento mantém a pausa com mensagem de erro. Com
        ``use_for_subsequent`` a senha passa a ser usada nos arquivos seguintes.

        Raises:
            BatchStateError: Se o lote não está aguardando senha.
        """
        pending = self._require_pending()

        if not credential:
            self._status = BatchStatus(EMPTY_CREDENTIAL_MESSAGE, KIND_ERROR)
            return self._status

        self._context.saved_credential = credential if use_for_subsequent else ""

        try:
            processed = self._processor.process(pending.file, credential)
        except CredentialRequiredError:
            logger.warning(f"Senha recusada para {pending.file_name}")
            pending.error_message = INCORRECT_CREDENTIAL_MESSAGE
            self._status = BatchStatus(INCORRECT_CREDENTIAL_MESSAGE, KIND_ERROR)
            return self._status

        self._context.pending = None
        self._record(processed)
        self._context.current_index += 1
        self._state = STATE_RUNNING
        return self._run()

    def skip(self) -> BatchStatus:
        """
        Pula o arquivo pendente (registro ``skipped``) e segue o lote.

        Raises:
            BatchStateError: Se o lote não está aguardando senha.
        """
        pending = self._require_pending()
        logger.info(f"Arquivo pulado pelo operador: {pending.file_name}")

        self._context.pending = None
        self._record(skipped_document(pending.file))
        self._context.current_index += 1
        self._state = STATE_RUNNING
        return self._run()

    # --- Internos -----------------------------------------------------------

    def _require_pending(self) -> PendingCredential:
        if self._state != STATE_AWAITING_CREDENTIAL or self._context.pending is None:
            raise BatchStateError(f"No file is awaiting a password (state: {self._state})")
        return self._context.pending

    def _record(self, processed: ProcessedDocument) -> None:
        self._context.documents.append(processed.record)
        self._context.metadata_records.extend(processed.metadata_records)
        if processed.record.is_success:
            self._context.success_count += 1

    def _run(self) -> BatchStatus:
        ctx = self._context
        while not ctx.is_exhausted:
            file_path = ctx.current_file
            file_name = os.path.basename(file_path)
            self._status = BatchStatus(
                f"Processing {ctx.current_index + 1} of {ctx.total_files}: {file_name}...",
                KIND_INFO,
            )
            logger.info(f"[{ctx.current_index + 1}/{ctx.total_files}] {file_name}")

            try:
                processed = self._processor.process(file_path, ctx.saved_credential)
            except CredentialRequiredError as e:
                logger.info(f"{file_name} protegido por senha: aguardando operador ({e})")
                ctx.pending = PendingCredential(file_name=file_name, file=file_path)
                self._state = STATE_AWAITING_CREDENTIAL
                return self._status

            self._record(processed)
            ctx.current_index += 1

        return self._finalize()

    def _finalize(self) -> BatchStatus:
        ctx = self._context
        self._state = STATE_DONE
        if not ctx.documents and not ctx.metadata_records:
            self._status = BatchStatus(NO_DATA_MESSAGE, KIND_INFO)
        else:
            self._status = BatchStatus(
                f"Successfully processed {ctx.success_count} of {ctx.total_files} files!",
                KIND_SUCCESS,
            )
        logger.info(
            f"Lote finalizado: {ctx.success_count}/{ctx.total_files} com sucesso, "
            f"{len(ctx.metadata_records)} registro(s) de metadados"
        )
        return self._status
