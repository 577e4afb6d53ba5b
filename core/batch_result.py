"""
Estado de um lote de extração.

``BatchContext`` guarda tudo o que o ``BatchProcessor`` acumula durante um
lote: arquivos, índice atual, registros de documentos e de metadados,
contador de sucessos, senha salva e (só enquanto pausado) a senha pendente.
É criado no início do lote e descartado no início do próximo.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from core.classifier import ClassificationMode
from core.models import DocumentRecord, MetadataRecord

# Estados do processador de lotes
STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_AWAITING_CREDENTIAL = "awaiting_credential"
STATE_DONE = "done"

# Tipos de status exibidos ao operador
KIND_INFO = "info"
KIND_SUCCESS = "success"
KIND_ERROR = "error"


@dataclass(frozen=True)
class BatchStatus:
    """Mensagem de status do lote (``kind``: info, success ou error)."""
    message: str = ""
    kind: str = ""

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind}


@dataclass
class PendingCredential:
    """
    Arquivo aguardando senha.

    Attributes:
        file_name: Nome exibido ao operador.
        file: Caminho do arquivo a reprocessar.
        error_message: Mensagem da última tentativa (vazia na primeira pausa).
    """
    file_name: str
    file: str
    error_message: str = ""


@dataclass
class BatchContext:
    """
    Contexto mutável de um lote (pertence só ao BatchProcessor).

    Attributes:
        files: Arquivos do lote, na ordem de processamento.
        mode: Modo de classificação escolhido.
        current_index: Índice do próximo arquivo a processar.
        documents: Um registro por arquivo já finalizado (ordem dos arquivos).
        metadata_records: Registros de metadados acumulados.
        success_count: Arquivos processados com sucesso.
        saved_credential: Senha reutilizada nos arquivos seguintes ("" se nenhuma).
        pending: Senha pendente (só enquanto o lote está pausado).
    """
    files: List[str] = field(default_factory=list)
    mode: ClassificationMode = field(default_factory=ClassificationMode.auto)
    current_index: int = 0
    documents: List[DocumentRecord] = field(default_factory=list)
    metadata_records: List[MetadataRecord] = field(default_factory=list)
    success_count: int = 0
    saved_credential: str = ""
    pending: Optional[PendingCredential] = None

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def is_exhausted(self) -> bool:
        return self.current_index >= len(self.files)

    @property
    def current_file(self) -> Optional[str]:
        if self.is_exhausted:
            return None
        return self.files[self.current_index]
