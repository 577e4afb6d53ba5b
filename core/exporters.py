"""
Módulo de exportação de dados extraídos.

Implementa o padrão Strategy para exportação, permitindo adicionar novos
formatos sem modificar código existente (OCP).

Duas visões são exportadas:
    - Tabela detalhada: por documento, uma linha "Source: arquivo (tipo)",
      as linhas de metadados, o cabeçalho e as linhas de dados. Com
      ``inline_metadata`` os metadados viram colunas extras de cada linha.
    - Tabelas consolidadas: uma por tipo de documento.
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from core.models import ConsolidatedTable, DocumentRecord

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^\w.-]+")


def detailed_rows(documents: Sequence[DocumentRecord], inline_metadata: bool = False) -> List[List[str]]:
    """
    Monta a tabela detalhada de todos os documentos (largura uniforme).

    Args:
        documents: Registros na ordem do lote.
        inline_metadata: Se True, metadados viram colunas ao lado das linhas de dados.
    """
    if not documents:
        return []

    max_table_cols = max(len(doc.header_row) for doc in documents)
    rows: List[List[str]] = []

    for doc in documents:
        extra_cols = list(doc.metadata_fields) if inline_metadata else []
        rows.append([f"Source: {doc.file_name} ({doc.doc_type})"])

        if not inline_metadata:
            for key, value in doc.metadata_fields.items():
                rows.append([key, value, *([""] * max(0, max_table_cols - 2))])

        if doc.header_row or extra_cols:
            rows.append([*doc.header_row, *extra_cols])
        for data_row in doc.data_rows:
            rows.append([*data_row, *(doc.metadata_fields.get(k, "") for k in extra_cols)])

    width = max(len(r) for r in rows)
    return [r + [""] * (width - len(r)) for r in rows]


def consolidated_rows(table: ConsolidatedTable) -> List[List[str]]:
    """Cabeçalho seguido das linhas de uma tabela consolidada."""
    return [list(table.header_row), *[list(r) for r in table.rows]]


def tsv_text(rows: Sequence[Sequence[str]]) -> str:
    """Texto separado por tabulação (formato de área de transferência)."""
    return "\n".join("\t".join(str(cell) for cell in row) for row in rows)


def safe_file_stem(name: str) -> str:
    """Nome de arquivo seguro a partir do tipo de documento."""
    return _UNSAFE_FILENAME_RE.sub("_", name).strip("_") or "documents"


class DataExporter(ABC):
    """
    Interface abstrata para exportadores de dados.

    Permite trocar a implementação de exportação sem afetar o código cliente,
    seguindo o Dependency Inversion Principle (DIP).
    """

    @abstractmethod
    def export(self, documents: Sequence[DocumentRecord], destination: str) -> None:
        """
        Exporta a tabela detalhada dos documentos para um destino.

        Args:
            documents: Registros de documentos do lote.
            destination: Caminho ou identificador do destino.
        """
        pass

    @abstractmethod
    def export_consolidated(self, tables: Sequence[ConsolidatedTable], destination_dir: str) -> List[Path]:
        """
        Exporta uma saída por tabela consolidada.

        Returns:
            List[Path]: Arquivos gerados.
        """
        pass


class CsvExporter(DataExporter):
    """
    Exportador para formato CSV usando pandas.

    Args:
        sep: Separador de colunas. Padrão: ``EXPORT_SEPARATOR`` das configurações.
        encoding: Padrão ``utf-8-sig`` (BOM para Excel no Windows).
        inline_metadata: Metadados como colunas na tabela detalhada.
    """

    def __init__(self, sep: Optional[str] = None, encoding: Optional[str] = None, inline_metadata: bool = False):
        if sep is None or encoding is None:
            from config.settings import EXPORT_ENCODING, EXPORT_SEPARATOR
            sep = sep if sep is not None else EXPORT_SEPARATOR
            encoding = encoding if encoding is not None else EXPORT_ENCODING
        self.sep = sep
        self.encoding = encoding
        self.inline_metadata = inline_metadata

    def _write(self, rows: List[List[str]], destination: Path, header: Optional[List[str]] = None) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame(rows, columns=header)
        df.to_csv(
            destination,
            index=False,
            header=header is not None,
            encoding=self.encoding,
            sep=self.sep,
        )

    def export(self, documents: Sequence[DocumentRecord], destination: str) -> None:
        """
        Exporta a tabela detalhada para um arquivo CSV.

        Raises:
            ValueError: Se a lista de documentos estiver vazia.
            OSError: Se houver erro ao salvar o arquivo.
        """
        if not documents:
            raise ValueError("Lista de documentos vazia. Nada para exportar.")

        rows = detailed_rows(documents, inline_metadata=self.inline_metadata)
        self._write(rows, Path(destination))
        logger.info(f"Tabela detalhada exportada: {destination} ({len(rows)} linha(s))")

    def export_consolidated(self, tables: Sequence[ConsolidatedTable], destination_dir: str) -> List[Path]:
        """Um CSV por tipo de documento (``consolidated_<tipo>.csv``)."""
        output_dir = Path(destination_dir)
        written = []
        for table in tables:
            path = output_dir / f"consolidated_{safe_file_stem(table.doc_type)}.csv"
            self._write([list(r) for r in table.rows], path, header=list(table.header_row))
            written.append(path)
            logger.info(f"Tabela consolidada '{table.doc_type}' exportada: {path}")
        return written
