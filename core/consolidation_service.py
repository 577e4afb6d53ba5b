"""
Serviço de Consolidação de metadados.

Agrupa os registros de metadados do lote por tipo de documento e monta uma
tabela resumo por tipo:

    ["Source File", chave_1, chave_2, ...]

As chaves são a união das chaves de todos os documentos do tipo, na ordem
em que aparecem pela primeira vez. Um documento sem uma chave recebe "" na
coluna correspondente. As tabelas são recalculadas a cada leitura e a
entrada nunca é alterada.
"""
from typing import Dict, Iterable, List

import pandas as pd

from core.models import ConsolidatedTable, MetadataRecord

SOURCE_FILE_HEADER = "Source File"


def consolidate_metadata(records: Iterable[MetadataRecord]) -> List[ConsolidatedTable]:
    """
    Monta uma tabela resumo por tipo de documento.

    Returns:
        List[ConsolidatedTable]: Na ordem em que cada tipo apareceu pela primeira vez.
    """
    groups: Dict[str, List[MetadataRecord]] = {}
    for record in records:
        groups.setdefault(record.doc_type, []).append(record)

    tables = []
    for doc_type, members in groups.items():
        keys: Dict[str, None] = {}
        for member in members:
            for key in member.fields:
                keys.setdefault(key, None)

        header = [SOURCE_FILE_HEADER, *keys]
        rows = [
            [member.file_name, *(member.fields.get(key, "") for key in keys)]
            for member in members
        ]
        tables.append(ConsolidatedTable(doc_type=doc_type, header_row=header, rows=rows))

    return tables


class ConsolidationService:
    """
    Visão consolidada dos metadados de um lote.

    Usage:
        service = ConsolidationService(processor.metadata_records)
        for doc_type, df in service.to_dataframes().items():
            ...
    """

    def __init__(self, records: Iterable[MetadataRecord]):
        self.records = list(records)

    def tables(self) -> List[ConsolidatedTable]:
        return consolidate_metadata(self.records)

    def to_dataframes(self) -> Dict[str, pd.DataFrame]:
        """Uma DataFrame por tipo de documento (colunas = cabeçalho consolidado)."""
        return {
            table.doc_type: pd.DataFrame(table.rows, columns=table.header_row)
            for table in self.tables()
        }
