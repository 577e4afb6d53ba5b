"""
Script de Extração de Dados de PDFs (linha de comando).

Classifica cada arquivo pelo registro de parsers, extrai metadados e tabela,
e ao final mostra o resumo consolidado por tipo de documento.

Funcionalidades:
1.  Lote sequencial com pausa para senha (getpass); resposta vazia pula o arquivo.
2.  Modos de classificação: auto, parser forçado ou regex one-shot.
3.  Gestão dos parsers customizados (listar, importar, exportar, remover).
4.  Exportação CSV da tabela detalhada e das tabelas consolidadas.

Usage:
    python run_extraction.py extratos/ --export data/output
    python run_extraction.py guia.pdf --parser "GST Challan"
    python run_extraction.py extratos/ --parser one-shot --regex "A/C NO: (?<AccNo>\\d+)"
    python run_extraction.py --import-parsers meus_parsers.txt
"""

import argparse
import getpass
import sys
from pathlib import Path
from typing import Callable, List, Optional

from config import settings
from core.batch_processor import BatchProcessor
from core.batch_result import KIND_ERROR, STATE_AWAITING_CREDENTIAL
from core.classifier import ClassificationMode
from core.exceptions import ExtractorException, InvalidPatternError
from core.exporters import CsvExporter, consolidated_rows, tsv_text
from core.parser_store import JsonParserStore
from core.registry import ParserRegistry



def collect_files(paths: List[str]) -> List[str]:
    """Expande pastas (não recursivo, ordem alfabética) e mantém a ordem dos argumentos."""
    files: List[str] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(str(p) for p in sorted(path.iterdir()) if p.is_file())
        else:
            files.append(str(path))
    return files


def run_batch(
    processor: BatchProcessor,
    files: List[str],
    mode: ClassificationMode,
    prompt: Callable[[str], str] = getpass.getpass,
    reuse_password: bool = False,
) -> None:
    """
    Executa o lote e responde às pausas por senha.

    A cada pausa pergunta a senha; resposta vazia pula o arquivo. Com
    ``reuse_password`` a senha aceita vale para os arquivos seguintes.
    """
    processor.start(files, mode)

    while processor.state == STATE_AWAITING_CREDENTIAL:
        if processor.pending_error_message:
            print(f"  ❌ {processor.pending_error_message}")
        answer = prompt(f"🔒 Senha para {processor.pending_file_name} (vazio para pular): ")
        if not answer:
            print(f"  ⏭️ Pulando {processor.pending_file_name}")
            processor.skip()
        else:
            processor.submit_credential(answer, use_for_subsequent=reuse_password)


def print_results(processor: BatchProcessor) -> None:
    """Imprime o resultado por arquivo e as tabelas consolidadas."""
    for doc in processor.documents:
        if doc.is_success:
            print(f"  ✅ {doc.file_name}: {doc.doc_type} "
                  f"({len(doc.metadata_fields)} campo(s), {len(doc.data_rows)} linha(s))")
        elif doc.status == "skipped":
            print(f"  ⏭️ {doc.file_name}: {doc.message}")
        else:
            print(f"  ⚠️ {doc.file_name}: {doc.message}")

    for table in processor.consolidated_tables():
        print("\n" + "=" * 60)
        print(f"📊 {table.doc_type}")
        print("=" * 60)
        print(tsv_text(consolidated_rows(table)))

    status = processor.status
    icon = {"success": "✅", "info": "ℹ️", "error": "❌"}.get(status.kind, "")
    if status.message:
        print(f"\n{icon} {status.message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extrai metadados e tabelas de documentos (guias e extratos) por regras de regex'
    )
    parser.add_argument('paths', nargs='*', help='Arquivos ou pastas a processar')
    parser.add_argument(
        '--parser',
        type=str,
        default='auto',
        help='auto | <nome do parser> | one-shot (default: auto)'
    )
    parser.add_argument('--regex', type=str, default='', help='Regex do modo one-shot')
    parser.add_argument(
        '--global',
        dest='is_global',
        action='store_true',
        help='One-shot: aplica a regex em todas as ocorrências (uma linha por ocorrência)'
    )
    parser.add_argument('--reuse-password', action='store_true', help='Usa a senha aceita nos arquivos seguintes')
    parser.add_argument(
        '--export',
        nargs='?',
        const=str(settings.OUTPUT_DIR),
        default=None,
        help='Pasta para salvar os CSVs (sem valor: OUTPUT_DIR do .env)'
    )
    parser.add_argument('--inline-metadata', action='store_true', help='Metadados como colunas na tabela detalhada')
    parser.add_argument('--parsers-file', type=str, default=None, help='Arquivo JSON dos parsers customizados')
    parser.add_argument('--list-parsers', action='store_true', help='Lista os parsers na ordem de avaliação')
    parser.add_argument('--add-parser', type=str, default=None, metavar='FILE', help='Adiciona/atualiza um parser (bloco name:..;;)')
    parser.add_argument('--import-parsers', type=str, default=None, metavar='FILE', help='Substitui todos os parsers customizados')
    parser.add_argument('--export-parsers', action='store_true', help='Imprime os parsers customizados no formato de blocos')
    parser.add_argument('--remove-parser', type=int, default=None, metavar='INDEX', help='Remove o parser customizado no índice')
    parser.add_argument('--log-level', type=str, default=None, help='Nível de log (default: LOG_LEVEL do .env)')
    return parser


def manage_parsers(args: argparse.Namespace, registry: ParserRegistry) -> bool:
    """Executa as ações de gestão de parsers. Retorna True se alguma foi executada."""
    acted = False

    if args.add_parser:
        block = Path(args.add_parser).read_text(encoding='utf-8')
        outcome = registry.upsert_from_text(block)
        print(f"✅ Parser {'adicionado' if outcome == 'added' else 'atualizado'}")
        acted = True

    if args.import_parsers:
        blob = Path(args.import_parsers).read_text(encoding='utf-8')
        imported = registry.replace_all_from_text(blob)
        print(f"📥 {len(imported)} parser(s) customizado(s) importado(s)")
        acted = True

    if args.remove_parser is not None:
        removed = registry.remove(args.remove_parser)
        print(f"🗑️ Parser removido: {removed.name}")
        acted = True

    if args.export_parsers:
        print(registry.export_text())
        acted = True

    if args.list_parsers:
        for i, definition in enumerate(registry.custom_parsers):
            print(f"  [{i}] {definition.display_name}")
        for definition in registry.built_in_parsers:
            print(f"      {definition.display_name}")
        acted = True

    return acted


def main(argv: Optional[List[str]] = None, prompt: Callable[[str], str] = getpass.getpass) -> int:
    """Função principal."""
    args = build_parser().parse_args(argv)
    settings.configure_logging(level=args.log_level)

    store = JsonParserStore(args.parsers_file) if args.parsers_file else JsonParserStore()
    registry = ParserRegistry(store)

    try:
        acted = manage_parsers(args, registry)
    except (ExtractorException, IndexError, OSError) as e:
        print(f"❌ Erro: {e}")
        return 1

    if not args.paths:
        if not acted:
            print("❌ Informe arquivos/pastas ou uma ação de parsers (--help)")
            return 1
        return 0

    try:
        mode = ClassificationMode.parse(args.parser, args.regex, args.is_global)
    except InvalidPatternError as e:
        print(f"❌ {e}")
        return 1

    files = collect_files(args.paths)
    print(f"📦 {len(files)} arquivo(s) encontrado(s). Iniciando processamento (modo: {mode.label})...")

    processor = BatchProcessor(registry=registry)
    run_batch(processor, files, mode, prompt=prompt, reuse_password=args.reuse_password)

    if not processor.documents:
        print("📭 Nenhum arquivo suportado encontrado.")
        return 0

    print_results(processor)

    if args.export:
        exporter = CsvExporter(inline_metadata=args.inline_metadata)
        output_dir = Path(args.export)
        details = output_dir / "detailed_extraction.csv"
        exporter.export(processor.documents, str(details))
        print(f"\n📄 Tabela detalhada -> {details}")
        for path in exporter.export_consolidated(processor.consolidated_tables(), str(output_dir)):
            print(f"📊 Consolidado -> {path}")

    return 1 if processor.status.kind == KIND_ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
