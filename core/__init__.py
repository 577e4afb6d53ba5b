"""
Core module for document classification and data extraction.

This module provides the main classes and interfaces for:
- Parser definitions and the parser registry (built-in + custom)
- Classification (auto, forced, one-shot) and the default extractor
- Sequential batch processing with password pause/resume/skip
- Consolidation of metadata by document type and export

SOLID Principles applied:
- SRP: Each module has a single responsibility
- OCP: Extensible via the parser registry and per-parser extraction functions
- DIP: Depends on abstractions (TextExtractionStrategy, ParserStore)
"""

from .batch_processor import BatchProcessor, filter_supported_files
from .batch_result import BatchContext, BatchStatus, PendingCredential
from .classifier import ClassificationMode, Classifier, normalize_for_matching
from .consolidation_service import ConsolidationService, consolidate_metadata
from .exceptions import (
    BatchStateError,
    CredentialIncorrectError,
    CredentialRequiredError,
    ExtractionError,
    ExtractorException,
    InvalidParserDefinitionError,
    InvalidPatternError,
    UnrecognizedDocumentTypeError,
)
from .exporters import CsvExporter, DataExporter, detailed_rows, tsv_text
from .extractors import CANONICAL_WIDTH, general_document_parser
from .interfaces import ParserStore, TextExtractionStrategy
from .models import (
    ConsolidatedTable,
    DocumentRecord,
    ExtractionResult,
    MetadataRecord,
    ParserDefinition,
)
from .parser_store import InMemoryParserStore, JsonParserStore
from .processor import DocumentProcessor
from .registry import ParserRegistry, register_parser

__all__ = [
    # Models
    "ParserDefinition",
    "ExtractionResult",
    "DocumentRecord",
    "MetadataRecord",
    "ConsolidatedTable",
    # Interfaces
    "TextExtractionStrategy",
    "ParserStore",
    # Registry
    "ParserRegistry",
    "register_parser",
    "JsonParserStore",
    "InMemoryParserStore",
    # Extraction
    "CANONICAL_WIDTH",
    "general_document_parser",
    "ClassificationMode",
    "Classifier",
    "normalize_for_matching",
    # Processors
    "DocumentProcessor",
    "BatchProcessor",
    "filter_supported_files",
    # Results
    "BatchContext",
    "BatchStatus",
    "PendingCredential",
    # Services
    "ConsolidationService",
    "consolidate_metadata",
    "DataExporter",
    "CsvExporter",
    "detailed_rows",
    "tsv_text",
    # Exceptions
    "ExtractorException",
    "InvalidPatternError",
    "InvalidParserDefinitionError",
    "CredentialRequiredError",
    "CredentialIncorrectError",
    "UnrecognizedDocumentTypeError",
    "ExtractionError",
    "BatchStateError",
]
