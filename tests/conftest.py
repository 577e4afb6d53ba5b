"""
Fixtures compartilhadas: registro de parsers em memória (sem arquivo JSON).
"""
import pytest

from core.parser_store import InMemoryParserStore
from core.registry import ParserRegistry
from parser_samples import ALPHA, BETA


@pytest.fixture
def store():
    return InMemoryParserStore()


@pytest.fixture
def registry(store):
    return ParserRegistry(store, built_ins=[ALPHA, BETA])
