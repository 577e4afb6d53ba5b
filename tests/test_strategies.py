"""
Testes para as estratégias de leitura de texto.

Testa:
    - NativePdfStrategy: leitura de todas as páginas e erros de senha
    - PlainTextStrategy: dumps de texto
    - FileTypeStrategy: escolha do leitor pela extensão
"""

import unittest
from unittest.mock import MagicMock, patch

from pdfminer.pdfdocument import PDFPasswordIncorrect
from pdfplumber.utils.exceptions import PdfminerException

from core.exceptions import CredentialIncorrectError, CredentialRequiredError, ExtractionError
from strategies.fallback import FileTypeStrategy
from strategies.native import NativePdfStrategy, is_password_error
from strategies.plain_text import PlainTextStrategy


def _fake_pdf(*page_texts):
    pdf = MagicMock()
    pages = []
    for text in page_texts:
        page = MagicMock()
        page.extract_text.return_value = text
        pages.append(page)
    pdf.pages = pages
    return pdf


class TestNativePdfStrategy(unittest.TestCase):
    """Testes para a leitura nativa de PDFs."""

    def setUp(self):
        self.strategy = NativePdfStrategy()

    @patch("strategies.native.pdfplumber.open")
    def test_extract_joins_all_pages(self, mock_pdf_open):
        """Quebras de linha viram espaço e as páginas são unidas por espaço."""
        mock_pdf_open.return_value.__enter__.return_value = _fake_pdf(
            "STATEMENT OF ACCOUNT\nA/C NO: 123",
            "01/04/2023 NEFT\r\n50,000.00",
        )

        text = self.strategy.extract("caminho/falso.pdf")

        self.assertEqual(text, "STATEMENT OF ACCOUNT A/C NO: 123 01/04/2023 NEFT 50,000.00 ")
        mock_pdf_open.assert_called_once_with("caminho/falso.pdf", password=None)

    @patch("strategies.native.pdfplumber.open")
    def test_page_without_text_layer(self, mock_pdf_open):
        mock_pdf_open.return_value.__enter__.return_value = _fake_pdf(None, "Página 2")
        self.assertEqual(self.strategy.extract("scan.pdf"), " Página 2 ")

    @patch("strategies.native.pdfplumber.open")
    def test_password_is_forwarded(self, mock_pdf_open):
        mock_pdf_open.return_value.__enter__.return_value = _fake_pdf("conteúdo")
        self.strategy.extract("protegido.pdf", password="secret")
        mock_pdf_open.assert_called_once_with("protegido.pdf", password="secret")

    @patch("strategies.native.pdfplumber.open")
    def test_protected_without_password_requires_credential(self, mock_pdf_open):
        mock_pdf_open.side_effect = PdfminerException(PDFPasswordIncorrect())

        with self.assertRaises(CredentialRequiredError) as ctx:
            self.strategy.extract("protegido.pdf")

        self.assertNotIsInstance(ctx.exception, CredentialIncorrectError)
        self.assertEqual(str(ctx.exception), "Password required or incorrect.")

    @patch("strategies.native.pdfplumber.open")
    def test_wrong_password_is_incorrect_credential(self, mock_pdf_open):
        mock_pdf_open.side_effect = PdfminerException(PDFPasswordIncorrect())

        with self.assertRaises(CredentialIncorrectError):
            self.strategy.extract("protegido.pdf", password="errada")

    @patch("strategies.native.pdfplumber.open")
    def test_corrupted_file_is_extraction_error(self, mock_pdf_open):
        mock_pdf_open.side_effect = Exception("Arquivo corrompido")

        with self.assertRaises(ExtractionError) as ctx:
            self.strategy.extract("arquivo_ruim.pdf")
        self.assertIn("Arquivo corrompido", str(ctx.exception))

    @patch("strategies.native.pdfplumber.open")
    def test_missing_file_is_extraction_error(self, mock_pdf_open):
        mock_pdf_open.side_effect = FileNotFoundError("nao_existe.pdf")

        with self.assertRaises(ExtractionError):
            self.strategy.extract("nao_existe.pdf")


class TestPasswordErrorDetection(unittest.TestCase):

    def test_wrapped_pdfminer_error(self):
        self.assertTrue(is_password_error(PdfminerException(PDFPasswordIncorrect())))

    def test_message_hints(self):
        self.assertTrue(is_password_error(Exception("File is password protected")))
        self.assertTrue(is_password_error(ValueError("Unsupported encryption")))

    def test_unrelated_error(self):
        self.assertFalse(is_password_error(Exception("Arquivo corrompido")))


class TestPlainTextStrategy:

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_text("GOODS AND SERVICES TAX ₹ 100", encoding="utf-8")
        assert PlainTextStrategy().extract(str(path)) == "GOODS AND SERVICES TAX ₹ 100"

    def test_falls_back_to_latin1(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_bytes("Descrição".encode("latin-1"))
        assert PlainTextStrategy().extract(str(path), password="ignored") == "Descrição"

    def test_missing_file(self, tmp_path):
        try:
            PlainTextStrategy().extract(str(tmp_path / "missing.txt"))
        except ExtractionError as e:
            assert "missing.txt" in str(e)
        else:
            raise AssertionError("ExtractionError não levantado")


class TestFileTypeStrategy(unittest.TestCase):

    def setUp(self):
        self.pdf_reader = MagicMock()
        self.pdf_reader.extract.return_value = "pdf text"
        self.txt_reader = MagicMock()
        self.txt_reader.extract.return_value = "txt text"
        self.strategy = FileTypeStrategy({'.pdf': self.pdf_reader, '.txt': self.txt_reader})

    def test_dispatches_by_suffix(self):
        self.assertEqual(self.strategy.extract("a/EXTRATO.PDF", "secret"), "pdf text")
        self.pdf_reader.extract.assert_called_once_with("a/EXTRATO.PDF", "secret")
        self.assertEqual(self.strategy.extract("dump.txt"), "txt text")

    def test_credential_errors_propagate(self):
        self.pdf_reader.extract.side_effect = CredentialRequiredError("Password required or incorrect.")
        with self.assertRaises(CredentialRequiredError):
            self.strategy.extract("protegido.pdf")

    def test_unsupported_suffix(self):
        with self.assertRaises(ExtractionError):
            self.strategy.extract("planilha.xlsx")

    def test_default_strategies(self):
        strategy = FileTypeStrategy()
        self.assertIsInstance(strategy.strategies['.pdf'], NativePdfStrategy)
        self.assertIsInstance(strategy.strategies['.txt'], PlainTextStrategy)
