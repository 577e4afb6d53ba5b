import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from dotenv import load_dotenv

# Carrega as variáveis do arquivo .env para o ambiente
load_dotenv()

# Caminhos Base
BASE_DIR = Path(__file__).resolve().parent.parent
OUTPUT_DIR = Path(os.getenv('OUTPUT_DIR', BASE_DIR / "data" / "output"))

# --- Parsers customizados (persistidos pelo operador) ---
# Um único arquivo JSON com uma única chave contendo a lista inteira.
CUSTOM_PARSERS_FILE = Path(os.getenv('CUSTOM_PARSERS_FILE', BASE_DIR / "data" / "custom_parsers.json"))
CUSTOM_PARSERS_KEY = os.getenv('CUSTOM_PARSERS_KEY', 'dataExtractorCustomParsers')

# --- Lote ---
# Extensões aceitas pelo leitor de texto; demais arquivos são descartados antes do lote começar
SUPPORTED_EXTENSIONS = {
    ext.strip().lower()
    for ext in os.getenv('SUPPORTED_EXTENSIONS', '.pdf,.txt').split(',')
    if ext.strip()
}

# --- Exportação ---
EXPORT_SEPARATOR = os.getenv('EXPORT_SEPARATOR', ',')
EXPORT_ENCODING = 'utf-8-sig'  # BOM para Excel no Windows

# --- Logging com Rotação ---
LOG_DIR = Path(os.getenv('LOG_DIR', BASE_DIR / "logs"))
LOG_FILE = LOG_DIR / "extractor.log"
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: str = None, log_file: Path = None) -> logging.Logger:
    """
    Configura o logger raiz com rotação de arquivo e saída no console.

    Chamado pelos pontos de entrada (CLI); módulos de biblioteca apenas usam
    ``logging.getLogger(__name__)``.

    Args:
        level: Nível de log (default: LOG_LEVEL do ambiente).
        log_file: Caminho do arquivo de log (default: LOG_FILE).

    Returns:
        logging.Logger: O logger raiz configurado.
    """
    log_file = Path(log_file or LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    # Evita handlers duplicados quando chamado mais de uma vez
    for handler in list(root.handlers):
        if getattr(handler, '_extractor_handler', False):
            root.removeHandler(handler)
            handler.close()

    log_formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    # Handler com rotação: 10MB por arquivo, mantém 5 backups
    rotating_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    rotating_handler.setFormatter(log_formatter)
    rotating_handler._extractor_handler = True
    root.addHandler(rotating_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler._extractor_handler = True
    root.addHandler(console_handler)

    return root
