from abc import ABC, abstractmethod
from typing import List, Dict, Any

class TextExtractionStrategy(ABC):
    """
    Contrato (Interface) para qualquer motor de leitura de arquivos.

    Define como as estratégias de leitura (PDF Nativo, texto puro, etc.) devem se comportar.
    O processador de lotes depende apenas deste contrato, nunca de uma biblioteca de PDF.
    """

    @abstractmethod
    def extract(self, file_path: str, password: str = "") -> str:
        """
        Extrai o texto bruto de um arquivo.

        Args:
            file_path (str): Caminho absoluto para o arquivo.
            password (str): Senha do documento (string vazia se não houver).

        Returns:
            str: O texto extraído do arquivo.

        Raises:
            CredentialRequiredError: Se o documento é protegido e nenhuma senha foi informada.
            CredentialIncorrectError: Se a senha informada foi recusada.
            ExtractionError: Se houver qualquer outra falha na leitura do arquivo.
        """
        pass


class ParserStore(ABC):
    """
    Contrato (Interface) para o repositório de parsers customizados.

    A lista inteira é lida uma vez na construção do registro e regravada
    como uma única unidade a cada alteração (sem escritas parciais).
    """

    @abstractmethod
    def load(self) -> List[Dict[str, Any]]:
        """
        Lê a lista persistida de parsers customizados.

        Returns:
            List[Dict[str, Any]]: Lista de dicionários contendo:
                - name (str): Nome do parser.
                - matches (List[str]): Palavras-chave de identificação.
                - metadata (str): Regex de metadados (pode ser vazio).
                - table (str): Regex de tabela (pode ser vazio).
        """
        pass

    @abstractmethod
    def save(self, parsers: List[Dict[str, Any]]) -> None:
        """
        Persiste a lista completa de parsers customizados.

        Args:
            parsers: Lista no mesmo formato retornado por ``load()``.
        """
        pass
