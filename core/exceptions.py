class ExtractorException(Exception):
    """Exceção base para o projeto PDF Data Extractor."""
    pass

class InvalidPatternError(ExtractorException):
    """Levantada quando um padrão (regex) está vazio ou não compila.

    É a única falha tratada como erro local "duro": bloqueia a operação que a
    disparou (cadastro de parser, execução one-shot) sem efeitos colaterais.
    """
    pass

class InvalidParserDefinitionError(ExtractorException):
    """Levantada quando um parser não tem nome ou palavras-chave (matches)."""
    pass

class CredentialRequiredError(ExtractorException):
    """Levantada quando o documento é protegido e nenhuma senha foi informada."""
    pass

class CredentialIncorrectError(CredentialRequiredError):
    """Levantada quando a senha informada foi recusada pelo documento."""
    pass

class UnrecognizedDocumentTypeError(ExtractorException):
    """Levantada quando nenhum parser reconhece o texto do documento."""
    pass

class ExtractionError(ExtractorException):
    """Levantada quando falha a extração de texto de um arquivo."""
    pass

class BatchStateError(ExtractorException):
    """Levantada quando uma ação do operador não cabe no estado atual do lote."""
    pass
