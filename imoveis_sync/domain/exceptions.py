"""
Exceções do domínio de sincronização de imóveis.

- FetchError / ParseError abortam a rodada inteira (não há snapshot).
- StoreError afeta apenas o imóvel da operação; a sincronização segue.
"""

from typing import Optional


class ImoveisSyncError(Exception):
    """Base de todas as falhas da sincronização."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class FetchError(ImoveisSyncError):
    """Falha de rede, timeout ou resposta vazia ao buscar o feed."""


class ParseError(ImoveisSyncError):
    """Payload XML malformado ou fora do formato Carga/Imoveis."""


class StoreError(ImoveisSyncError):
    """Falha de conexão ou de constraint em uma operação de um único imóvel."""

    def __init__(self, message: str, code: str = "", cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.code = code
