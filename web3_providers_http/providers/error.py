from typing import Any, Dict, Optional


class Web3ProvidersHttpError(Exception):
    def __init__(self, message: str, params: Optional[Dict[str, Any]] = None):
        self.params = params or {}
        super().__init__(message)


class InvalidClientUrl(Web3ProvidersHttpError):
    pass


class NoClientInitialized(Web3ProvidersHttpError):
    pass


class ProviderConnectionError(Web3ProvidersHttpError):
    pass


class ChainIdRetrievalError(Web3ProvidersHttpError):
    pass


class ConnectToClientError(Web3ProvidersHttpError):
    pass
