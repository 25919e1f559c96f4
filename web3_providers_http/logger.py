import logging
from typing import Any, Optional, Type, TypeVar

from web3_providers_http.providers.error import Web3ProvidersHttpError

E = TypeVar("E", bound=Web3ProvidersHttpError)


class ProviderLogger:
    """Builds typed provider errors and records them on a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def make_error(self, error_cls: Type[E], msg: str, **params: Any) -> E:
        error = error_cls(msg, params)
        self.logger.debug("%s: %s %r", error_cls.__name__, msg, params)
        return error
