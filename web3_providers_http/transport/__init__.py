from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class TransportError(Exception):
    pass


class ConnectionRefused(TransportError):
    pass


class ResponseError(TransportError):
    def __init__(self, code, text, *args):
        self.code = code
        self.text = text
        super().__init__(*args)

    def __str__(self):
        return f"Response error with code {self.code} \n {self.text}"


class HttpTransport(ABC):
    @abstractmethod
    async def post(self, path: str, body: Any, options: Optional[Dict[str, Any]] = None) -> Any:
        pass

    @abstractmethod
    async def aclose(self):
        pass
