from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Union

from web3_providers_http.events import ProviderEvent, ProviderEventListener
from web3_providers_http.types import RequestArguments

__all__ = ['Web3Provider']


class Web3Provider(ABC):
    """EIP-1193 provider contract."""

    @abstractmethod
    async def request(self, args: Union[RequestArguments, Mapping[str, Any]]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def on(self, event: Union[ProviderEvent, str], listener: ProviderEventListener) -> "Web3Provider":
        raise NotImplementedError

    @abstractmethod
    def supports_subscriptions(self) -> bool:
        raise NotImplementedError

    @staticmethod
    def request_arguments(args: Union[RequestArguments, Mapping[str, Any]]) -> RequestArguments:
        if isinstance(args, RequestArguments):
            return args
        return RequestArguments.model_validate(args)

    def create_request(self, args: RequestArguments) -> Dict[str, Any]:
        return {
            "jsonrpc": '2.0',
            "id":      1,
            **args.rpc_options,
            "method":  args.method,
            "params":  args.positional_params(),
        }
