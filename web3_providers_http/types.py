from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = ['ChainId', 'Params', 'ProviderOptions', 'RequestArguments', 'to_camel']

Params = Union[List[Any], Dict[str, Any], None]


def to_camel(string: str) -> str:
    first, *others = string.split('_')
    return ''.join([first.lower(), *map(str.title, others)])


class ChainId(IntEnum):
    MAINNET = 1
    GOERLI = 5
    SEPOLIA = 11155111
    GANACHE = 1337
    HARDHAT = 31337


class ProviderOptions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Keyword arguments forwarded to the transport call, e.g. headers or timeout
    http_options: Dict[str, Any] = Field(default_factory=dict)


class RequestArguments(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    method: str
    params: Params = None
    rpc_options: Dict[str, Any] = Field(default_factory=dict)
    provider_options: Optional[ProviderOptions] = None

    def positional_params(self) -> List[Any]:
        """
        Params as an ordered sequence.

        A keyed mapping is reduced to its values in insertion order, so the keys
        are lost and the result depends on the order the mapping was built in.
        """
        if self.params is None:
            return []
        if isinstance(self.params, dict):
            return list(self.params.values())
        return self.params

    def http_options(self) -> Dict[str, Any]:
        if self.provider_options is None:
            return {}
        return self.provider_options.http_options
