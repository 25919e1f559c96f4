import os
from dataclasses import dataclass
from typing import Optional

from web3_providers_http.types import ChainId

ENV_RPC_URL = "WEB3_HTTP_PROVIDER_URI"
ENV_CHAIN_ID = "WEB3_CHAIN_ID"


@dataclass
class Network:
    rpc_url: str
    chain_id: Optional[int] = None

    @classmethod
    def from_env(cls) -> "Network":
        rpc_url = os.environ.get(ENV_RPC_URL)
        if not rpc_url:
            raise KeyError(f"{ENV_RPC_URL} is not set")
        chain_id = os.environ.get(ENV_CHAIN_ID)
        if chain_id:
            return cls(rpc_url=rpc_url, chain_id=int(chain_id, 0))
        return cls(rpc_url=rpc_url)


localhost = Network(rpc_url="http://localhost:8545", chain_id=ChainId.GANACHE)
hardhat = Network(rpc_url="http://127.0.0.1:8545", chain_id=ChainId.HARDHAT)
