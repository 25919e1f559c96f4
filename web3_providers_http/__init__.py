from .events import ProviderConnectInfo, ProviderEvent, ProviderMessage, ProviderRpcError
from .network import Network
from .providers.error import (ChainIdRetrievalError, ConnectToClientError, InvalidClientUrl, NoClientInitialized,
                              ProviderConnectionError, Web3ProvidersHttpError, )
from .providers.http import HttpProvider
from .transport.http import HttpxTransport
from .types import ChainId, ProviderOptions, RequestArguments
