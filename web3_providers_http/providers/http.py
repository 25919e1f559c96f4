import asyncio
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from web3_providers_http.events import (DISCONNECTED, EventEmitter, ProviderConnectInfo, ProviderEvent,
                                        ProviderEventListener, )
from web3_providers_http.logger import ProviderLogger
from web3_providers_http.network import Network
from web3_providers_http.providers import Web3Provider
from web3_providers_http.providers.error import (ChainIdRetrievalError, ConnectToClientError, InvalidClientUrl,
                                                 NoClientInitialized, ProviderConnectionError,
                                                 Web3ProvidersHttpError, )
from web3_providers_http.transport import ConnectionRefused, HttpTransport
from web3_providers_http.transport.http import HttpxTransport
from web3_providers_http.types import RequestArguments

__all__ = ['HttpProvider']

logger = logging.getLogger(__name__)

CLIENT_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

Endpoint = Union[str, Network]
TransportFactory = Callable[[str], HttpTransport]


class HttpProvider(Web3Provider):
    """
    EIP-1193 provider sending JSON-RPC requests to a node over HTTP(S).

    Connectivity is inferred from request outcomes. A successful ``eth_chainId``
    probe emits ``connect`` (and ``chainChanged`` once the chain id moves), and a
    refused connection while connected emits ``disconnect``. Construction and
    :meth:`set_client` only schedule the probe as a background task, so a freshly
    built provider is not necessarily connected. Without a running event loop
    the probe is deferred until the first successful request.

    ``connected`` and ``chain_id`` are updated without locking. Overlapping
    requests may finish in any order and the last one to finish wins.
    """

    def __init__(self, endpoint: Endpoint, transport_factory: TransportFactory = HttpxTransport):
        self._error_logger = ProviderLogger(logger)
        self._events = EventEmitter()
        self._transport_factory = transport_factory
        self._transport: Optional[HttpTransport] = None
        self._retired: List[HttpTransport] = []
        self._in_flight: Dict[HttpTransport, int] = {}
        self._network: Optional[Network] = None
        self._endpoint: Optional[str] = None
        self._chain_id: Optional[str] = None
        self._connected = False
        self._probes: Set[asyncio.Task] = set()
        self._closing: Set[asyncio.Task] = set()

        self._bind(endpoint)
        self._schedule_probe()

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def chain_id(self) -> Optional[str]:
        return self._chain_id

    def _validate_client_url(self, endpoint: Any):
        if isinstance(endpoint, str) and CLIENT_URL_RE.match(endpoint):
            return
        raise self._error_logger.make_error(InvalidClientUrl,
                                            "Provided endpoint is an invalid HTTP(S) URL",
                                            endpoint=endpoint)

    def _bind(self, endpoint: Endpoint):
        network = endpoint if isinstance(endpoint, Network) else None
        url = network.rpc_url if network is not None else endpoint
        self._validate_client_url(url)

        previous = self._transport
        self._transport = self._transport_factory(url)
        self._network = network
        self._endpoint = url
        if previous is not None:
            self._retire(previous)

    def _retire(self, transport: HttpTransport):
        # Closed by the last in-flight request on it, or right away when idle
        self._retired.append(transport)
        if self._in_flight.get(transport):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Nothing can be in flight without a loop, aclose() takes care of it
            return
        task = loop.create_task(self._close_retired(transport))
        self._closing.add(task)
        task.add_done_callback(self._closing_done)

    def _closing_done(self, task: asyncio.Task):
        self._closing.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Closing retired transport failed: %s", task.exception())

    async def _close_retired(self, transport: HttpTransport):
        if transport in self._retired:
            self._retired.remove(transport)
            await transport.aclose()

    def set_client(self, endpoint: Endpoint):
        """
        Rebind the provider to another endpoint and probe it in the background.

        ``connected`` keeps its value until the new probe or the next request
        reports an outcome.
        """
        try:
            self._bind(endpoint)
        except InvalidClientUrl as exc:
            raise InvalidClientUrl(f"Failed to set web3 client: {exc}", exc.params) from exc
        self._schedule_probe()

    def on(self, event: Union[ProviderEvent, str], listener: ProviderEventListener) -> "HttpProvider":
        self._events.on(event, listener)
        return self

    def remove_listener(self, event: Union[ProviderEvent, str], listener: ProviderEventListener) -> "HttpProvider":
        self._events.remove_listener(event, listener)
        return self

    def supports_subscriptions(self) -> bool:
        return False

    def _probing(self) -> bool:
        return any(not task.done() for task in self._probes)

    def _schedule_probe(self) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, %s will be probed on the first request", self._endpoint)
            return None
        task = loop.create_task(self._connect_to_client())
        self._probes.add(task)
        task.add_done_callback(self._probe_done)
        return task

    def _probe_done(self, task: asyncio.Task):
        self._probes.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Connectivity probe failed: %s", exc)

    async def wait_for_probes(self):
        """Wait for the background probes and transport closes, their failures are only logged."""
        await asyncio.gather(*self._probes, *self._closing, return_exceptions=True)

    async def _connect_to_client(self):
        try:
            chain_id = await self._get_chain_id()
        except ChainIdRetrievalError as exc:
            raise ConnectToClientError(f"Error connecting to client: {exc}") from exc

        self._events.emit(ProviderEvent.CONNECT, ProviderConnectInfo(chain_id))
        self._connected = True
        logger.info("Connected to %s, chain id %s", self._endpoint, chain_id)
        self._check_network(chain_id)

        # https://github.com/ethereum/EIPs/blob/master/EIPS/eip-1193.md#chainchanged-1
        if self._chain_id is not None and chain_id != self._chain_id:
            logger.info("Chain changed from %s to %s", self._chain_id, chain_id)
            self._events.emit(ProviderEvent.CHAIN_CHANGED, chain_id)
        self._chain_id = chain_id

    def _check_network(self, chain_id: str):
        if self._network is None or self._network.chain_id is None:
            return
        try:
            observed = int(chain_id, 16)
        except ValueError:
            observed = None
        if observed != self._network.chain_id:
            logger.warning("%s reports chain id %s, expected %s",
                           self._endpoint, chain_id, hex(self._network.chain_id))

    async def _get_chain_id(self) -> str:
        try:
            response = await self._request(RequestArguments(method="eth_chainId", params=[]), probe=True)
        except Web3ProvidersHttpError as exc:
            raise ChainIdRetrievalError(f"Error getting chain id: {exc}") from exc

        result = response.get("result") if isinstance(response, Mapping) else None
        if not isinstance(result, str):
            raise ChainIdRetrievalError(f"Error getting chain id: unexpected response {response!r}")
        return result

    async def request(self, args: Union[RequestArguments, Mapping[str, Any]]) -> Any:
        """
        Send one JSON-RPC request and return its unwrapped response.

        ``args`` is a :class:`RequestArguments` or a mapping with the same fields
        (``method``, ``params``, ``rpcOptions``, ``providerOptions``). Keyed params
        are sent as a list of their values. Any failure is raised as
        :class:`ProviderConnectionError`; nothing is retried.
        """
        return await self._request(self.request_arguments(args))

    async def _request(self, args: RequestArguments, probe: bool = False) -> Any:
        transport = self._transport
        if transport is None:
            raise self._error_logger.make_error(NoClientInitialized, "No HTTP client initialized")

        self._in_flight[transport] = self._in_flight.get(transport, 0) + 1
        try:
            response = await transport.post("", self.create_request(args), args.http_options())
        except Exception as exc:
            if isinstance(exc, ConnectionRefused) and self._connected:
                self._connected = False
                logger.info("Lost connection to %s", self._endpoint)
                self._events.emit(ProviderEvent.DISCONNECT, DISCONNECTED)
            raise ProviderConnectionError(str(exc)) from exc
        finally:
            self._in_flight[transport] -= 1
            if not self._in_flight[transport]:
                del self._in_flight[transport]
                await self._close_retired(transport)

        # https://github.com/ethereum/EIPs/blob/master/EIPS/eip-1193.md#connect-1
        if not self._connected and not probe and not self._probing():
            self._schedule_probe()

        return self._unwrap(response)

    @staticmethod
    def _unwrap(response: Any) -> Any:
        # Some upstreams nest the JSON-RPC payload under "data"
        if isinstance(response, Mapping) and "data" in response:
            return response["data"]
        return response

    async def aclose(self):
        probes = list(self._probes)
        for task in probes:
            task.cancel()
        await asyncio.gather(*probes, return_exceptions=True)
        await asyncio.gather(*self._closing, return_exceptions=True)

        transports = [t for t in [self._transport, *self._retired] if t is not None]
        self._transport = None
        self._retired = []
        for transport in transports:
            await transport.aclose()

    async def __aenter__(self) -> "HttpProvider":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
