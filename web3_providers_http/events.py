import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

__all__ = ['ProviderEvent', 'ProviderConnectInfo', 'ProviderRpcError', 'ProviderMessage',
           'EventPayload', 'ProviderEventListener', 'EventEmitter', 'DISCONNECTED']

logger = logging.getLogger(__name__)


class ProviderEvent(str, Enum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    CHAIN_CHANGED = "chainChanged"
    MESSAGE = "message"


@dataclass(frozen=True)
class ProviderConnectInfo:
    chain_id: str


@dataclass(frozen=True)
class ProviderRpcError:
    code: int
    message: str
    data: Optional[Any] = None


@dataclass(frozen=True)
class ProviderMessage:
    type: str
    data: Any


# EIP-1193: the provider is disconnected from all chains
DISCONNECTED = ProviderRpcError(code=4900, message="disconnected")

EventPayload = Union[ProviderConnectInfo, ProviderRpcError, ProviderMessage, str]
ProviderEventListener = Callable[[EventPayload], Any]

_PAYLOAD_TYPES = {
    ProviderEvent.CONNECT:       ProviderConnectInfo,
    ProviderEvent.DISCONNECT:    ProviderRpcError,
    ProviderEvent.CHAIN_CHANGED: str,
    ProviderEvent.MESSAGE:       ProviderMessage,
}


class EventEmitter:
    """
    Publish/subscribe channel for the fixed set of provider events.

    Every event kind carries exactly one payload type, see ``_PAYLOAD_TYPES``.
    Listeners are called synchronously in registration order and their
    exceptions propagate to whoever emitted the event.
    """

    def __init__(self):
        self._listeners: Dict[ProviderEvent, List[ProviderEventListener]] = {
            event: [] for event in ProviderEvent
        }

    @staticmethod
    def _event(event: Union[ProviderEvent, str]) -> ProviderEvent:
        try:
            return ProviderEvent(event)
        except ValueError:
            raise ValueError(f"Unknown provider event: {event!r}") from None

    def on(self, event: Union[ProviderEvent, str], listener: ProviderEventListener):
        self._listeners[self._event(event)].append(listener)
        return self

    def remove_listener(self, event: Union[ProviderEvent, str], listener: ProviderEventListener):
        listeners = self._listeners[self._event(event)]
        if listener in listeners:
            listeners.remove(listener)
        return self

    def listener_count(self, event: Union[ProviderEvent, str]) -> int:
        return len(self._listeners[self._event(event)])

    def emit(self, event: Union[ProviderEvent, str], payload: EventPayload) -> bool:
        event = self._event(event)
        expected = _PAYLOAD_TYPES[event]
        if not isinstance(payload, expected):
            raise TypeError(f"{event.value} expects {expected.__name__}, got {type(payload).__name__}")

        logger.debug("Emitting %s: %r", event.value, payload)
        listeners = list(self._listeners[event])
        for listener in listeners:
            listener(payload)
        return bool(listeners)
