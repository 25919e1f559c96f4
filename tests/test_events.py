from unittest import TestCase

from web3_providers_http.events import (DISCONNECTED, EventEmitter, ProviderConnectInfo, ProviderEvent,
                                        ProviderMessage, )


class TestEventEmitter(TestCase):

    def setUp(self):
        self.emitter = EventEmitter()
        self.received = []

    def test_listeners_called_in_order(self):
        self.emitter.on(ProviderEvent.CONNECT, lambda info: self.received.append(("first", info)))
        self.emitter.on("connect", lambda info: self.received.append(("second", info)))

        assert self.emitter.emit(ProviderEvent.CONNECT, ProviderConnectInfo("0x1"))
        self.assertEqual(self.received, [("first", ProviderConnectInfo("0x1")),
                                         ("second", ProviderConnectInfo("0x1"))])

    def test_emit_without_listeners(self):
        assert not self.emitter.emit(ProviderEvent.CHAIN_CHANGED, "0x2")

    def test_payload_type_is_checked(self):
        with self.assertRaises(TypeError):
            self.emitter.emit(ProviderEvent.CHAIN_CHANGED, ProviderConnectInfo("0x1"))
        with self.assertRaises(TypeError):
            self.emitter.emit(ProviderEvent.DISCONNECT, {"code": 4900})
        self.emitter.emit(ProviderEvent.DISCONNECT, DISCONNECTED)
        self.emitter.emit(ProviderEvent.MESSAGE, ProviderMessage(type="eth_subscription", data={}))

    def test_unknown_event(self):
        with self.assertRaises(ValueError):
            self.emitter.on("accountsChanged", self.received.append)

    def test_remove_listener(self):
        self.emitter.on(ProviderEvent.CHAIN_CHANGED, self.received.append)
        self.emitter.remove_listener(ProviderEvent.CHAIN_CHANGED, self.received.append)
        self.emitter.remove_listener(ProviderEvent.CHAIN_CHANGED, self.received.append)

        self.emitter.emit(ProviderEvent.CHAIN_CHANGED, "0x2")
        self.assertEqual(self.received, [])
        self.assertEqual(self.emitter.listener_count(ProviderEvent.CHAIN_CHANGED), 0)

    def test_listener_errors_propagate(self):
        def broken(_):
            raise RuntimeError("listener failed")

        self.emitter.on(ProviderEvent.CHAIN_CHANGED, broken)
        with self.assertRaises(RuntimeError):
            self.emitter.emit(ProviderEvent.CHAIN_CHANGED, "0x2")

    def test_disconnected_payload(self):
        self.assertEqual(DISCONNECTED.code, 4900)
        self.assertEqual(DISCONNECTED.message, "disconnected")
