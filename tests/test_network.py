import logging
import os
from unittest import TestCase, mock

from web3_providers_http import ChainId, InvalidClientUrl, Network
from web3_providers_http.logger import ProviderLogger
from web3_providers_http.network import hardhat, localhost


class TestNetwork(TestCase):

    def test_presets(self):
        self.assertEqual(localhost.chain_id, ChainId.GANACHE)
        self.assertEqual(hardhat.chain_id, 31337)

    @mock.patch.dict(os.environ, {"WEB3_HTTP_PROVIDER_URI": "http://node.test", "WEB3_CHAIN_ID": "0xaa36a7"})
    def test_from_env(self):
        network = Network.from_env()
        self.assertEqual(network.rpc_url, "http://node.test")
        self.assertEqual(network.chain_id, ChainId.SEPOLIA)

    @mock.patch.dict(os.environ, {"WEB3_HTTP_PROVIDER_URI": "http://node.test"}, clear=True)
    def test_from_env_without_chain_id(self):
        self.assertIsNone(Network.from_env().chain_id)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_from_env_requires_url(self):
        with self.assertRaises(KeyError):
            Network.from_env()


class TestProviderLogger(TestCase):

    def test_make_error(self):
        error_logger = ProviderLogger(logging.getLogger("tests.provider_logger"))
        with self.assertLogs("tests.provider_logger", "DEBUG") as logs:
            error = error_logger.make_error(InvalidClientUrl, "bad url", endpoint="ftp://x")

        assert isinstance(error, InvalidClientUrl)
        self.assertEqual(str(error), "bad url")
        self.assertEqual(error.params, {"endpoint": "ftp://x"})
        self.assertIn("InvalidClientUrl", logs.output[0])
