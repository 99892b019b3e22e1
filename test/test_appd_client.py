"""Unit tests for the ROFL appd client."""

from unittest.mock import AsyncMock, patch

import cbor2
import httpx
import pytest

from federator.errors import SubmissionError
from federator.utils.appd_client import AppdClient

TX = {
    'to': "0x" + "cd" * 20,
    'data': "0xdeadbeef",
    'value': 0,
    'gas': 3000000,
}


def cbor_hex(value) -> str:
    return cbor2.dumps(value).hex()


class TestAppdClient:
    """Test suite for AppdClient."""

    def test_decode_dict_response(self):
        assert AppdClient.decode_cbor_response(cbor_hex({"ok": b"\x01"})) == {"ok": b"\x01"}

    def test_decode_non_dict_response(self):
        assert AppdClient.decode_cbor_response(cbor_hex([1, 2])) == {"data": [1, 2]}

    def test_decode_invalid_response(self):
        with pytest.raises(SubmissionError, match="Undecodable ROFL response"):
            AppdClient.decode_cbor_response("not-hex")

    @pytest.mark.asyncio
    async def test_submit_tx_payload(self):
        client = AppdClient()
        with patch.object(client, '_appd_post', AsyncMock(return_value={"data": cbor_hex({"ok": b""})})) as post:
            result = await client.submit_tx(TX)

        assert result == {"ok": b""}
        post.assert_awaited_once_with("/rofl/v1/tx/sign-submit", {
            "tx": {
                "kind": "eth",
                "data": {
                    "gas_limit": 3000000,
                    "to": "cd" * 20,
                    "value": 0,
                    "data": "deadbeef",
                },
            },
            "encrypt": False,
        })

    @pytest.mark.asyncio
    async def test_submit_tx_error_response(self):
        client = AppdClient()
        response = {"data": cbor_hex({"error": {"module": "evm", "code": 2}})}
        with patch.object(client, '_appd_post', AsyncMock(return_value=response)):
            with pytest.raises(SubmissionError, match="ROFL transaction failed"):
                await client.submit_tx(TX)

    @pytest.mark.asyncio
    async def test_submit_tx_unknown_response(self):
        client = AppdClient()
        with patch.object(client, '_appd_post', AsyncMock(return_value={"data": cbor_hex({"fail": 1})})):
            with pytest.raises(SubmissionError, match="Unknown ROFL response format"):
                await client.submit_tx(TX)

    @pytest.mark.asyncio
    async def test_submit_tx_missing_data(self):
        client = AppdClient()
        with patch.object(client, '_appd_post', AsyncMock(return_value={})):
            with pytest.raises(SubmissionError, match="without data"):
                await client.submit_tx(TX)

    @pytest.mark.asyncio
    async def test_submit_tx_http_error(self):
        client = AppdClient()
        with patch.object(client, '_appd_post', AsyncMock(side_effect=httpx.ConnectError("no socket"))):
            with pytest.raises(SubmissionError, match="ROFL appd request failed"):
                await client.submit_tx(TX)

    def test_transport_selection(self):
        assert AppdClient("http://localhost:8080")._transport() is None
        assert isinstance(AppdClient()._transport(), httpx.AsyncHTTPTransport)
        assert isinstance(AppdClient("/tmp/appd.sock")._transport(), httpx.AsyncHTTPTransport)
