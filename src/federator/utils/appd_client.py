import codecs
import json
import logging
import typing
from typing import Any, Dict

import cbor2
import httpx
from web3.types import TxParams

from ..errors import SubmissionError

logger = logging.getLogger(__name__)


class AppdClient:
    """Client for the ROFL appd REST API, reached over its unix socket by default."""

    ROFL_SOCKET_PATH = "/run/rofl-appd.sock"
    SIGN_SUBMIT_PATH = "/rofl/v1/tx/sign-submit"

    def __init__(self, url: str = ''):
        self.url = url

    def _transport(self) -> httpx.AsyncHTTPTransport | None:
        if self.url.startswith('http'):
            return None
        socket_path = self.url or self.ROFL_SOCKET_PATH
        logger.debug(f"Using unix domain socket: {socket_path}")
        return httpx.AsyncHTTPTransport(uds=socket_path)

    async def _appd_post(self, path: str, payload: typing.Any) -> typing.Any:
        base_url = self.url if self.url.startswith('http') else "http://localhost"
        async with httpx.AsyncClient(transport=self._transport()) as client:
            logger.debug(f"Posting to {base_url + path}: {json.dumps(payload)}")
            response = await client.post(base_url + path, json=payload, timeout=None)
            response.raise_for_status()
            return response.json()

    @staticmethod
    def decode_cbor_response(response_hex: str) -> Dict[str, Any]:
        """
        Decode the hex-encoded CBOR body of a sign-submit response.

        Raises:
            SubmissionError: If the body is not valid hex-encoded CBOR
        """
        try:
            cbor_result = cbor2.loads(codecs.decode(response_hex, "hex"))
        except (ValueError, cbor2.CBORDecodeError) as e:
            raise SubmissionError(f"Undecodable ROFL response {response_hex!r}: {e}") from e
        logger.debug(f"Decoded CBOR: {cbor_result}")
        return cbor_result if isinstance(cbor_result, dict) else {"data": cbor_result}

    async def submit_tx(self, tx: TxParams) -> Dict[str, Any]:
        """
        Have appd sign and submit a transaction with the app's key.

        Args:
            tx: Transaction with ``to``, ``data``, ``value`` and ``gas``

        Returns:
            The decoded ``ok`` result

        Raises:
            SubmissionError: If appd is unreachable or rejects the transaction
        """
        payload = {
            "tx": {
                "kind": "eth",
                "data": {
                    "gas_limit": tx["gas"],
                    "to": tx["to"].removeprefix("0x"),
                    "value": tx["value"],
                    "data": tx["data"].removeprefix("0x"),
                },
            },
            "encrypt": False,
        }

        try:
            response = await self._appd_post(self.SIGN_SUBMIT_PATH, payload)
        except httpx.HTTPError as e:
            raise SubmissionError(f"ROFL appd request failed: {e}") from e

        if not (response_hex := response.get("data")):
            raise SubmissionError(f"ROFL response without data: {response}")
        logger.debug(f"ROFL raw response: {response_hex}")

        decoded = self.decode_cbor_response(response_hex)
        match decoded:
            case {"ok": result}:
                logger.info("Transaction submitted successfully to ROFL")
                return {"ok": result}
            case {"error": error}:
                raise SubmissionError(f"ROFL transaction failed: {error}")
            case _:
                raise SubmissionError(f"Unknown ROFL response format: {decoded}")
