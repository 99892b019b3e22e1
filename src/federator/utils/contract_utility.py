import json
from pathlib import Path

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.middleware import SignAndSendRawMiddlewareBuilder

ABI_DIR = Path(__file__).parent.parent / "abis"


class ContractUtility:
    """
    Utility for web3 connections, contract bindings and ABI loading.

    Can be used in two modes:
    1. Signing mode: initialized with a secret, transactions sent through the
       returned Web3 instance are signed locally with that key
    2. Read-only mode: no secret, only calls and ABI encoding
    """

    def __init__(self, rpc_url: str, secret: str = "", request_timeout: int = 30):
        """
        Initialize the ContractUtility.

        Args:
            rpc_url: HTTP RPC endpoint to connect to
            secret: Private key for transactions (optional for read-only mode)
            request_timeout: HTTP request timeout in seconds
        """
        self.rpc_url = rpc_url
        self.account: LocalAccount | None = None
        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': request_timeout}))
        if secret:
            self.setup_signing_middleware(secret)

    def setup_signing_middleware(self, secret: str) -> None:
        self.account = Account.from_key(secret)
        self.w3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(self.account))
        self.w3.eth.default_account = self.account.address

    @property
    def address(self) -> str | None:
        """Address of the signing account, None in read-only mode."""
        return self.account.address if self.account else None

    @staticmethod
    def get_contract_abi(contract_name: str) -> list:
        """Fetches ABI of the given contract from the bundled abis folder"""
        contract_path = (ABI_DIR / f"{contract_name}.json").resolve()

        with contract_path.open() as file:
            contract_data = json.load(file)

        return contract_data["abi"]

    def get_contract(self, contract_name: str, address: str) -> Contract:
        """Bind the named ABI to ``address`` on this utility's chain."""
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=self.get_contract_abi(contract_name)
        )
