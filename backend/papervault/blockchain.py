import json, logging, os
from web3 import Web3
from eth_account import Account
from eth_utils import to_checksum_address

from .config import (
    WEB3_PROVIDER_URI, PRIVATE_KEY, CHAIN_ID, REGISTRY_ADDRESS,
    REGISTRY_ABI_PATH, REGISTRY_ABI_JSON,
    FN_IS_AVAILABLE, FN_GET_DATA, FN_SET_DATA, WAIT_FOR_RECEIPT,
)
from .errors import StoreUnavailable

_logger = logging.getLogger(__name__)


def load_abi(abi_path: str = REGISTRY_ABI_PATH, abi_json: str = REGISTRY_ABI_JSON):
    abi = None
    if abi_path and os.path.exists(abi_path):
        with open(abi_path, "r", encoding="utf-8-sig") as f:
            abi = json.load(f)
    elif abi_json:
        abi = json.loads(abi_json)
    # hardhat/foundry artifacts wrap the abi
    if isinstance(abi, dict) and "abi" in abi:
        abi = abi["abi"]
    if not abi:
        raise RuntimeError("Contract ABI not found. Set REGISTRY_ABI_PATH or REGISTRY_ABI_JSON")
    return abi


class ContractStore:
    """Key-value store backed by a contract exposing isAvailable/getData/setData."""

    def __init__(self, web3=None, contract=None, private_key: str = PRIVATE_KEY, chain_id: int = CHAIN_ID,
                 wait_for_receipt: bool = WAIT_FOR_RECEIPT):
        self.web3 = web3 or Web3(Web3.HTTPProvider(WEB3_PROVIDER_URI))
        if contract is None:
            if not REGISTRY_ADDRESS or not REGISTRY_ADDRESS.startswith("0x"):
                raise RuntimeError("REGISTRY_ADDRESS invalid")
            contract = self.web3.eth.contract(address=to_checksum_address(REGISTRY_ADDRESS), abi=load_abi())
        self.contract = contract
        self.account = Account.from_key(private_key) if private_key else None
        self.chain_id = chain_id
        self.wait_for_receipt = wait_for_receipt

    @property
    def address(self) -> str:
        return self.contract.address

    def is_available(self) -> bool:
        try:
            fn = getattr(self.contract.functions, FN_IS_AVAILABLE)
            return bool(fn().call())
        except Exception as e:
            _logger.warning("availability check failed: %s", e)
            return False

    def get_data(self, key: str) -> bytes:
        try:
            fn = getattr(self.contract.functions, FN_GET_DATA)
            return bytes(fn(key).call())
        except Exception as e:
            raise StoreUnavailable(f"{FN_GET_DATA}({key!r}) failed: {e}", operation="get") from e

    def set_data(self, key: str, value: bytes) -> None:
        if not self.account:
            raise StoreUnavailable("PRIVATE_KEY missing (read-only store)", operation="set")
        try:
            fn = getattr(self.contract.functions, FN_SET_DATA)
            tx = fn(key, bytes(value)).build_transaction({
                "from": self.account.address,
                "nonce": self.web3.eth.get_transaction_count(self.account.address),
                "chainId": self.chain_id,
            })
            signed = self.account.sign_transaction(tx)
            raw = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction", None)
            tx_hash = self.web3.eth.send_raw_transaction(raw)
            if self.wait_for_receipt:
                receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash)
                if receipt.status != 1:
                    raise RuntimeError("setData transaction reverted")
        except Exception as e:
            raise StoreUnavailable(f"{FN_SET_DATA}({key!r}) failed: {e}", operation="set") from e
        _logger.info("setData %s tx=%s", key, Web3.to_hex(tx_hash))
