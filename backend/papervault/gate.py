import logging, secrets, time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from eth_account import Account
from eth_account.messages import encode_defunct
from pydantic import BaseModel, Field
from web3 import Web3

from .cipher import Number, PlaceholderCipher
from .config import REVEAL_DURATION_DAYS

_logger = logging.getLogger(__name__)

Signer = Callable[[str], str]


def generate_public_key(n_hex: int = 2000) -> str:
    return "0x" + secrets.token_hex(n_hex // 2)


class RevealSession(BaseModel):
    """Session parameters the reveal challenge is built from.

    Captured once when the session starts; nothing here reads the clock.
    """
    public_key: str
    contract_address: str
    chain_id: int
    start_timestamp: int
    duration_days: int = Field(default=REVEAL_DURATION_DAYS, ge=0)

    @classmethod
    def start(cls, contract_address: str, chain_id: int, public_key: Optional[str] = None,
              duration_days: int = REVEAL_DURATION_DAYS, now: Optional[float] = None) -> "RevealSession":
        return cls(
            public_key=public_key or generate_public_key(),
            contract_address=contract_address,
            chain_id=chain_id,
            start_timestamp=int(time.time() if now is None else now),
            duration_days=duration_days,
        )


@dataclass(frozen=True)
class GateDenied:
    """Outcome of a reveal whose signature step failed or was cancelled."""
    reason: str


class RevealGate:
    def __init__(self, session: RevealSession, cipher: Optional[PlaceholderCipher] = None):
        self.session = session
        self.cipher = cipher or PlaceholderCipher()

    def build_challenge(self) -> str:
        s = self.session
        return "\n".join([
            f"publickey:{s.public_key}",
            f"contractAddresses:{s.contract_address}",
            f"contractsChainId:{s.chain_id}",
            f"startTimestamp:{s.start_timestamp}",
            f"durationDays:{s.duration_days}",
        ])

    def reveal(self, encoded_value: str, signer: Signer) -> Union[Number, GateDenied]:
        challenge = self.build_challenge()
        try:
            signer(challenge)
        except Exception as e:
            _logger.info("reveal denied: %s", e)
            return GateDenied(reason=str(e) or type(e).__name__)
        # the signature is not checked here; a successful signer call is the consent step
        return self.cipher.decode(encoded_value)


# -------------------------------------------------
# signers
# -------------------------------------------------
class SignatureRejected(Exception):
    pass


def recover_address(message: str, signature: str) -> str:
    try:
        addr = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as e:
        raise SignatureRejected(f"invalid signature: {e}") from e
    return Web3.to_checksum_address(addr)


class LocalAccountSigner:
    """EIP-191 personal_sign with a local private key."""

    def __init__(self, private_key):
        self.account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self.account.address

    def __call__(self, message: str) -> str:
        signed = self.account.sign_message(encode_defunct(text=message))
        return Web3.to_hex(signed.signature)


class EnvelopeSigner:
    """Replays a signature a remote caller produced over the challenge."""

    def __init__(self, message: str, signature: str, sig_type: Optional[str] = "eip191"):
        self.message = message
        self.signature = signature
        self.sig_type = (sig_type or "eip191").lower()
        self.recovered: Optional[str] = None

    def __call__(self, challenge: str) -> str:
        if self.sig_type != "eip191":
            raise SignatureRejected(f"unsupported sig_type: {self.sig_type}")
        if self.message != challenge:
            raise SignatureRejected("signed message does not match the reveal challenge")
        self.recovered = recover_address(self.message, self.signature)
        return self.signature
