"""
Signed state-root updates.

An updater attests to a transition `previous_root -> new_root` on its home
domain by signing

    keccak256(abi.encodePacked(homeDomainHash, previous_root, new_root))

as an EIP-191 personal message, where

    homeDomainHash = keccak256(abi.encodePacked(uint32 home_domain, "OPTICS"))

These are the digests the on-chain `testIsUpdaterSignature` and
`doubleUpdate` functions check.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError
from web3 import Web3

from .config import validate_bytes32, validate_domain

DOMAIN_HASH_SUFFIX = "OPTICS"
SIGNATURE_LENGTH = 65  # r, s, v


def home_domain_hash(home_domain: int) -> bytes:
    """Hash identifying a home domain inside update digests."""
    return bytes(Web3.solidity_keccak(
        ["uint32", "string"], [validate_domain(home_domain), DOMAIN_HASH_SUFFIX]
    ))


@dataclass(frozen=True)
class Update:
    home_domain: int
    previous_root: bytes
    new_root: bytes

    def __post_init__(self):
        validate_domain(self.home_domain)
        object.__setattr__(self, "previous_root", validate_bytes32(self.previous_root, "previous_root"))
        object.__setattr__(self, "new_root", validate_bytes32(self.new_root, "new_root"))

    def signing_hash(self) -> bytes:
        return bytes(Web3.solidity_keccak(
            ["bytes32", "bytes32", "bytes32"],
            [home_domain_hash(self.home_domain), self.previous_root, self.new_root],
        ))

    def sign(self, account: LocalAccount) -> SignedUpdate:
        """Sign this update the way the updater does."""
        signed = account.sign_message(encode_defunct(primitive=self.signing_hash()))
        return SignedUpdate(self, bytes(signed.signature))


@dataclass(frozen=True)
class SignedUpdate:
    update: Update
    signature: bytes

    def recover(self) -> str:
        """Return the checksum address that produced the signature."""
        return Account.recover_message(
            encode_defunct(primitive=self.update.signing_hash()),
            signature=self.signature,
        )

    def verify(self, updater: str) -> bool:
        """True if `updater` signed this update. Malformed signatures never verify."""
        if len(self.signature) != SIGNATURE_LENGTH or self.signature[-1] not in (27, 28):
            return False
        try:
            return self.recover().lower() == updater.lower()
        except (ValueError, KeyValidationError, BadSignature):
            return False

    @classmethod
    def from_event(cls, event: Any) -> SignedUpdate:
        """Build from a decoded `Update` event log."""
        args = event["args"]
        return cls(
            Update(args["homeDomain"], args["oldRoot"], args["newRoot"]),
            bytes(args["signature"]),
        )


@dataclass(frozen=True)
class DoubleUpdate:
    """Two conflicting updates from the same previous root."""
    first: SignedUpdate
    second: SignedUpdate

    def __post_init__(self):
        a, b = self.first.update, self.second.update
        if a.home_domain != b.home_domain:
            raise ValueError("double update must be on a single home domain")
        if a.previous_root != b.previous_root:
            raise ValueError("double update must share the previous root")
        if a.new_root == b.new_root:
            raise ValueError("double update needs two different new roots")

    def as_call_args(self) -> Tuple[bytes, List[bytes], bytes, bytes]:
        """Arguments for the contract's `doubleUpdate` function."""
        return (
            self.first.update.previous_root,
            [self.first.update.new_root, self.second.update.new_root],
            self.first.signature,
            self.second.signature,
        )
