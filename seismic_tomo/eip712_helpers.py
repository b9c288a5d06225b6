"""
EIP712 Helper Functions for the Seismic swipe client
This module signs the typed transactions the Seismic backend expects, and
unpacks the attestation signatures it hands back. Hashing is left to
eth_account's typed-data encoder.
"""

import secrets
from typing import Any, Dict, Iterable, NamedTuple

from eth_account.messages import encode_typed_data
from eth_utils import to_hex

from .eip712_config import BN254_SCALAR_FIELD

SIGNATURE_LENGTH = 65

# uint256 values that travel as decimal strings on the wire
BIG_INT_FIELDS = ("nonce", "blind")


class StructuredSignature(NamedTuple):
    """Signature split into the components the Swipe contract verifies"""
    v: int
    r: bytes
    s: bytes
    b: int = 0


def primary_type_of(schema: Dict[str, Any]) -> str:
    return f"{schema['label']}Tx"


def build_typed_message(schema: Dict[str, Any], message: Dict[str, Any]) -> Dict[str, Any]:
    """Full typed-data document, as wallets that sign JSON typed data expect it"""
    return {
        "types": schema["types"],
        "domain": schema["domain"],
        "primaryType": primary_type_of(schema),
        "message": message,
    }


def sign_typed_data(account, schema: Dict[str, Any], message: Dict[str, Any]) -> str:
    """Sign message under schema with a local account, returns 0x-prefixed hex"""
    signable = encode_typed_data(full_message=build_typed_message(schema, message))
    signed_message = account.sign_message(signable)
    return to_hex(signed_message.signature)


def decode_signature(signature_hex: str) -> StructuredSignature:
    """
    Unpack a 65 byte r || s || v signature.

    A recovery byte of 0 or 1 is normalized to 27 or 28, the form ecrecover
    takes on-chain. The trailing b component is always 0.
    """
    if signature_hex.startswith("0x"):
        signature_hex = signature_hex[2:]
    signature = bytes.fromhex(signature_hex)
    if len(signature) != SIGNATURE_LENGTH:
        raise ValueError(f"Expected a {SIGNATURE_LENGTH} byte signature, got {len(signature)} bytes")

    v = signature[64]
    if v in (0, 1):
        v += 27
    return StructuredSignature(v=v, r=signature[:32], s=signature[32:64], b=0)


def stringify_big_ints(obj: Any, fields: Iterable[str] = BIG_INT_FIELDS) -> Any:
    """Copy obj with the integers stored under fields turned into decimal strings"""
    fields = tuple(fields)
    if isinstance(obj, dict):
        result = {}
        for key, value in obj.items():
            if key in fields and isinstance(value, int) and not isinstance(value, bool):
                result[key] = str(value)
            else:
                result[key] = stringify_big_ints(value, fields)
        return result
    if isinstance(obj, (list, tuple)):
        return [stringify_big_ints(value, fields) for value in obj]
    return obj


def sample_blind() -> int:
    """Fresh uniformly random blinding factor"""
    return secrets.randbelow(BN254_SCALAR_FIELD)
