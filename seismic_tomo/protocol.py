"""
The Seismic swipe protocol, one step per function.

A swipe is announced to Seismic first (data availability), which answers
with a hiding commitment and an attestation signature. The swiper then
registers the commitment on the Swipe contract themselves; Seismic never
acts on the user's behalf. Matches are read back from Seismic afterwards.
"""

from typing import Any, Tuple

from .backend import SeismicBackend
from .eip712_config import SWIPE_DA_REQ_TYPED, SWIPE_MATCH_TYPED
from .eip712_helpers import decode_signature, sample_blind, stringify_big_ints
from .exceptions import DataAvailabilityError, RegistrationError
from .wallets import ContractWriter, Signer


def nonce(backend: SeismicBackend, signer: Signer) -> int:
    """Seismic nonce for the signer's address (not the Ethereum account nonce)"""
    return backend.nonce(signer.address)


def davail(backend: SeismicBackend, sender: Signer, recipient_address: str, positive: bool) -> Tuple[str, str]:
    """
    Announce a swipe to Seismic and collect its data availability signature.

    The contract checks this signature, so the swipe cannot be registered
    on-chain without it. Returns (commitment, attestation signature).
    """
    sender_nonce = nonce(backend, sender)
    tx = {
        "nonce": sender_nonce,
        "body": {
            "recipient": recipient_address,
            "positive": positive,
            "blind": sample_blind(),
        },
    }
    signature = sender.sign_typed_data(SWIPE_DA_REQ_TYPED, tx)
    return backend.davail(stringify_big_ints(tx), signature)


def _parse_commitment(swipe_commitment) -> int:
    """Commitments arrive as hex strings; a bare JSON number is taken as is"""
    if isinstance(swipe_commitment, int) and not isinstance(swipe_commitment, bool):
        return swipe_commitment
    if isinstance(swipe_commitment, str):
        return int(swipe_commitment, 16)
    raise DataAvailabilityError(f"Unexpected swipe commitment: {swipe_commitment!r}")


def register_swipe(contract: ContractWriter, swipe_commitment: str, da_signature: str) -> Any:
    """Send the hiding commitment to the Swipe contract, returns the transaction result"""
    structured_sig = decode_signature(da_signature)
    commitment = _parse_commitment(swipe_commitment)
    try:
        result = contract.swipe(commitment, structured_sig.v, structured_sig.r, structured_sig.s)
    except Exception as e:
        raise RegistrationError("Error registering swipe", cause=e) from e
    if result is None:
        raise RegistrationError("Error registering swipe: contract call returned no result")
    return result


def swipe(backend: SeismicBackend, contract: ContractWriter, sender: Signer,
          recipient_address: str, positive: bool) -> Any:
    """Data availability with Seismic, then registration on-chain"""
    swipe_commitment, da_signature = davail(backend, sender, recipient_address, positive)
    return register_swipe(contract, swipe_commitment, da_signature)


def matches(backend: SeismicBackend, signer: Signer, start_index: int = 0) -> Any:
    """Matches Seismic reports for the signer, from start_index on"""
    signer_nonce = nonce(backend, signer)
    tx = {
        "nonce": signer_nonce,
        "body": {
            "startIndex": start_index,
        },
    }
    signature = signer.sign_typed_data(SWIPE_MATCH_TYPED, tx)
    return backend.matches(stringify_big_ints(tx), signature)
