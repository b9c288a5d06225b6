"""
Pytest fixtures for the swipe client tests.

Nothing here talks to a network or a chain: the HTTP session, the Seismic
backend and the Swipe contract are replaced by in-memory fakes. The fake
backend recovers the signer of every typed request, so a schema mismatch
shows up as a wrong address rather than passing silently.
"""

from __future__ import annotations

import pytest
from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak, to_hex

from seismic_tomo.eip712_config import SWIPE_DA_REQ_TYPED, SWIPE_MATCH_TYPED
from seismic_tomo.eip712_helpers import build_typed_message
from seismic_tomo.exceptions import BackendError, DataAvailabilityError
from seismic_tomo.wallets import LocalSigner, derive_wallet_keys

SEED_KEY = "0x" + "5e" * 32
ATTESTOR_KEY = "0x" + "a7" * 32
SEISMIC_ADDRESS = "0x" + "5e15" * 10


class FakeResponse:
    NOT_JSON = object()

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is FakeResponse.NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; answers with the queued responses in order"""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class RecordingSigner:
    """Wraps a LocalSigner and keeps every message it signed"""

    def __init__(self, account):
        self._signer = LocalSigner(account)
        self.signed = []

    @property
    def address(self):
        return self._signer.address

    def sign_typed_data(self, schema, message):
        self.signed.append((schema["label"], message))
        return self._signer.sign_typed_data(schema, message)


class FakeContractWriter:
    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = {"status": 1} if result is None else result
        self.error = error

    def swipe(self, commitment, v, r, s):
        self.calls.append((commitment, v, r, s))
        if self.error is not None:
            raise self.error
        return self.result


def recover_typed_signer(schema, message, signature):
    signable = encode_typed_data(full_message=build_typed_message(schema, message))
    return Account.recover_message(signable, signature=signature)


class FakeSeismicBackend:
    """
    In-memory Seismic backend.

    Tracks a nonce per address, records every attested swipe and reports a
    match once two wallets liked each other (the latest swipe of a pair wins).
    """

    def __init__(self):
        self.attestor = Account.from_key(ATTESTOR_KEY)
        self.nonces = {}
        self.swipes = []
        self.commitments = []
        self.upgraded_to = []

    def _consume_nonce(self, address, value, error_cls=BackendError):
        expected = self.nonces.get(address, 0)
        if value != expected:
            raise error_cls("Replayed or stale nonce", endpoint="fake", context=address)
        self.nonces[address] = expected + 1

    def nonce(self, address):
        return self.nonces.get(address, 0)

    def davail(self, tx, signature):
        body = tx["body"]
        message = {
            "nonce": int(tx["nonce"]),
            "body": {"recipient": body["recipient"], "positive": body["positive"], "blind": int(body["blind"])},
        }
        sender = recover_typed_signer(SWIPE_DA_REQ_TYPED, message, signature)
        self._consume_nonce(sender, message["nonce"], DataAvailabilityError)
        self.swipes.append((sender, body["recipient"], body["positive"]))

        commitment = keccak(encode(
            ["address", "address", "bool", "uint256"],
            [sender, body["recipient"], body["positive"], message["body"]["blind"]],
        )).hex()
        self.commitments.append(commitment)
        attestation = self.attestor.unsafe_sign_hash(keccak(bytes.fromhex(commitment)))
        return commitment, to_hex(attestation.signature)

    def matches(self, tx, signature):
        message = {"nonce": int(tx["nonce"]), "body": {"startIndex": int(tx["body"]["startIndex"])}}
        requester = recover_typed_signer(SWIPE_MATCH_TYPED, message, signature)
        self._consume_nonce(requester, message["nonce"])

        latest = {}
        for sender, recipient, positive in self.swipes:
            latest[(sender, recipient)] = positive
        found = []
        for (sender, recipient), positive in latest.items():
            if sender == requester and positive and latest.get((recipient, sender)):
                found.append({"address": recipient})
        return found[message["body"]["startIndex"]:]

    def upgrade_contract(self, new_contract_address):
        self.upgraded_to.append(new_contract_address)

    def seismic_address(self):
        return SEISMIC_ADDRESS


@pytest.fixture
def accounts():
    """Five deterministic demo accounts"""
    return [Account.from_key(key) for key in derive_wallet_keys(SEED_KEY, 5)]


@pytest.fixture
def fake_backend():
    return FakeSeismicBackend()
