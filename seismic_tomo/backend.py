"""
HTTP client for the Seismic backend.

Every endpoint exchanges JSON bodies, GET requests included. A non-2xx
answer, a transport failure or a malformed body raises ``BackendError``
(``DataAvailabilityError`` for the DA endpoint).
"""

from typing import Any, Dict, Optional, Tuple, Type

import requests

from .exceptions import BackendError, DataAvailabilityError

NONCE_ENDPOINT = "/authentication/nonce"
DAVAIL_ENDPOINT = "/swipe/davail"
MATCHES_ENDPOINT = "/swipe/matches"
UPGRADE_CONTRACT_ENDPOINT = "/swipe/upgradecontract"
SEISMIC_ADDRESS_ENDPOINT = "/swipe/getseismicaddress"

DEFAULT_TIMEOUT = 30.0


class SeismicBackend:
    """Thin wrapper over the Seismic REST endpoints used by the swipe flow"""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        endpoint: str,
        failure: str,
        payload: Optional[Dict[str, Any]] = None,
        error_cls: Type[BackendError] = BackendError,
        context: Optional[str] = None,
        expect_json: bool = True,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise error_cls(f"{failure}: timed out after {self.timeout}s", endpoint=endpoint, context=context) from e
        except requests.RequestException as e:
            raise error_cls(f"{failure}: {e}", endpoint=endpoint, context=context) from e

        if not 200 <= response.status_code < 300:
            raise error_cls(failure, endpoint=endpoint, status_code=response.status_code, context=context)
        if not expect_json:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{failure}: response is not JSON", endpoint=endpoint,
                            status_code=response.status_code, context=context) from e

    @staticmethod
    def _field(data: Any, key: str, failure: str, endpoint: str,
               error_cls: Type[BackendError] = BackendError, context: Optional[str] = None) -> Any:
        if not isinstance(data, dict) or key not in data:
            raise error_cls(f"{failure}: response has no '{key}'", endpoint=endpoint, context=context)
        return data[key]

    def nonce(self, address: str) -> int:
        """
        Next Seismic nonce for address.

        Seismic tracks this counter per wallet to stop replayed requests. It
        is NOT the transaction count Ethereum tracks for the wallet.
        """
        failure = "Could not get nonce for address"
        data = self._request("GET", NONCE_ENDPOINT, failure, payload={"address": address}, context=address)
        return int(self._field(data, "nonce", failure, NONCE_ENDPOINT, context=address))

    def davail(self, tx: Dict[str, Any], signature: str) -> Tuple[str, str]:
        """Submit a signed swipe intent, returns (commitment, attestation signature)"""
        failure = "Could not acquire data availability signature"
        data = self._request("POST", DAVAIL_ENDPOINT, failure,
                             payload={"tx": tx, "signature": signature},
                             error_cls=DataAvailabilityError)
        commitment = self._field(data, "commitment", failure, DAVAIL_ENDPOINT, DataAvailabilityError)
        da_signature = self._field(data, "signature", failure, DAVAIL_ENDPOINT, DataAvailabilityError)
        return commitment, da_signature

    def matches(self, tx: Dict[str, Any], signature: str) -> Any:
        """Confirmed matches for the signer of tx, exactly as the backend reports them"""
        return self._request("GET", MATCHES_ENDPOINT, "Could not request matches",
                             payload={"tx": tx, "signature": signature})

    def upgrade_contract(self, new_contract_address: str) -> None:
        """Point the backend at a freshly deployed Swipe contract"""
        self._request("POST", UPGRADE_CONTRACT_ENDPOINT, "Could not upgrade contract",
                      payload={"newContract": new_contract_address},
                      context=new_contract_address, expect_json=False)

    def seismic_address(self) -> str:
        """Latest SeismicTomo contract address"""
        failure = "Could not get Seismic address"
        data = self._request("GET", SEISMIC_ADDRESS_ENDPOINT, failure)
        return self._field(data, "seismicTomoContractAddress", failure, SEISMIC_ADDRESS_ENDPOINT)
