"""
Wallet and contract bindings for the simulated swipers.

A ``Signer`` signs Seismic typed transactions and exposes its address. A
``ContractWriter`` submits the ``swipe`` transaction and waits for it to be
mined. The demo builds one of each per wallet, all derived from a single
funded developer key.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Protocol, Tuple

from eth_account import Account
from web3 import Web3

from .eip712_helpers import sign_typed_data

# secp256k1 group order, private keys must stay below it
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

RECEIPT_TIMEOUT = 120


class Signer(Protocol):
    address: str

    def sign_typed_data(self, schema: Dict[str, Any], message: Dict[str, Any]) -> str:
        ...


class ContractWriter(Protocol):
    def swipe(self, commitment: int, v: int, r: bytes, s: bytes) -> Any:
        ...


class LocalSigner:
    """Signer backed by a private key held in memory"""

    def __init__(self, account):
        self.account = account

    @property
    def address(self) -> str:
        return self.account.address

    def sign_typed_data(self, schema: Dict[str, Any], message: Dict[str, Any]) -> str:
        return sign_typed_data(self.account, schema, message)


def _send_and_wait(w3: Web3, account, transaction: Dict[str, Any], timeout: int):
    signed_txn = account.sign_transaction(transaction)
    tx_hash = w3.eth.send_raw_transaction(signed_txn.raw_transaction)
    receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
    if receipt["status"] != 1:
        raise RuntimeError(f"Transaction {Web3.to_hex(tx_hash)} reverted")
    return receipt


def _tx_params(w3: Web3, account, chain_id: int, gas: Optional[int] = None) -> Dict[str, Any]:
    params = {
        'from': account.address,
        'nonce': w3.eth.get_transaction_count(account.address),
        'gasPrice': w3.eth.gas_price,
        'chainId': chain_id,
    }
    if gas is not None:
        params['gas'] = gas
    return params


class SwipeContractWriter:
    """Sends ``swipe(commitment, v, r, s)`` to the Swipe contract from one wallet"""

    def __init__(self, w3: Web3, contract, account, chain_id: int,
                 gas: Optional[int] = None, receipt_timeout: int = RECEIPT_TIMEOUT):
        self.w3 = w3
        self.contract = contract
        self.account = account
        self.chain_id = chain_id
        self.gas = gas
        self.receipt_timeout = receipt_timeout

    def swipe(self, commitment: int, v: int, r: bytes, s: bytes):
        transaction = self.contract.functions.swipe(commitment, v, r, s).build_transaction(
            _tx_params(self.w3, self.account, self.chain_id, self.gas)
        )
        return _send_and_wait(self.w3, self.account, transaction, self.receipt_timeout)


class DemoWallet(NamedTuple):
    index: int
    signer: LocalSigner
    contract: SwipeContractWriter

    @property
    def address(self) -> str:
        return self.signer.address


def derive_wallet_keys(seed_key: str, count: int) -> List[str]:
    """Private keys seed+1 .. seed+count; the seed itself stays the deployer"""
    seed = int(seed_key, 16)
    keys = []
    for i in range(count):
        key = seed + 1 + i
        if not 0 < key < SECP256K1_N:
            raise ValueError(f"Derived key for wallet #{i} is outside the secp256k1 range")
        keys.append(f"0x{key:064x}")
    return keys


def fund_account(w3: Web3, funder, to_address: str, amount_eth: float, chain_id: int) -> bool:
    """Top to_address up to amount_eth from funder, returns whether a transfer was sent"""
    to_address = Web3.to_checksum_address(to_address)
    target = w3.to_wei(amount_eth, 'ether')
    balance = w3.eth.get_balance(to_address)
    if balance >= target:
        return False

    tx = {
        'from': funder.address,
        'to': to_address,
        'value': target - balance,
        'gas': 21000,
        'gasPrice': w3.eth.gas_price,
        'nonce': w3.eth.get_transaction_count(funder.address),
        'chainId': chain_id,
    }
    _send_and_wait(w3, funder, tx, RECEIPT_TIMEOUT)
    return True


def load_swipe_artifact(path) -> Tuple[List[Dict[str, Any]], str]:
    """Read the Foundry build artifact of the Swipe contract, returns (abi, bytecode)"""
    with open(Path(path), 'r') as f:
        artifact = json.load(f)

    bytecode = artifact["bytecode"]
    if isinstance(bytecode, dict):
        bytecode = bytecode["object"]
    if bytecode.startswith("0x"):
        bytecode = bytecode[2:]
    return artifact["abi"], f"0x{bytecode}"


def deploy_swipe_contract(w3: Web3, deployer, abi, bytecode: str, seismic_address: str, chain_id: int) -> str:
    """Deploy Swipe(seismicAddress) from deployer and return its address"""
    swipe_contract = w3.eth.contract(abi=abi, bytecode=bytecode)
    transaction = swipe_contract.constructor(Web3.to_checksum_address(seismic_address)).build_transaction(
        _tx_params(w3, deployer, chain_id)
    )
    receipt = _send_and_wait(w3, deployer, transaction, RECEIPT_TIMEOUT)
    contract_address = receipt["contractAddress"]
    if not contract_address:
        raise RuntimeError("Swipe deployment receipt carries no contract address")
    return contract_address


def setup_contract_interfaces(
    w3: Web3,
    seed_key: str,
    num_wallets: int,
    contract_address: str,
    abi,
    chain_id: int,
    fund_amount_eth: float = 0,
    receipt_timeout: int = RECEIPT_TIMEOUT,
) -> List[DemoWallet]:
    """
    Build the demo wallets, wallet #i at position i.

    Each wallet gets its own signer and a writer bound to the shared Swipe
    contract. When fund_amount_eth is set the deployer tops every wallet up
    first so it can pay for its swipes.
    """
    deployer = Account.from_key(seed_key)
    contract = w3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=abi)

    wallets = []
    for index, key in enumerate(derive_wallet_keys(seed_key, num_wallets)):
        account = Account.from_key(key)
        if fund_amount_eth:
            fund_account(w3, deployer, account.address, fund_amount_eth, chain_id)
        writer = SwipeContractWriter(w3, contract, account, chain_id, receipt_timeout=receipt_timeout)
        wallets.append(DemoWallet(index, LocalSigner(account), writer))
    return wallets
