#!/usr/bin/env python3
"""
💘 SEISMIC TOMO SWIPE DEMO 💘

Simulates a handful of wallets swiping on each other:
1. Deploying a fresh Swipe contract and pointing Seismic at it
2. Deriving the demo wallets from the developer key
3. Running every configured like and dislike through the Seismic flow
4. Fetching the matches Seismic confirmed for one sample wallet
"""

import argparse
import sys
import time
from typing import Any, Callable, List, Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import Web3Exception

from . import protocol
from .backend import SeismicBackend
from .config import DemoConfig, load_config
from .console import print_error, print_header, print_info, print_json, print_step, print_success
from .exceptions import SwipeClientError
from .wallets import DemoWallet, deploy_swipe_contract, load_swipe_artifact, setup_contract_interfaces


class SwipeDemo:
    def __init__(
        self,
        config: DemoConfig,
        backend: Optional[SeismicBackend] = None,
        w3: Optional[Web3] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.backend = backend or SeismicBackend(config.backend_url, timeout=config.request_timeout)
        self.w3 = w3 or Web3(Web3.HTTPProvider(config.rpc_url))
        self.sleep = sleep
        self.contract_address = config.contract_address
        self.wallets: List[DemoWallet] = []
        self._abi = None
        self._bytecode = None

    def _load_artifact(self):
        if self._abi is None:
            self._abi, self._bytecode = load_swipe_artifact(self.config.artifact_path)
        return self._abi, self._bytecode

    def deploy_contract(self) -> str:
        """Deploy Swipe against the SeismicTomo contract Seismic currently runs"""
        print_step(1, "Deploying Swipe contract")
        abi, bytecode = self._load_artifact()
        seismic_address = self.backend.seismic_address()
        print_info(f"SeismicTomo address: {seismic_address}")

        deployer = Account.from_key(self.config.signer_seed_key)
        self.contract_address = deploy_swipe_contract(
            self.w3, deployer, abi, bytecode, seismic_address, self.config.chain_id
        )
        print_success(f"Swipe deployed at {self.contract_address}")
        return self.contract_address

    def upgrade_contract(self):
        """Tell Seismic which Swipe contract to watch"""
        self.backend.upgrade_contract(self.contract_address)
        print_success(f"Seismic now tracks {self.contract_address}")

    def init_wallets(self) -> List[DemoWallet]:
        print_step(2, "Initializing demo wallets")
        abi, _ = self._load_artifact()
        self.wallets = setup_contract_interfaces(
            self.w3,
            self.config.signer_seed_key,
            self.config.num_wallets,
            self.contract_address,
            abi,
            self.config.chain_id,
            fund_amount_eth=self.config.fund_amount_eth,
        )
        for wallet in self.wallets:
            print_info(f"Wallet #{wallet.index} address: {wallet.address}")
        return self.wallets

    def _swipe(self, sender: int, recipient: int, positive: bool):
        sender_wallet = self.wallets[sender]
        protocol.swipe(
            self.backend,
            sender_wallet.contract,
            sender_wallet.signer,
            self.wallets[recipient].address,
            positive,
        )
        self.sleep(self.config.swipe_delay)
        kind = "like" if positive else "dislike"
        print_success(f'Registered "{kind}" between [#{sender}, #{recipient}]')

    def simulate_swipes(self):
        """Likes first, then dislikes; each swipe is mined before the next one starts"""
        print_step(3, "Simulating swipes")
        for sender, recipient in self.config.like_pairs:
            self._swipe(sender, recipient, True)
        for sender, recipient in self.config.dislike_pairs:
            self._swipe(sender, recipient, False)

    def fetch_matches(self, wallet_index: int) -> Any:
        print_step(4, f"Fetching matches for sample wallet #{wallet_index}")
        result = protocol.matches(self.backend, self.wallets[wallet_index].signer)
        print_json(result)
        return result

    def run(self) -> Any:
        print_header("SEISMIC TOMO SWIPE DEMO")
        if self.contract_address is None:
            self.deploy_contract()
        else:
            print_info(f"Reusing Swipe contract at {self.contract_address}")
        self.upgrade_contract()
        self.init_wallets()
        self.simulate_swipes()

        # Give transactions time to confirm
        self.sleep(self.config.confirmation_delay)
        return self.fetch_matches(self.config.display_wallet)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the Seismic swipe/match demo")
    parser.add_argument("--env-file", help="Path to the .env file holding ENDPOINT and DEV_PRIVKEY")
    parser.add_argument("--num-wallets", type=int, help="Number of demo wallets to derive")
    parser.add_argument("--display-wallet", type=int, help="Wallet whose matches are printed")
    parser.add_argument("--contract-address", help="Use this Swipe contract instead of deploying one")
    parser.add_argument("--no-delay", action="store_true", help="Do not wait for transactions to confirm")
    args = parser.parse_args(argv)

    overrides = {
        "num_wallets": args.num_wallets,
        "display_wallet": args.display_wallet,
        "contract_address": args.contract_address,
    }
    if args.no_delay:
        overrides.update(swipe_delay=0.0, confirmation_delay=0.0)

    try:
        config = load_config(args.env_file, **overrides)
        SwipeDemo(config).run()
    except (SwipeClientError, ValueError, RuntimeError, OSError, Web3Exception) as e:
        # Reverted or unmined transactions, missing artifact, unreachable RPC
        print_error(str(e))
        return 1

    print_success("Demo complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
