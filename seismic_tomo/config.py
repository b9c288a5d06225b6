"""
Demo configuration.

Values come from the environment (a ``.env`` file is loaded first) and can
be overridden by keyword, e.g. from command line flags. The like/dislike
pairs are fixed: symmetric likes between #0, #1 and #2 should end in
matches, while the one-sided likes (#0 -> #3, #1 -> #4) and the dislike
#3 -> #0 should not.
"""

import os
from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

Pair = Tuple[int, int]

DEFAULT_LIKES: List[Pair] = [
    (0, 1),
    (1, 0),
    (0, 2),
    (2, 0),
    (1, 2),
    (2, 1),
    (0, 3),
    (1, 4),
]
DEFAULT_DISLIKES: List[Pair] = [(3, 0)]


@dataclass
class DemoConfig:
    backend_url: str
    signer_seed_key: str
    num_wallets: int = 5
    like_pairs: List[Pair] = field(default_factory=lambda: list(DEFAULT_LIKES))
    dislike_pairs: List[Pair] = field(default_factory=lambda: list(DEFAULT_DISLIKES))
    rpc_url: str = "http://localhost:8545"
    chain_id: int = 31337
    artifact_path: str = "../contract/out/Swipe.sol/Swipe.json"
    # Seconds to let each swipe transaction confirm
    swipe_delay: float = 10.0
    # Seconds to wait after the last swipe before asking for matches
    confirmation_delay: float = 15.0
    request_timeout: float = 30.0
    fund_amount_eth: float = 1.0
    display_wallet: int = 0
    # Reuse an already deployed Swipe contract instead of deploying one
    contract_address: Optional[str] = None

    def validate(self):
        """Raise ValueError if the configuration cannot drive a demo run"""
        if not self.backend_url:
            raise ValueError("Please set the ENDPOINT env variable to the Seismic backend URL.")
        if not self.signer_seed_key:
            raise ValueError("Please set demo privkey env variable.")
        try:
            int(self.signer_seed_key, 16)
        except ValueError:
            raise ValueError("Demo privkey must be a hex string.") from None
        if self.num_wallets < 1:
            raise ValueError(f"num_wallets must be positive, got {self.num_wallets}")

        for kind, pairs in (("like", self.like_pairs), ("dislike", self.dislike_pairs)):
            for sender, recipient in pairs:
                for index in (sender, recipient):
                    if not 0 <= index < self.num_wallets:
                        raise ValueError(f"{kind} pair [#{sender}, #{recipient}] references a wallet "
                                         f"outside 0..{self.num_wallets - 1}")
                if sender == recipient:
                    raise ValueError(f"Wallet #{sender} cannot {kind} itself")

        if not 0 <= self.display_wallet < self.num_wallets:
            raise ValueError(f"display_wallet #{self.display_wallet} is outside 0..{self.num_wallets - 1}")
        return self


def normalize_private_key(key: str) -> str:
    key = key.strip()
    if key and not key.startswith("0x"):
        key = "0x" + key
    return key


def load_config(env_file: Optional[str] = None, **overrides) -> DemoConfig:
    """Build a validated DemoConfig from the environment plus overrides (None values are ignored)"""
    load_dotenv(env_file or find_dotenv(usecwd=True))

    values = {
        "backend_url": os.getenv("ENDPOINT", ""),
        "signer_seed_key": normalize_private_key(os.getenv("DEV_PRIVKEY", "")),
    }
    env_options = {
        "num_wallets": ("NUM_WALLETS", int),
        "rpc_url": ("RPC_URL", str),
        "chain_id": ("CHAIN_ID", int),
        "artifact_path": ("SWIPE_ARTIFACT", str),
        "request_timeout": ("REQUEST_TIMEOUT", float),
        "fund_amount_eth": ("FUND_AMOUNT_ETH", float),
        "contract_address": ("SWIPE_CONTRACT", str),
    }
    for name, (env_var, cast) in env_options.items():
        raw = os.getenv(env_var)
        if raw:
            try:
                values[name] = cast(raw)
            except ValueError:
                raise ValueError(f"{env_var}={raw!r} is not a valid {cast.__name__}") from None

    known = {f.name for f in fields(DemoConfig)}
    for name, value in overrides.items():
        if name not in known:
            raise TypeError(f"Unknown config option: {name}")
        if value is not None:
            values[name] = value

    if "signer_seed_key" in overrides and overrides["signer_seed_key"]:
        values["signer_seed_key"] = normalize_private_key(values["signer_seed_key"])

    return DemoConfig(**values).validate()
