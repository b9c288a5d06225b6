"""Client for the Seismic swipe/match demo."""

from .backend import SeismicBackend
from .config import DemoConfig, load_config
from .exceptions import BackendError, DataAvailabilityError, RegistrationError, SwipeClientError
from .protocol import davail, matches, nonce, register_swipe, swipe

__version__ = "0.1.0"

__all__ = [
    "SeismicBackend",
    "DemoConfig",
    "load_config",
    "SwipeClientError",
    "BackendError",
    "DataAvailabilityError",
    "RegistrationError",
    "nonce",
    "davail",
    "register_swipe",
    "swipe",
    "matches",
]
