"""
KeyMint client library

Async wrapper around the KeyMint license-management API: license key
lifecycle (create, activate, deactivate, inspect, block, unblock) and
customer management. Every failure is raised as KeyMintApiError.
"""

from keymint.errors import ConfigurationError, KeyMintApiError, KeyMintError
from keymint.hardware_fingerprint import (
    activation_params,
    deactivation_params,
    get_device_tag,
    get_host_id,
)
from keymint.license_client import KeyMintClient

__version__ = "1.0.0"

__all__ = [
    "KeyMintClient",
    "KeyMintError",
    "KeyMintApiError",
    "ConfigurationError",
    "get_host_id",
    "get_device_tag",
    "activation_params",
    "deactivation_params",
]
