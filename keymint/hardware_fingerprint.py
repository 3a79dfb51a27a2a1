"""
Host identification for key activation.

KeyMint counts activations per hostId, so the same machine must send the
same hostId every time. These helpers derive one from the network
hardware and build activation/deactivation params for the current host.
"""

import hashlib
import platform
import uuid
from typing import List, Optional

import psutil

from keymint.models import ActivateKeyParams, DeactivateKeyParams

_NULL_MAC = "00:00:00:00:00:00"

def _hardware_addresses() -> List[str]:
    addresses = set()
    for nic_addresses in psutil.net_if_addrs().values():
        for address in nic_addresses:
            if address.family != psutil.AF_LINK or not address.address:
                continue
            mac = address.address.lower().replace("-", ":")
            if mac != _NULL_MAC:
                addresses.add(mac)

    if not addresses:
        # No readable NIC (containers, restricted sandboxes)
        addresses.add(f"{uuid.getnode():012x}")
    return sorted(addresses)

def get_host_id() -> str:
    """
    Stable hostId: SHA-256 over sorted MAC addresses plus the OS and architecture.
    """
    parts = _hardware_addresses() + [platform.system(), platform.machine()]
    return hashlib.sha256("|".join(parts).encode()).hexdigest()

def get_device_tag() -> str:
    hostname = platform.node() or "unknown-host"
    return f"{hostname} ({platform.system()} {platform.machine()})"

def activation_params(
    product_id: str, license_key: str, device_tag: Optional[str] = None
) -> ActivateKeyParams:
    """
    Params for activating `license_key` on this machine.
    The device tag defaults to get_device_tag().
    """
    return ActivateKeyParams(
        productId=product_id,
        licenseKey=license_key,
        hostId=get_host_id(),
        deviceTag=device_tag or get_device_tag(),
    )

def deactivation_params(product_id: str, license_key: str) -> DeactivateKeyParams:
    """
    Params for releasing this machine's activation only, leaving other devices active.
    """
    return DeactivateKeyParams(productId=product_id, licenseKey=license_key, hostId=get_host_id())
