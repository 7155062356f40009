"""
Outer surfaces around the quoting core: registry snapshots and the HTTP API.
"""

from .snapshot import RegistrySnapshot, registry_from_snapshot, snapshot_from_registry

__all__ = [
    "RegistrySnapshot",
    "registry_from_snapshot",
    "snapshot_from_registry",
]
