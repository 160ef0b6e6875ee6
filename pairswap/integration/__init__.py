"""
Snapshot encoding for distributing and restoring pool state
"""

from .pool_snapshot import POOL_SNAPSHOT_VERSION, PoolSnapshot, encode_record, snapshot_from_dict, snapshot_to_state

__all__ = [
    "POOL_SNAPSHOT_VERSION",
    "PoolSnapshot",
    "encode_record",
    "snapshot_from_dict",
    "snapshot_to_state",
]
