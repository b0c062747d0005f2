"""Synchronization defaults for import runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env_var

DEFAULT_BATCH_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Number of target writes between two commits."""

    batch_size: int = DEFAULT_BATCH_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig(batch_size=optional_int_env_var("RECORDSYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE))
