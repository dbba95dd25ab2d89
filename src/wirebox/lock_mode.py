from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for memoized factory cache slots.

    Pass a value to ``Container(lock_mode=...)``. Every container derived from
    it (through ``provides``, ``append``, ``copy`` and friends) keeps the same
    mode, and so do the memoized factories created for those containers.
    """

    THREAD = "thread"
    """Guard first resolution with ``threading.Lock`` so a factory runs exactly once."""

    NONE = "none"
    """Disable locking around cache writes for single-threaded programs."""
