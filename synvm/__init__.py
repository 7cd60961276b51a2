"""
synvm: a 15-bit word virtual machine with an input-stream debugger.

Use ``python -m synvm program.bin`` or the ``synvm`` console script to run a
program image.
"""

from __future__ import annotations

from .errors import SnapshotError, VMFault
from .memory import Memory
from .snapshot import Snapshot
from .vm import VM

__all__ = ["VM", "Memory", "Snapshot", "VMFault", "SnapshotError"]
__version__ = "0.1.0"
