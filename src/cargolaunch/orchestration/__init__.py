"""
Orchestration of cargo runs into the top-level operations.
"""

from .cargo import Cargo

__all__ = [
    "Cargo",
]
