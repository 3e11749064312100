"""Data models for better-rm.

This module exports the option and outcome types shared by the
deletion pipeline.
"""

from betterrm.models.options import RemoveOptions
from betterrm.models.outcome import DeletionAction, DeletionOutcome

__all__ = [
    "DeletionAction",
    "DeletionOutcome",
    "RemoveOptions",
]
