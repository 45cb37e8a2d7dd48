"""Muscle recovery — per-muscle recovery state from recent training history."""

from .engine import RecoveryResult, recompute

__all__ = ["RecoveryResult", "recompute"]
