"""Orchestration graph nodes."""

from .decompose import DecomposeNode
from .dispatch import DispatchNode
from .synthesize import ALL_FAILED_SUMMARY, SynthesizeNode

__all__ = ["ALL_FAILED_SUMMARY", "DecomposeNode", "DispatchNode", "SynthesizeNode"]
