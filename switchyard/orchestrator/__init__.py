"""Orchestrator - decompose a task, run workers in parallel, synthesize."""

from .nodes import ALL_FAILED_SUMMARY, DecomposeNode, DispatchNode, SynthesizeNode
from .state import OrchestratorState, Stage
from .workflow import NO_PLAN_SUMMARY, Orchestrator, OrchestratorWorkflow

__all__ = [
    "ALL_FAILED_SUMMARY",
    "NO_PLAN_SUMMARY",
    "DecomposeNode",
    "DispatchNode",
    "Orchestrator",
    "OrchestratorState",
    "OrchestratorWorkflow",
    "Stage",
    "SynthesizeNode",
]
