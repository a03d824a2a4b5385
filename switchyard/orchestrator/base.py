"""Base workflow classes using LangGraph.

Nodes are async callables returning partial state updates; workflows build
and compile a StateGraph once and run it asynchronously.
"""

from abc import ABC, abstractmethod
from typing import Any

from langgraph.graph import StateGraph

from .state import OrchestratorState


class NodeFunction(ABC):
    """Abstract base class for workflow node functions."""

    @abstractmethod
    async def __call__(self, state: OrchestratorState) -> dict[str, Any]:
        """Execute the node.

        Args:
            state: Current workflow state

        Returns:
            Partial state update
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the node name for registration with LangGraph."""
        pass


class WorkflowBase(ABC):
    """Abstract base class for LangGraph workflows."""

    def __init__(self) -> None:
        self._compiled_graph: Any | None = None

    @abstractmethod
    def build_graph(self) -> StateGraph:
        """Build the nodes and edges of the workflow.

        Returns:
            Configured StateGraph ready for compilation
        """
        pass

    def compile(self) -> Any:
        """Compile the workflow graph.

        Raises:
            RuntimeError: If graph compilation fails
        """
        if self._compiled_graph is not None:
            return self._compiled_graph

        try:
            self._compiled_graph = self.build_graph().compile()
            return self._compiled_graph
        except Exception as e:
            raise RuntimeError(f"Failed to compile workflow graph: {e}") from e

    async def aexecute(
        self,
        initial_state: OrchestratorState,
        config: dict[str, Any] | None = None
    ) -> OrchestratorState:
        """Run the workflow to completion and return the final state."""
        graph = self.compile()
        return await graph.ainvoke(initial_state, config=config or {})
