"""Prompts for task decomposition and synthesis."""

from ..core.domain.tasks import WorkerResult

DECOMPOSE_PROMPT = """You are a task decomposer for a multi-agent system.
Given a complex task, break it into parallelizable sub-tasks. Each sub-task must be assigned to exactly one worker.

Available workers:
{workers}

Rules:
- Only include workers that are genuinely needed for this task
- Sub-tasks must be independent of each other
- Each payload must be a JSON object; put the instruction for the worker in "task"
- If the task only needs one worker, return just one sub-task
- Maximum {max_subtasks} sub-tasks

Respond ONLY with a valid JSON array. No explanation, no markdown fences. Example:
[
  {{"worker": "research", "label": "Research X", "payload": {{"task": "..."}}}},
  {{"worker": "dev", "label": "Write Y function", "payload": {{"task": "..."}}}}
]"""

SYNTHESIS_PROMPT = """You are the orchestrator of a multi-agent system.
You have received results from multiple specialist workers that ran in parallel.
Synthesize their outputs into a single, coherent, actionable response for the user.
Be concise. Lead with the most important findings. Use markdown formatting where helpful.
If any worker failed, acknowledge it briefly but don't dwell on it."""


def build_decompose_message(task: str, context: str = "") -> str:
    lines = [f"Task: {task}"]
    if context:
        lines.append(f"Context: {context}")
    return "\n".join(lines)


def format_worker_outputs(results: list[WorkerResult]) -> str:
    """Labeled worker outputs, failures included."""
    sections = []
    for result in results:
        title = result.label or result.worker
        if result.success:
            sections.append(f"## {title}\n{result.output_text()}")
        else:
            sections.append(f"## {title} - FAILED\n{result.output_text()}")
    return "\n\n".join(sections)


def build_synthesis_message(task: str, results: list[WorkerResult]) -> str:
    return f"Original task: {task}\n\nWorker outputs:\n{format_worker_outputs(results)}"
