from __future__ import annotations

from datetime import timedelta
from typing import List

from task_synthesis.models import EmotionalState, OptimizedTaskSpec, SubtaskSpec


def subtask_titles(title: str, three_steps: bool) -> List[str]:
    if three_steps:
        return [
            f"Plan and prepare for: {title}",
            f"Start working on: {title}",
            f"Complete and review: {title}",
        ]
    return [f"Begin: {title}", f"Finish: {title}"]


class DecompositionPlanner:

    def plan(self, spec: OptimizedTaskSpec, emotion: EmotionalState) -> List[SubtaskSpec]:
        """Split the task into 3 steps (complex or overwhelmed) or 2 steps, or none.

        Subtasks are always `simple`. With a parent due date they are staggered
        one day apart, the last one due together with the parent.
        """
        if not spec.should_decompose:
            return []

        titles = subtask_titles(
            spec.title, spec.complexity == "complex" or emotion.is_overwhelmed
        )
        total = len(titles)
        subtasks = []
        for i, title in enumerate(titles):
            due_date = None
            if spec.due_date is not None:
                due_date = spec.due_date - timedelta(days=total - 1 - i)
            subtasks.append(
                SubtaskSpec(
                    title=title,
                    description=f"Part of: {spec.title}",
                    due_date=due_date,
                    priority="simple",
                    tags=[f"Sub-task {i + 1}/{total}", f"Part of: {spec.title}", *spec.tags],
                )
            )
        return subtasks
