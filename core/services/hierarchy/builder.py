from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from core.domain.task import Task, iter_task_tree
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_NESTING_LEVEL = 100

TaskRecord = Union[Task, dict]


def _as_task(record: TaskRecord) -> Task:
    return record if isinstance(record, Task) else Task.from_dict(record)


def flatten_task_tree(tasks: Iterable[Task]) -> List[Task]:
    return list(iter_task_tree(tasks))


def build_task_tree(
    records: Iterable[TaskRecord],
    max_nesting_level: int = DEFAULT_MAX_NESTING_LEVEL,
) -> List[Task]:
    """
    Nest a flat list of task records under their ``parent_task_id``.

    Tasks are kept in an id-addressed arena and nested with an iterative
    pre-order walk from the roots; ``level`` is assigned from depth. Records
    whose parent is unknown become roots. Already nested input is flattened
    first, so both shapes are accepted.
    """
    arena: Dict[str, Task] = {}
    pending = [(_as_task(r), None) for r in reversed(list(records))]
    while pending:
        task, nested_under = pending.pop()
        if task.id in arena:
            raise ValidationError(f"Duplicate task id {task.id}", code="TASK_DUPLICATE_ID")
        if nested_under is not None and task.parent_task_id is None:
            task.parent_task_id = nested_under
        arena[task.id] = task
        pending.extend((child, task.id) for child in reversed(task.subtasks))

    children: Dict[Optional[str], List[Task]] = {}
    for task in arena.values():
        parent_id = task.parent_task_id if task.parent_task_id in arena else None
        if parent_id is None and task.parent_task_id is not None:
            logger.warning("Task %s references unknown parent %s; treating as root", task.id, task.parent_task_id)
            task.parent_task_id = None
        children.setdefault(parent_id, []).append(task)

    roots = children.get(None, [])
    placed = 0
    stack = [(task, 0) for task in reversed(roots)]
    while stack:
        task, level = stack.pop()
        if level > max_nesting_level:
            raise ValidationError(
                f"Task {task.id} exceeds the maximum nesting level of {max_nesting_level}",
                code="TASK_NESTING_TOO_DEEP",
            )
        task.level = level
        task.subtasks = list(children.get(task.id, []))
        placed += 1
        stack.extend((child, level + 1) for child in reversed(task.subtasks))

    if placed != len(arena):
        raise ValidationError("Task hierarchy contains a cycle.", code="TASK_HIERARCHY_CYCLE")
    return roots


def assign_hierarchy(tasks: Iterable[Task], project_id: Optional[str] = None) -> None:
    """Stamp ``parent_task_id``, ``level`` and (optionally) ``project_id`` down a nested tree."""
    stack = [(task, None, 0) for task in reversed(list(tasks))]
    while stack:
        task, parent_id, level = stack.pop()
        task.parent_task_id = parent_id
        task.level = level
        if project_id is not None:
            task.project_id = project_id
        stack.extend((child, task.id, level + 1) for child in reversed(task.subtasks))


__all__ = [
    "DEFAULT_MAX_NESTING_LEVEL",
    "build_task_tree",
    "flatten_task_tree",
    "assign_hierarchy",
]
