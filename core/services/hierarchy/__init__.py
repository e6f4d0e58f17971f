from .builder import DEFAULT_MAX_NESTING_LEVEL, assign_hierarchy, build_task_tree, flatten_task_tree

__all__ = ["DEFAULT_MAX_NESTING_LEVEL", "assign_hierarchy", "build_task_tree", "flatten_task_tree"]
