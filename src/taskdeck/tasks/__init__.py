"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Tag, NewTask, TaskPatch) + JSON boundary parsing
- task_cache.py: task list cache with confirm-then-resync mutations
- tag_cache.py: tag set cache, same protocol
- task_view.py: pure filter/sort engine + TaskView (criteria holder)
- overdue.py: overdue task detection and the dismissible alert
"""
