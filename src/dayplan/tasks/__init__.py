"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category, Scope, RecurrenceRule, ...)
- series.py: expands a recurrence rule into dated task instances
- views.py: per-category / per-day sorted slices of the collection
- scope.py: SINGLE / FUTURE / ALL resolution for series edits and deletes
- coordinator.py: add/edit/delete/toggle state machine over the collection
- task_store.py: SQLite-backed load/save boundary
"""
