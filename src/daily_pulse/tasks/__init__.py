"""
Task subsystem.

Components:
- task_models.py: data structures (Task, BoardState, commands)
- scoring.py: pure productivity score arithmetic
- task_store.py: pure reducer + in-memory TaskStore
- stats.py: streak and planner statistics
- reminder_scheduler.py / end_of_day.py / weekend_planning.py: background processes
- task_api.py: weekly planning helpers
- board_io.py: JSON snapshot of the board
"""
