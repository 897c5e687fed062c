from typing import Optional


class TaskError(Exception):
    """Base class for task domain errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(TaskError):
    """Input rejected by a business rule."""


class NotFoundError(TaskError):
    """No task exists for the requested id."""

    def __init__(self, task_id: Optional[int] = None):
        self.task_id = task_id
        message = f"Task {task_id} not found" if task_id is not None else "Task not found"
        super().__init__(message)
