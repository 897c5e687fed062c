import logging
from typing import List, Optional

from .crud import TaskRepository
from .exceptions import NotFoundError, ValidationError
from .models import Task, TaskStatus, utcnow
from .schemas import TaskCreate, TaskStatistics, TaskUpdate

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class TaskService:
    """Business rules for tasks. Persistence goes through the repository."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def list_all(self) -> List[Task]:
        return self.repository.list_all_ordered_by_creation_desc()

    def find_by_id(self, task_id: int) -> Optional[Task]:
        return self.repository.find_by_id(task_id)

    def create(self, data: TaskCreate) -> Task:
        if _is_blank(data.title):
            raise ValidationError("Task title is required")

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status or TaskStatus.PENDING,
            created_at=utcnow(),
        )
        task = self.repository.save(task)
        logger.info("Created task %s (%s)", task.id, task.status.label)
        return task

    def update(self, task_id: int, data: TaskUpdate) -> Task:
        task = self.repository.find_by_id(task_id)
        if task is None:
            raise NotFoundError(task_id)

        if data.title is not None:
            if _is_blank(data.title):
                raise ValidationError("Task title cannot be blank")
            task.title = data.title
        if data.description is not None:
            task.description = data.description
        if data.status is not None:
            task.status = data.status
        task.updated_at = utcnow()

        task = self.repository.save(task)
        logger.info("Updated task %s (%s)", task.id, task.status.label)
        return task

    def delete(self, task_id: int) -> None:
        if not self.repository.exists_by_id(task_id):
            raise NotFoundError(task_id)
        self.repository.delete_by_id(task_id)
        logger.info("Deleted task %s", task_id)

    def filter_by_status(self, status: TaskStatus) -> List[Task]:
        return self.repository.find_by_status(status)

    def search_by_title(self, fragment: str) -> List[Task]:
        return self.repository.find_by_title_contains(fragment)

    def statistics(self) -> TaskStatistics:
        return TaskStatistics(
            pending=self.repository.count_by_status(TaskStatus.PENDING),
            in_progress=self.repository.count_by_status(TaskStatus.IN_PROGRESS),
            done=self.repository.count_by_status(TaskStatus.DONE),
        )
