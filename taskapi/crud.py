from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Task, TaskStatus


class TaskRepository:
    """Query functions over the tasks table. No business rules live here."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, task_id: int) -> Optional[Task]:
        return self.db.get(Task, task_id)

    def find_by_status(self, status: TaskStatus) -> List[Task]:
        return self.db.query(Task).filter(Task.status == status).all()

    def find_by_title_contains(self, fragment: str) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(func.lower(Task.title).contains(fragment.lower(), autoescape=True))
            .all()
        )

    def list_all_ordered_by_creation_desc(self) -> List[Task]:
        return self.db.query(Task).order_by(Task.created_at.desc(), Task.id.desc()).all()

    def count_by_status(self, status: TaskStatus) -> int:
        return self.db.query(func.count(Task.id)).filter(Task.status == status).scalar()

    def save(self, task: Task) -> Task:
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_by_id(self, task_id: int) -> None:
        task = self.db.get(Task, task_id)
        if task is not None:
            self.db.delete(task)
            self.db.commit()

    def exists_by_id(self, task_id: int) -> bool:
        return self.db.query(Task.id).filter(Task.id == task_id).first() is not None
