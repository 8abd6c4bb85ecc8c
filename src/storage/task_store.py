from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Protocol

from task_synthesis.errors import PersistenceFailure
from task_synthesis.models import TaskRecord


class TaskStore(Protocol):
    def create(self, record: TaskRecord) -> TaskRecord:
        """Persist `record` and return it with `id` and `created_at` assigned."""
        ...


def _assign_identity(record: TaskRecord) -> TaskRecord:
    return record.model_copy(
        update={"id": str(uuid.uuid4()), "created_at": datetime.now()}
    )


class InMemoryTaskStore:
    def __init__(self):
        self._records: List[TaskRecord] = []
        self._lock = threading.Lock()

    def create(self, record: TaskRecord) -> TaskRecord:
        saved = _assign_identity(record)
        with self._lock:
            self._records.append(saved)
        return saved

    def list(self) -> List[TaskRecord]:
        with self._lock:
            return list(self._records)


class JsonFileTaskStore:
    """Keeps every task in one JSON array on disk."""

    def __init__(self, path: str = "data/tasks.json"):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> List[TaskRecord]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return [TaskRecord.model_validate(item) for item in data]

    def list(self) -> List[TaskRecord]:
        """
        Load tasks from disk. Returns an empty list if the file is missing or invalid.
        """
        try:
            return self._load()
        except Exception:
            return []

    def create(self, record: TaskRecord) -> TaskRecord:
        saved = _assign_identity(record)
        with self._lock:
            try:
                records = self._load()
                records.append(saved)
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(
                    json.dumps(
                        [r.model_dump(mode="json") for r in records],
                        ensure_ascii=False,
                        indent=2,
                    ),
                    encoding="utf-8",
                )
            except (OSError, TypeError, ValueError) as e:
                raise PersistenceFailure(f"could not update {self.path}: {e}") from e
        return saved
