import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Optional

from models.resume_models import ResumeRecord


class ResumeStore(ABC):
    """Storage interface for uploaded resumes"""

    @abstractmethod
    def put(self, resume_id: str, record: ResumeRecord) -> None:
        ...

    @abstractmethod
    def get(self, resume_id: str) -> Optional[ResumeRecord]:
        ...


class InMemoryResumeStore(ResumeStore):
    def __init__(self):
        self._records: Dict[str, ResumeRecord] = {}
        self._lock = threading.Lock()

    def put(self, resume_id: str, record: ResumeRecord) -> None:
        with self._lock:
            self._records[resume_id] = record

    def get(self, resume_id: str) -> Optional[ResumeRecord]:
        with self._lock:
            return self._records.get(resume_id)

    def __len__(self):
        with self._lock:
            return len(self._records)


def new_record(file_name: str, content: str) -> ResumeRecord:
    """Build a record with a fresh random id"""
    return ResumeRecord(
        id=uuid.uuid4().hex,
        file_name=file_name,
        content=content,
        uploaded_at=datetime.now(timezone.utc).isoformat(),
    )
