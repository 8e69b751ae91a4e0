"""Audit log collaborators for sign operations."""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from app.config import settings
from app.models.audit import AuditRecord


class AuditLog(ABC):
    """Append-only store of audit records."""

    @abstractmethod
    def append(self, record: AuditRecord) -> None:
        """Persist one record. May raise; callers treat failures as non-fatal."""
        pass

    @abstractmethod
    def records(self, limit: int | None = None) -> list[AuditRecord]:
        """Return stored records, oldest first, optionally the last ``limit``."""
        pass


class InMemoryAuditLog(AuditLog):
    """Process-local audit log."""

    def __init__(self):
        self._records: list[AuditRecord] = []
        self._lock = threading.Lock()

    def append(self, record: AuditRecord) -> None:
        with self._lock:
            self._records.append(record)

    def records(self, limit: int | None = None) -> list[AuditRecord]:
        with self._lock:
            if limit is None:
                return self._records.copy()
            return self._records[-limit:] if limit > 0 else []

    def clear(self) -> None:
        """Clear the audit log (for testing)."""
        with self._lock:
            self._records.clear()


class JsonlAuditLog(AuditLog):
    """Audit log stored as one JSON object per line."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, record: AuditRecord) -> None:
        line = json.dumps(record.to_json_dict(), sort_keys=True)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def records(self, limit: int | None = None) -> list[AuditRecord]:
        with self._lock:
            if not self.path.exists():
                return []
            with open(self.path, encoding="utf-8") as f:
                lines = [line for line in f if line.strip()]
        if limit is not None:
            lines = lines[-limit:] if limit > 0 else []
        return [AuditRecord.model_validate(json.loads(line)) for line in lines]


def create_audit_log() -> AuditLog:
    """Build the audit log configured in settings."""
    if settings.audit_log_path:
        return JsonlAuditLog(settings.audit_log_path)
    return InMemoryAuditLog()
