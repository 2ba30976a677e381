"""In-process memory of completed encode jobs, keyed by content checksum."""

from __future__ import annotations

import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult

DEFAULT_MAX_JOBS = 1000


def generate_job_id() -> str:
    """Return ``job_<epoch-ms>_<6 hex>``."""
    return f"job_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


@dataclass(frozen=True)
class JobRecord:
    """A stored conversion with the rendering choices it was produced for."""

    id: str
    result: ConversionResult
    checksum: str
    format_name: str
    options: RenderOptions
    filename: str | None = None
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class JobMemoryStats:
    """Snapshot of job memory occupancy."""

    total_jobs: int
    max_jobs: int
    oldest_timestamp: float | None
    newest_timestamp: float | None


class JobMemory:
    """Least-recently-used job store.

    Parameters
    ----------
    max_jobs : int, default=1000
        Capacity. Inserting beyond it evicts the least recently used job.
    """

    def __init__(self, max_jobs: int = DEFAULT_MAX_JOBS) -> None:
        if max_jobs <= 0:
            raise ValueError("max_jobs must be > 0")
        self.max_jobs = max_jobs
        self._jobs: OrderedDict[str, JobRecord] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def set(self, record: JobRecord) -> None:
        """Store ``record`` as the most recently used job."""
        with self._lock:
            self._jobs.pop(record.id, None)
            self._jobs[record.id] = record
            while len(self._jobs) > self.max_jobs:
                self._jobs.popitem(last=False)

    def get(self, job_id: str) -> JobRecord | None:
        """Return a job by id and mark it most recently used."""
        with self._lock:
            record = self._jobs.get(job_id)
            if record is not None:
                self._jobs.move_to_end(job_id)
            return record

    def find(
        self,
        checksum: str,
        format_name: str,
        options: RenderOptions,
    ) -> JobRecord | None:
        """Return the newest job matching checksum, format and options."""
        key = options.cache_key()
        fmt = format_name.strip().lower()
        with self._lock:
            for record in reversed(self._jobs.values()):
                if (
                    record.checksum == checksum
                    and record.format_name == fmt
                    and record.options.cache_key() == key
                ):
                    self._jobs.move_to_end(record.id)
                    return record
        return None

    def recent(self, limit: int | None = None) -> list[JobRecord]:
        """Return jobs newest first by timestamp."""
        with self._lock:
            records = sorted(self._jobs.values(), key=lambda item: item.timestamp, reverse=True)
        return records if limit is None else records[:limit]

    def clear(self) -> int:
        """Drop every job and return how many were removed."""
        with self._lock:
            count = len(self._jobs)
            self._jobs.clear()
            return count

    def stats(self) -> JobMemoryStats:
        """Return occupancy and the timestamp range of stored jobs."""
        with self._lock:
            timestamps = [record.timestamp for record in self._jobs.values()]
        return JobMemoryStats(
            total_jobs=len(timestamps),
            max_jobs=self.max_jobs,
            oldest_timestamp=min(timestamps) if timestamps else None,
            newest_timestamp=max(timestamps) if timestamps else None,
        )
