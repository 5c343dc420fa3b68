import threading
from collections.abc import Iterable, Iterator, Sequence

from .schemas.sql import InstanceRecord, ProjectResult


class ResultSet:
    """
    Ordered accumulation of InstanceRecords.

    Insertion order is preserved: project order, then page order, then
    order within a page. append() is the only mutation and holds a lock,
    so several writers may share one ResultSet.
    """

    def __init__(self) -> None:
        self._records: list[InstanceRecord] = []
        self._lock = threading.Lock()

    @classmethod
    def from_slots(cls, slots: Sequence[ProjectResult | None]) -> "ResultSet":
        """Flattens per-project results stored by original project position."""
        result_set = cls()
        for slot in slots:
            if slot is not None:
                result_set.append(slot.records)
        return result_set

    def append(self, records: Iterable[InstanceRecord]) -> None:
        batch = list(records)
        with self._lock:
            self._records.extend(batch)

    @property
    def records(self) -> tuple[InstanceRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[InstanceRecord]:
        return iter(self.records)
