# core/collection.py

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

class Collection(Generic[T]):
    """
    An insertion-ordered map of id -> record with its own id counter.
    Records handed out are copies, so callers can't change stored state behind the store's back.
    """

    def __init__(self):
        self._records: Dict[int, T] = {}
        self._next_id = 1

    def next_id(self) -> int:
        """Reserves the next id. Ids are never handed out twice, even after a delete."""
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def get(self, record_id: int) -> Optional[T]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def put(self, record: T) -> T:
        # Re-putting an existing id keeps its original position in iteration order.
        self._records[record.id] = record.model_copy(deep=True)
        return record

    def remove(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Returns the first record (in insertion order) matching the predicate."""
        for record in self._records.values():
            if predicate(record):
                return record.model_copy(deep=True)
        return None

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [r.model_copy(deep=True) for r in self._records.values() if predicate(r)]

    def all(self) -> List[T]:
        return [r.model_copy(deep=True) for r in self._records.values()]

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: int) -> bool:
        return record_id in self._records
