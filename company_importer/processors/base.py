"""Base processor for company imports."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Iterable, List, Tuple, TypeVar, Generic
import logging
import time

from ..db.store import CompanyStore

class ProcessingStats:
    """Counters and timings for one processing run.

    Counters are created on first access, so processors can track
    ``stats.companies_inserted += 1`` without declaring them up front.
    """

    def __init__(self):
        self._stats = {
            'total_processed': 0,
            'total_errors': 0,
            'processing_time': 0.0,
            'db_operation_time': 0.0,
            'started_at': datetime.utcnow(),
            'completed_at': None
        }

    def __getattr__(self, name: str) -> Any:
        if name.startswith('__'):
            raise AttributeError(name)
        return self._stats.setdefault(name, 0)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == '_stats':
            super().__setattr__(name, value)
        else:
            self._stats[name] = value

    def increment(self, name: str, amount: int = 1) -> None:
        self._stats[name] = self._stats.get(name, 0) + amount

    def to_dict(self) -> Dict[str, Any]:
        """Stats with timestamps as ISO strings and timings rounded to ms."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, float):
                value = round(value, 3)
            result[key] = value
        return result

# Record type handled by a concrete processor
T = TypeVar('T')

class BaseProcessor(ABC, Generic[T]):
    """Abstract base class for record processors.

    Records are written one at a time, in the order returned by
    ``order_records``. A failing record stops the run and the error is
    re-raised to the caller; records written before it stay committed.
    """

    def __init__(self, store: CompanyStore, debug: bool = False):
        """Initialize processor with a store.

        Args:
            store: Company record store
            debug: Enable debug logging
        """
        self.store = store
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ProcessingStats()

    @abstractmethod
    def validate_data(self, records: List[T]) -> Tuple[List[str], List[str]]:
        """Check records before anything is written.

        Returns:
            Tuple of (critical_issues, warnings)
        """

    @abstractmethod
    def _process_record(self, record: T) -> str:
        """Persist a single record and return the name of the stat to count it under."""

    def order_records(self, records: List[T]) -> Iterable[T]:
        """Return records in the order they must be written."""
        return records

    def process(self, records: List[T]) -> Dict[str, Any]:
        """Write every record and return the run statistics.

        Raises:
            ValueError: If validation finds critical issues
            Exception: Whatever the first failing record raised
        """
        start_time = time.time()
        critical_issues, warnings = self.validate_data(records)

        for warning in warnings:
            self.logger.warning(warning)

        if critical_issues:
            for issue in critical_issues:
                self.logger.error(issue)
            self.stats.increment('total_errors', len(critical_issues))
            raise ValueError("; ".join(critical_issues))

        total = len(records)
        for position, record in enumerate(self.order_records(records), 1):
            record_start = time.time()
            try:
                action = self._process_record(record)
            except Exception as e:
                self.logger.error(f"Record {position}/{total} failed: {e}")
                if self.debug:
                    self.logger.debug(f"Failed record: {record}")
                self.stats.increment('total_errors')
                self.stats.completed_at = datetime.utcnow()
                raise

            self.stats.db_operation_time += time.time() - record_start
            self.stats.increment('total_processed')
            self.stats.increment(action)

        self.stats.processing_time = time.time() - start_time
        self.stats.completed_at = datetime.utcnow()

        if self.debug:
            self.logger.debug(
                f"Processed {total} records in {self.stats.processing_time:.3f}s "
                f"({self.stats.db_operation_time:.3f}s in the store)"
            )

        return self.get_stats()

    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        return self.stats.to_dict()
