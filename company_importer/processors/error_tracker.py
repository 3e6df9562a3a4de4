"""Error tracking and aggregation for CLI commands."""

from collections import defaultdict
from typing import Any, Dict, Optional, Set
import logging

class ErrorTracker:
    """Track and aggregate errors by type, keeping a few samples of each."""

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of samples to store per error type
        """
        self.error_counts = defaultdict(int)
        self.error_samples = defaultdict(list)
        self.max_samples = max_samples
        self.seen_errors: Set[str] = set()

    def add_error(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Add an error occurrence; repeats of the same message are counted once.

        Args:
            error_type: Category/type of error
            message: Error message
            context: Optional context data for the error
        """
        error_key = f"{error_type}:{message}"
        if error_key in self.seen_errors:
            return

        self.seen_errors.add(error_key)
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({
                'message': message,
                'context': context or {}
            })

    def first_message(self) -> Optional[str]:
        """Return the first recorded error message, if any."""
        for samples in self.error_samples.values():
            if samples:
                return samples[0]['message']
        return None

    def log_summary(self, logger: logging.Logger) -> None:
        """Log error summary at warning level."""
        if not self.error_counts:
            return

        logger.warning("Error Summary:")
        for error_type, count in self.error_counts.items():
            logger.warning(f"{error_type} ({count} occurrences):")
            for i, sample in enumerate(self.error_samples[error_type], 1):
                logger.warning(f"  Sample {i}: {sample['message']}")
                for key, value in sample['context'].items():
                    logger.warning(f"    {key}: {value}")
