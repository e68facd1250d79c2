"""Sequential batch runner with per-item failure isolation.

Each item is processed to completion before the next starts. A failing item
is recorded and the loop moves on; nothing is retried and the batch cannot be
cancelled once started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, TypeVar

from ..core.exceptions import DomainError
from ..core.results import INTERNAL_ERROR

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BulkItemError:
    item: Any
    error: str
    code: str

    def to_dict(self) -> dict:
        return {"item": self.item, "error": self.error, "code": self.code}


@dataclass
class BulkOutcome:
    succeeded: List[Any] = field(default_factory=list)
    failed: List[BulkItemError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def to_dict(self, serialize: Callable[[Any], Any] = lambda v: v) -> dict:
        return {
            "succeeded": [serialize(v) for v in self.succeeded],
            "failed": [f.to_dict() for f in self.failed],
            "successCount": self.success_count,
            "failureCount": self.failure_count,
        }


class BulkCoordinator:
    def run(self, items: Iterable[T], operation: Callable[[T], Any], *, label: str = "bulk") -> BulkOutcome:
        outcome = BulkOutcome()
        for item in items:
            try:
                outcome.succeeded.append(operation(item))
            except DomainError as e:
                outcome.failed.append(BulkItemError(item=item, error=str(e), code=e.code))
            except Exception as e:
                logger.exception("%s: unexpected error on item %r", label, item)
                outcome.failed.append(BulkItemError(item=item, error=str(e) or type(e).__name__, code=INTERNAL_ERROR))

        if outcome.failed:
            logger.warning(
                "%s finished with failures: %d succeeded, %d failed",
                label,
                outcome.success_count,
                outcome.failure_count,
            )
        else:
            logger.info("%s finished: %d succeeded", label, outcome.success_count)
        return outcome
