"""Action boundary: turn service calls into tagged success/error results.

Services raise ``DomainError`` subclasses the usual way; request handlers and
other callers go through :func:`run_action` so nothing raises past the
boundary and callers branch on ``ActionResult.code``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .exceptions import DomainError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "ActionResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str, code: str) -> "ActionResult":
        return cls(ok=False, error=error, code=code)

    def to_dict(self) -> dict:
        if self.ok:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error, "code": self.code}


def run_action(action: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> ActionResult:
    try:
        return ActionResult.success(fn(*args, **kwargs))
    except DomainError as e:
        logger.info("%s rejected (%s): %s", action, e.code, e)
        return ActionResult.failure(str(e), e.code)
    except Exception:
        logger.exception("Error in %s", action)
        return ActionResult.failure("An unexpected error occurred", INTERNAL_ERROR)
