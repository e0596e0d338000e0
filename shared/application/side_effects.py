"""
Best-effort side effects

Some work triggered by a request (view counters, notification e-mails,
realtime pushes) must never fail the request that caused it. Wrapping the
call in ``best_effort`` logs the failure and lets the primary operation
finish normally.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def best_effort(
    func: Callable[..., T],
    *args: Any,
    description: str = "",
    **kwargs: Any,
) -> Optional[T]:
    """
    Run ``func`` and swallow any exception after logging it.

    Returns the function result, or ``None`` when it raised.
    """
    try:
        return func(*args, **kwargs)
    except Exception as exc:  # noqa: BLE001
        label = description or getattr(func, "__name__", repr(func))
        logger.warning(f"Side effect '{label}' failed: {exc}", exc_info=True)
        return None
