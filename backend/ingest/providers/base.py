"""
Result container and best-effort runners for enrichment steps.

Every step after the matches-list fetch is allowed to fail: the failure is
logged and counted, and the step reports an absent value so the pipeline can
carry on with whatever it already has.
"""
from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from shared.models.enums import Step
from shared.utils.logging import get_logger
from shared.utils.metrics import ENRICHMENT_FAILURES

logger = get_logger(__name__)

T = TypeVar("T")


class StepResult(Generic[T]):
    """Outcome of one pipeline step: a value, or absent with the reason."""

    def __init__(
        self,
        step: Step,
        success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        latency_ms: float = 0.0,
    ) -> None:
        self.step = step
        self.success = success
        self.value = value
        self.error = error
        self.latency_ms = latency_ms

    @classmethod
    def ok(cls, step: Step, value: Optional[T]) -> "StepResult[T]":
        return cls(step=step, success=True, value=value)

    @classmethod
    def failed(cls, step: Step, error: str) -> "StepResult[T]":
        return cls(step=step, success=False, error=error)

    @property
    def present(self) -> bool:
        """True when the step succeeded and produced a value."""
        return self.success and self.value is not None

    def value_or(self, default: T) -> T:
        return self.value if self.present else default

    def __repr__(self) -> str:
        state = "ok" if self.success else f"failed: {self.error}"
        return f"StepResult({self.step.value}, {state})"


def _record_failure(step: Step, exc: Exception, context: dict[str, Any]) -> StepResult[Any]:
    ENRICHMENT_FAILURES.labels(step=step.value).inc()
    logger.warning(
        "enrichment_step_failed",
        step=step.value,
        error=str(exc),
        error_type=exc.__class__.__name__,
        **context,
    )
    return StepResult.failed(step, str(exc))


async def run_step(
    step: Step,
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> StepResult[T]:
    """Await ``fn`` and wrap its return value; any exception degrades to an absent result."""
    start = time.perf_counter()
    try:
        value = await fn(*args, **kwargs)
    except Exception as exc:
        result = _record_failure(step, exc, context or {})
    else:
        result = StepResult.ok(step, value)
    result.latency_ms = (time.perf_counter() - start) * 1000
    return result


def run_sync_step(
    step: Step,
    fn: Callable[..., T],
    *args: Any,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> StepResult[T]:
    """Synchronous counterpart of :func:`run_step` for pure derivations."""
    try:
        return StepResult.ok(step, fn(*args, **kwargs))
    except Exception as exc:
        return _record_failure(step, exc, context or {})
