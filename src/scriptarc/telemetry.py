"""Telemetry context and reporter interfaces.

Scopes nest (``generator.research`` → ``retry.attempt``) and report their
duration to every reporter on exit. With no reporters and no opt-in flag the
factory hands back a shared no-op context, so instrumented code pays almost
nothing when telemetry is off.

Opt in either by passing reporters explicitly or by setting
``SCRIPTARC_TELEMETRY=1`` (``DEBUG=1`` also works), which attaches a reporter
that writes to the ``scriptarc.telemetry`` logger at DEBUG level.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar(
    "scriptarc_scope_stack",
    default=(),
)


def telemetry_enabled() -> bool:
    """Return True when telemetry is switched on through the environment."""
    return os.getenv("SCRIPTARC_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Stateless stand-in used when telemetry is off."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return None

    @property
    def enabled(self) -> bool:
        return False

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass

    def gauge(self, name: str, value: float, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    """Telemetry context that forwards scopes and metrics to reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    @property
    def enabled(self) -> bool:
        return True

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager[_EnabledTelemetryContext]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator[_EnabledTelemetryContext]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")

        stack = _scope_stack_var.get()
        scope_path = ".".join((*stack, name))
        token = _scope_stack_var.set((*stack, name))
        start = time.perf_counter()
        failed = False
        try:
            yield self
        except BaseException:
            failed = True
            raise
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            self._emit(
                "record_timing",
                scope_path,
                duration,
                depth=len(stack),
                failed=failed,
                **metadata,
            )

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a metric under the current scope path."""
        scope_path = ".".join((*_scope_stack_var.get(), name))
        self._emit("record_metric", scope_path, value, **metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter increment."""
        self.metric(name, increment, metric_type="counter", **metadata)

    def gauge(self, name: str, value: float, **metadata: Any) -> None:
        """Record a gauge value."""
        self.metric(name, value, metric_type="gauge", **metadata)

    def _emit(self, method: str, scope: str, value: Any, **metadata: Any) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


type TelemetryContextProtocol = _EnabledTelemetryContext | _NoOpTelemetryContext

_NO_OP_SINGLETON = _NoOpTelemetryContext()


class LoggingReporter:
    """Reporter that writes every timing and metric to the module logger."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        log.debug("timing %s %.4fs %s", scope, duration, metadata)

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        log.debug("metric %s=%r %s", scope, value, metadata)


class InMemoryReporter:
    """Collects timings and metrics in memory; handy in tests and notebooks."""

    def __init__(self) -> None:
        self.timings: dict[str, list[float]] = defaultdict(list)
        self.metrics: dict[str, list[Any]] = defaultdict(list)

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:  # noqa: ARG002
        self.timings[scope].append(duration)

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:  # noqa: ARG002
        self.metrics[scope].append(value)

    def total(self, scope: str) -> float:
        """Sum of numeric metric values recorded under ``scope``."""
        return sum(v for v in self.metrics.get(scope, ()) if isinstance(v, int | float))


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return a telemetry context.

    Explicit reporters always enable telemetry. Without reporters, the
    environment flag decides between a logging context and the shared no-op.
    """
    if reporters:
        return _EnabledTelemetryContext(*reporters)
    if telemetry_enabled():
        return _EnabledTelemetryContext(LoggingReporter())
    return _NO_OP_SINGLETON
