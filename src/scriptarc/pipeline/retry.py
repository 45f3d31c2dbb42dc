"""Retry and fallback execution for remote generation calls.

Two primitives:

- ``run_with_retry`` runs one operation under a ``RetryPolicy``: the initial
  attempt plus up to ``max_attempts`` retries, sleeping
  ``policy.delay_for(k)`` before retry ``k``. When every attempt fails the
  last error is re-raised unchanged.
- ``run_with_fallback`` walks a ``FallbackPlan`` in order, only moving to the
  next variant after the previous one exhausted its retries.

Error kinds are not inspected: transport failures and malformed replies are
retried alike. Callers who need a different policy per error must encode it in
the operation they pass in. Cancellation (``asyncio.CancelledError``) is a
``BaseException`` and is never retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from scriptarc.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from scriptarc.core.types import FallbackVariant, RetryPolicy
    from scriptarc.telemetry import TelemetryContextProtocol

    type Sleep = Callable[[float], Awaitable[None]]

log = logging.getLogger(__name__)

# --- Telemetry scopes/keys ---
T_RETRY_ATTEMPT = "retry.attempt"
T_RETRY_FAILURE = "retry.failure"
T_RETRY_EXHAUSTED = "retry.exhausted"
T_FALLBACK_ESCALATION = "fallback.escalation"


async def run_with_retry[T](
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    sleep: Sleep = asyncio.sleep,
    telemetry: TelemetryContextProtocol | None = None,
    label: str = "operation",
) -> T:
    """Invoke ``operation`` until it succeeds or the policy is exhausted.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        policy: Bounds the number of retries and the backoff schedule.
        sleep: Awaitable used for backoff waits. Tests inject a recorder.
        telemetry: Optional telemetry context.
        label: Name used in logs and telemetry metadata.

    Returns:
        The first successful result.

    Raises:
        Exception: The error from the final attempt, unchanged.
    """
    tele = telemetry or TelemetryContext()
    retries_done = 0
    while True:
        attempt = retries_done + 1
        try:
            with tele(T_RETRY_ATTEMPT, label=label, attempt=attempt):
                return await operation()
        except Exception as error:
            tele.count(T_RETRY_FAILURE, label=label, error=type(error).__name__)
            if retries_done >= policy.max_attempts:
                tele.count(T_RETRY_EXHAUSTED, label=label)
                log.error(
                    "%s failed after %d attempt(s): %s",
                    label,
                    attempt,
                    error,
                )
                raise
            retries_done += 1
            delay = policy.delay_for(retries_done)
            log.warning(
                "%s failed with %s. Retrying in %.2fs (attempt %d/%d)",
                label,
                type(error).__name__,
                delay,
                attempt + 1,
                policy.total_invocations,
            )
            await sleep(delay)


async def run_with_fallback[T](
    plan: Sequence[FallbackVariant[T]],
    *,
    sleep: Sleep = asyncio.sleep,
    telemetry: TelemetryContextProtocol | None = None,
) -> T:
    """Try each variant of ``plan`` in order until one succeeds.

    Variants run strictly one after another. The plan fails only when the last
    variant has exhausted its retries; that variant's error propagates.

    Raises:
        ValueError: If the plan is empty.
        Exception: The final variant's last error, unchanged.
    """
    if not plan:
        raise ValueError("Fallback plan may not be empty; provide at least one variant.")

    tele = telemetry or TelemetryContext()
    last_index = len(plan) - 1
    for index, variant in enumerate(plan):
        try:
            return await run_with_retry(
                variant.operation,
                variant.policy,
                sleep=sleep,
                telemetry=tele,
                label=variant.name,
            )
        except Exception as error:
            if index == last_index:
                raise
            next_variant = plan[index + 1]
            tele.count(
                T_FALLBACK_ESCALATION, source=variant.name, target=next_variant.name
            )
            log.warning(
                "Variant '%s' exhausted (%s); falling back to '%s'",
                variant.name,
                type(error).__name__,
                next_variant.name,
            )
    raise AssertionError("unreachable: loop returns or raises")  # pragma: no cover


@dataclass(frozen=True, slots=True)
class RetryExecutor:
    """Bundles the sleep function and telemetry shared by one generator.

    Holds no per-call state; concurrent invocations through the same executor
    are independent.
    """

    sleep: Sleep = asyncio.sleep
    telemetry: TelemetryContextProtocol = field(default_factory=TelemetryContext)

    async def run[T](
        self,
        operation: Callable[[], Awaitable[T]],
        policy: RetryPolicy,
        *,
        label: str = "operation",
    ) -> T:
        """Run a single operation under ``policy``."""
        return await run_with_retry(
            operation, policy, sleep=self.sleep, telemetry=self.telemetry, label=label
        )

    async def run_plan[T](self, plan: Sequence[FallbackVariant[T]]) -> T:
        """Run a fallback plan."""
        return await run_with_fallback(
            plan, sleep=self.sleep, telemetry=self.telemetry
        )
