"""
zap_gateway.services.write_plan

Ordered multi-table writes with an explicit per-step consistency policy.

Responsibilities:
- Run write steps sequentially, committing each one on its own.
- Abort on the first failing `required` step; log and continue past optional ones.
- Report what happened per step so callers can surface partial fan-out.

The first required step is normally the authoritative write; optional steps update
denormalized copies that may transiently disagree with it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.errors import GatewayError, StoreError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)

StepFn = Callable[[AsyncSession], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class WriteStep:
    name: str
    run: StepFn
    required: bool = True
    failure_message: str | None = None


@dataclass(frozen=True, slots=True)
class WriteOutcome:
    name: str
    ok: bool
    required: bool
    value: Any = None
    error: str | None = None


class WritePlan:
    def __init__(self, steps: Sequence[WriteStep]) -> None:
        self._steps = tuple(steps)

    @property
    def steps(self) -> tuple[WriteStep, ...]:
        return self._steps

    async def execute(self, session: AsyncSession) -> list[WriteOutcome]:
        outcomes: list[WriteOutcome] = []
        for step in self._steps:
            try:
                value = await step.run(session)
                await session.commit()
            except (GatewayError, SQLAlchemyError) as e:
                await session.rollback()
                if step.required:
                    log.error("write_plan.required_step_failed", step=step.name, error=str(e))
                    if isinstance(e, GatewayError):
                        raise
                    message = step.failure_message or f"Failed to write {step.name}"
                    raise StoreError(message, details=str(e)) from e
                log.warning("write_plan.step_failed", step=step.name, error=str(e))
                outcomes.append(WriteOutcome(step.name, False, False, error=str(e)))
                continue
            outcomes.append(WriteOutcome(step.name, True, step.required, value=value))
        return outcomes


def failed(outcomes: Sequence[WriteOutcome]) -> list[str]:
    return [o.name for o in outcomes if not o.ok]


# --- Module Notes -----------------------------------------------------------
# There is no retry loop and no persisted intermediate state: a failed optional step
# stays failed until the next sync for the same user overwrites it.
