"""
tests.test_write_plan

Unit tests for the required/best-effort write policy, independent of any database.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from zap_gateway.errors import NotFoundError, StoreError
from zap_gateway.services.write_plan import WritePlan, WriteStep, failed


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def _ok(value, calls: list[str], name: str):
    async def run(_session):
        calls.append(name)
        return value

    return run


def _boom(exc: Exception, calls: list[str], name: str):
    async def run(_session):
        calls.append(name)
        raise exc

    return run


@pytest.mark.asyncio
async def test_all_steps_succeed_and_commit_individually() -> None:
    calls: list[str] = []
    session = FakeSession()
    plan = WritePlan(
        [
            WriteStep("primary", _ok(1, calls, "primary")),
            WriteStep("copy-a", _ok(2, calls, "copy-a"), required=False),
            WriteStep("copy-b", _ok(3, calls, "copy-b"), required=False),
        ]
    )

    outcomes = await plan.execute(session)  # type: ignore[arg-type]

    assert calls == ["primary", "copy-a", "copy-b"]
    assert [o.value for o in outcomes] == [1, 2, 3]
    assert all(o.ok for o in outcomes)
    assert failed(outcomes) == []
    assert session.commits == 3
    assert session.rollbacks == 0


@pytest.mark.asyncio
async def test_failing_primary_aborts_before_secondaries() -> None:
    calls: list[str] = []
    session = FakeSession()
    plan = WritePlan(
        [
            WriteStep("primary", _boom(SQLAlchemyError("disk full"), calls, "primary")),
            WriteStep("copy-a", _ok(2, calls, "copy-a"), required=False),
        ]
    )

    with pytest.raises(StoreError) as excinfo:
        await plan.execute(session)  # type: ignore[arg-type]

    assert excinfo.value.message == "Failed to write primary"
    assert excinfo.value.details == "disk full"
    assert calls == ["primary"]
    assert session.rollbacks == 1
    assert session.commits == 0


@pytest.mark.asyncio
async def test_domain_errors_from_required_steps_propagate_unchanged() -> None:
    plan = WritePlan([WriteStep("primary", _boom(NotFoundError("Profile not found"), [], "p"))])

    with pytest.raises(NotFoundError):
        await plan.execute(FakeSession())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_required_step_can_name_its_own_failure() -> None:
    step = WriteStep(
        "transaction",
        _boom(SQLAlchemyError("UNIQUE constraint failed"), [], "transaction"),
        failure_message="Failed to store transaction",
    )

    with pytest.raises(StoreError) as excinfo:
        await WritePlan([step]).execute(FakeSession())  # type: ignore[arg-type]

    assert excinfo.value.message == "Failed to store transaction"
    assert excinfo.value.details == "UNIQUE constraint failed"


@pytest.mark.asyncio
async def test_failing_secondary_is_recorded_and_execution_continues() -> None:
    calls: list[str] = []
    session = FakeSession()
    broken = OperationalError("UPDATE user_roles", {}, Exception("no such table"))
    plan = WritePlan(
        [
            WriteStep("primary", _ok(1, calls, "primary")),
            WriteStep("copy-a", _boom(broken, calls, "copy-a"), required=False),
            WriteStep("copy-b", _ok(3, calls, "copy-b"), required=False),
        ]
    )

    outcomes = await plan.execute(session)  # type: ignore[arg-type]

    assert calls == ["primary", "copy-a", "copy-b"]
    assert [o.ok for o in outcomes] == [True, False, True]
    assert outcomes[1].error is not None
    assert failed(outcomes) == ["copy-a"]
    assert session.commits == 2
    assert session.rollbacks == 1


@pytest.mark.asyncio
async def test_unexpected_errors_are_not_treated_as_store_failures() -> None:
    plan = WritePlan(
        [
            WriteStep("primary", _ok(1, [], "primary")),
            WriteStep("copy", _boom(RuntimeError("bug"), [], "copy"), required=False),
        ]
    )

    with pytest.raises(RuntimeError):
        await plan.execute(FakeSession())  # type: ignore[arg-type]
