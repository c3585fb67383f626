from __future__ import annotations

import asyncio
import threading

import pytest

from core.periodic import PeriodicTask


def test_run_once_returns_action_result() -> None:
    task = PeriodicTask("count", 60, lambda: 3)

    assert asyncio.run(task.run_once()) == 3
    assert task.runs == 1


def test_run_once_awaits_coroutine_actions() -> None:
    async def action() -> str:
        return "done"

    task = PeriodicTask("async", 60, action)
    assert asyncio.run(task.run_once()) == "done"


def test_failures_are_logged_and_swallowed(caplog) -> None:
    def boom() -> None:
        raise RuntimeError("boom")

    task = PeriodicTask("boom", 60, boom)

    assert asyncio.run(task.run_once()) is None
    assert task.runs == 1
    assert "Periodic task boom failed" in caplog.text


def test_loop_ticks_until_stopped() -> None:
    calls: list[int] = []

    async def scenario() -> None:
        task = PeriodicTask("tick", 0.01, lambda: calls.append(1))
        task.start()
        assert task.running
        while len(calls) < 3:
            await asyncio.sleep(0.01)
        await task.stop()
        assert not task.running
        seen = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == seen

    asyncio.run(scenario())


def test_loop_survives_failing_ticks() -> None:
    attempts: list[int] = []

    def flaky() -> None:
        attempts.append(1)
        raise ValueError("nope")

    async def scenario() -> None:
        task = PeriodicTask("flaky", 0.01, flaky)
        task.start()
        while len(attempts) < 2:
            await asyncio.sleep(0.01)
        await task.stop()

    asyncio.run(scenario())
    assert len(attempts) >= 2


def test_stop_without_start_is_noop() -> None:
    asyncio.run(PeriodicTask("idle", 1, lambda: None).stop())


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PeriodicTask("bad", 0, lambda: None)


def test_sync_actions_run_off_the_event_loop_thread() -> None:
    threads: list[int] = []

    async def scenario() -> int:
        task = PeriodicTask("files", 60, lambda: threads.append(threading.get_ident()))
        await task.run_once()
        return threading.get_ident()

    loop_thread = asyncio.run(scenario())

    assert len(threads) == 1
    assert threads[0] != loop_thread


def test_coroutine_actions_run_on_the_loop() -> None:
    seen: list[int] = []

    async def action() -> None:
        seen.append(threading.get_ident())

    async def scenario() -> int:
        await PeriodicTask("async", 60, action).run_once()
        return threading.get_ident()

    assert seen == [asyncio.run(scenario())]
