"""Drive the Textual app headlessly through a fire lifecycle."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from cordkeeper.context import AppContext
from cordkeeper.fires.models import LogSize
from cordkeeper.ui.app import CordkeeperApp


def test_start_log_and_end_fire_from_key_bindings() -> None:
    context = AppContext.in_memory(clock=lambda: datetime(2026, 10, 17, 19, tzinfo=timezone.utc))
    app = CordkeeperApp(context)

    async def _drive() -> None:
        async with app.run_test() as pilot:
            await pilot.press("n", "s", "s", "l")
            active = context.fire_log.active_session
            assert active is not None
            assert active.log_count(LogSize.SMALL) == 2
            assert active.log_count(LogSize.LARGE) == 1
            await pilot.press("e")
            await pilot.pause()

    asyncio.run(_drive())

    assert context.settings.has_completed_onboarding
    [fire] = context.fire_log.sessions
    assert not fire.is_active
    assert context.snapshot().total_logs == 3


def test_ending_fire_without_logs_discards_it() -> None:
    context = AppContext.in_memory(clock=lambda: datetime(2026, 10, 17, 19, tzinfo=timezone.utc))
    app = CordkeeperApp(context)

    async def _drive() -> None:
        async with app.run_test() as pilot:
            await pilot.press("n", "e")
            await pilot.pause()

    asyncio.run(_drive())

    assert len(context.fire_log) == 0
