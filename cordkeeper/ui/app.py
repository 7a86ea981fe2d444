"""Textual application for tracking fires and season statistics."""

from __future__ import annotations

from typing import Any

from loguru import logger
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from ..context import AppContext
from ..errors import DataIntegrityError, SessionStateError
from ..fires.models import LogSize
from .dashboard import HistoryView, SeasonDashboard

BULK_QUANTITY = 5


class CordkeeperApp(App[Any]):
    """Interactive dashboard driven by a shared :class:`AppContext`."""

    CSS = """
    Screen { layout: grid; grid-rows: auto 1fr auto; }

    #body {
        layout: grid;
        grid-size: 2 1;
        grid-columns: 1fr 1fr;
        grid-gutter: 1;
        padding: 1;
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "start_fire", "Start Fire"),
        Binding("s", "add_logs('Small')", "Small"),
        Binding("m", "add_logs('Medium')", "Medium"),
        Binding("l", "add_logs('Large')", "Large"),
        Binding("S", f"add_logs('Small', {BULK_QUANTITY})", "+5 Small", show=False),
        Binding("M", f"add_logs('Medium', {BULK_QUANTITY})", "+5 Medium", show=False),
        Binding("L", f"add_logs('Large', {BULK_QUANTITY})", "+5 Large", show=False),
        Binding("e", "end_fire", "End Fire"),
    ]

    def __init__(self, context: AppContext) -> None:
        super().__init__()
        self.app_context = context
        self.dashboard = SeasonDashboard()
        self.history_view = HistoryView()
        self.app_context.fire_log.subscribe(lambda _event, _session: self.refresh_views())
        self.app_context.on_settings_changed(lambda _settings: self.refresh_views())

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="body"):
            yield self.dashboard
            yield self.history_view
        yield Footer()

    def on_mount(self) -> None:
        if not self.app_context.settings.has_completed_onboarding:
            self.app_context.complete_onboarding(
                has_goal=self.app_context.settings.season_goal is not None
            )
            self.notify("Welcome to Cordkeeper. Press n to start your first fire.")
        self.refresh_views()

    def refresh_views(self) -> None:
        settings = self.app_context.settings
        try:
            snapshot = self.app_context.snapshot()
        except DataIntegrityError as exc:
            self.dashboard.show_problem(str(exc))
            self.notify(str(exc), severity="error")
        else:
            self.dashboard.update_snapshot(
                snapshot,
                season_name=settings.season_name(self.app_context.now()),
                ratios=settings.ratio_table(),
            )
        self.history_view.update_groups(self.app_context.history(), settings)

    # Actions -----------------------------------------------------------
    def action_start_fire(self) -> None:
        try:
            self.app_context.fire_log.start_session(self.app_context.now())
        except (SessionStateError, DataIntegrityError) as exc:
            self.notify(str(exc), severity="warning")

    def action_add_logs(self, size: str, quantity: int = 1) -> None:
        try:
            active = self.app_context.fire_log.active_session
        except DataIntegrityError as exc:
            self.notify(str(exc), severity="error")
            return
        if active is None:
            self.notify("Start a fire first (n)", severity="warning")
            return
        self.app_context.fire_log.add_logs(
            active.session_id, LogSize.from_value(size), quantity, timestamp=self.app_context.now()
        )

    def action_end_fire(self) -> None:
        try:
            active = self.app_context.fire_log.active_session
        except DataIntegrityError as exc:
            self.notify(str(exc), severity="error")
            return
        if active is None:
            self.notify("No fire is burning", severity="warning")
            return
        ended = self.app_context.fire_log.end_session(active.session_id, self.app_context.now())
        if ended is None:
            self.notify("Fire discarded: no logs were added")
        else:
            logger.info(f"Fire ended after {ended.formatted_duration}")
            self.notify(f"Fire saved ({ended.log_summary}, {ended.formatted_duration})")


__all__ = ["BULK_QUANTITY", "CordkeeperApp"]
