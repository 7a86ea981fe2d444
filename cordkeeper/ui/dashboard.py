"""Dashboard widgets summarising the current season."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from textual.widget import Widget

from ..fires.history import MonthGroup
from ..fires.models import LogSize
from ..season.ratios import SizeRatioTable
from ..season.statistics import SeasonSnapshot
from ..settings.config import SeasonConfig


def _build_season_panel(snapshot: SeasonSnapshot, season_name: str) -> RenderableType:
    table = Table.grid(padding=(0, 1), expand=True)
    table.add_row("[bold]Cords burned[/bold]", f"{snapshot.cords_burned:.2f}")
    if snapshot.progress_fraction is not None and snapshot.season_goal is not None:
        percent = int(snapshot.progress_fraction * 100)
        bar = ProgressBar(total=1.0, completed=snapshot.progress_fraction, width=30)
        table.add_row("[bold]Goal[/bold]", f"{percent}% of {snapshot.season_goal:.1f} cord goal")
        table.add_row("", bar)
    else:
        table.add_row("[bold]Goal[/bold]", "No goal set")
    return Panel(table, title=f"Season {season_name}", border_style="orange3")


def _build_stats_panel(snapshot: SeasonSnapshot) -> RenderableType:
    table = Table.grid(padding=(0, 1), expand=True)
    table.add_row("[bold]Fires[/bold]", str(snapshot.season_fire_count))
    table.add_row("[bold]Logs[/bold]", str(snapshot.total_logs))
    active = snapshot.active_session
    if active is not None:
        table.add_row(
            "[bold]Burning[/bold]",
            f"since {active.start_time:%H:%M} ({active.log_summary})",
        )
    return Panel(table, title="This Season", border_style="blue")


def _build_breakdown_panel(snapshot: SeasonSnapshot, ratios: SizeRatioTable) -> RenderableType:
    table = Table.grid(padding=(0, 1), expand=True)
    for size in LogSize:
        table.add_row(
            f"[bold]{size.value}[/bold]",
            str(snapshot.count(size)),
            f"{ratios.ratio(size):.2f}x",
        )
    return Panel(table, title="By Size", border_style="red")


class SeasonDashboard(Widget):
    """Season card, quick statistics and the per-size breakdown."""

    def __init__(self, *, title: str = "Cordkeeper") -> None:
        super().__init__(id="dashboard")
        self.title = title
        self._snapshot: SeasonSnapshot | None = None
        self._season_name = ""
        self._ratios = SizeRatioTable()
        self._problem: str | None = None

    def update_snapshot(
        self, snapshot: SeasonSnapshot, *, season_name: str, ratios: SizeRatioTable
    ) -> None:
        self._snapshot = snapshot
        self._season_name = season_name
        self._ratios = ratios
        self._problem = None
        self.refresh()

    def show_problem(self, message: str) -> None:
        """Replace the statistics with a warning until the next update."""

        self._problem = message
        self.refresh()

    def render(self) -> RenderableType:
        if self._problem:
            return Panel(self._problem, title="Statistics unavailable", border_style="red")
        if self._snapshot is None:
            return Panel("No statistics available", title=self.title, border_style="blue")
        return Group(
            _build_season_panel(self._snapshot, self._season_name),
            _build_stats_panel(self._snapshot),
            _build_breakdown_panel(self._snapshot, self._ratios),
        )


class HistoryView(Widget):
    """Completed fires grouped by month."""

    def __init__(self, *, title: str = "History") -> None:
        super().__init__(id="history")
        self.title = title
        self._groups: list[MonthGroup] = []
        self._config = SeasonConfig()

    def update_groups(self, groups: Sequence[MonthGroup], config: SeasonConfig) -> None:
        self._groups = list(groups)
        self._config = config
        self.refresh()

    def render(self) -> RenderableType:
        if not self._groups:
            return Panel("No fires yet", title=self.title, border_style="yellow")
        ratios = self._config.ratio_table()
        table = Table(expand=True)
        table.add_column("Date", no_wrap=True)
        table.add_column("Logs")
        table.add_column("Duration", justify="right")
        table.add_column("Units", justify="right")
        for group in self._groups:
            table.add_row(f"[bold]{group.label}[/bold]", "", "", "")
            for fire in group.fires:
                table.add_row(
                    fire.start_time.strftime("%d %a"),
                    fire.log_summary,
                    fire.formatted_duration,
                    f"{fire.total_units(ratios):.1f}",
                )
        return Panel(table, title=self.title, border_style="yellow")


__all__ = ["HistoryView", "SeasonDashboard"]
