from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Callable

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Footer, Input, Label, ListItem, ListView, RichLog, Static

from ..catalog import UnitCatalog
from ..focus import FocusRing
from ..models import AppOptions, Unit
from ..runner import CommandError, CommandRunner, StatusReporter
from ..systemctl import JOURNALCTL, SYSTEMCTL, control_args, journal_args, toggle_action

log = logging.getLogger(__name__)

RunnerFactory = Callable[[StatusReporter], CommandRunner]


class FilterInput(Input):
    BINDINGS = [Binding("escape", "clear_filter", "Clear", show=False)]

    def action_clear_filter(self) -> None:
        self.value = ""


class UnitItem(ListItem):
    def __init__(self, unit: Unit) -> None:
        super().__init__(Label(unit.colorized()))
        self.unit_name = unit.name


class UnitList(ListView):
    BINDINGS = [
        Binding("j", "app.view_journal", "Journal"),
        Binding("s", "app.toggle_unit", "Start/Stop"),
        Binding("r", "app.restart_unit", "Restart"),
    ]


class StatusBar(Static):
    """Shows the outcome of the last external command."""

    def report_success(self, message: str) -> None:
        self.remove_class("-error")
        self.update(Text(message))

    def report_error(self, message: str) -> None:
        self.add_class("-error")
        self.update(Text(message))


class CommanderApp(App):
    CSS_PATH = Path(__file__).with_name("app.tcss")
    TITLE = "systemd commander"
    BINDINGS = [
        Binding("tab", "focus_next_region", "Next", show=False, priority=True),
        Binding("shift+tab", "focus_previous_region", "Previous", show=False, priority=True),
        Binding("f4", "focus_filter", "Filter"),
        Binding("f5", "refresh", "Refresh"),
        Binding("f10", "quit", "Quit"),
        Binding("q", "quit", "Quit", show=False),
    ]

    def __init__(self, options: AppOptions, runner_factory: RunnerFactory = CommandRunner) -> None:
        super().__init__()
        self.options = options
        self._runner_factory = runner_factory
        self.filter_input: FilterInput | None = None
        self.unit_list: UnitList | None = None
        # Not "display": DOMNode already uses that name
        self.display_pane: RichLog | None = None
        self.status_bar: StatusBar | None = None
        self.runner: CommandRunner | None = None
        self.catalog: UnitCatalog | None = None
        self.focus_ring: FocusRing[Widget] | None = None

    def compose(self) -> ComposeResult:
        with Horizontal():
            with Vertical(id="left"):
                self.filter_input = FilterInput(value=self.options.filter, placeholder="unit name", id="filter")
                self.filter_input.border_title = "Filter"
                yield self.filter_input
                self.unit_list = UnitList(id="units")
                self.unit_list.border_title = "Units"
                yield self.unit_list
            with Vertical(id="right"):
                self.display_pane = RichLog(highlight=False, markup=False, wrap=False, id="display")
                yield self.display_pane
                self.status_bar = StatusBar(id="status")
                self.status_bar.border_title = "Status"
                yield self.status_bar
        yield Footer()

    async def on_mount(self) -> None:
        if self.filter_input is None or self.unit_list is None or self.display_pane is None or self.status_bar is None:
            return
        self.focus_ring = FocusRing([self.filter_input, self.unit_list, self.display_pane], lambda w: w.focus())
        self.runner = self._runner_factory(self.status_bar)
        self.catalog = UnitCatalog(
            self.runner,
            filter=self.options.filter,
            properties=self.options.properties,
            user=self.options.user,
        )
        await self._rebuild_list()
        self.focus_ring.set_to(self.filter_input)

    def on_descendant_focus(self) -> None:
        # Keep the ring in step with focus changes made by mouse clicks
        if self.focus_ring is not None and self.focused is not None:
            self.focus_ring.set_to(self.focused)

    async def _rebuild_list(self) -> None:
        if self.unit_list is None or self.catalog is None:
            return
        await self.unit_list.clear()
        await self.unit_list.extend(UnitItem(u) for u in self.catalog)
        if len(self.catalog):
            # Reset first so the new first item is highlighted even if the index was already 0
            self.unit_list.index = None
            self.unit_list.index = 0
        self._show_properties()

    def current_unit(self) -> Unit:
        if self.unit_list is None or self.catalog is None:
            return Unit()
        item = self.unit_list.highlighted_child
        if not isinstance(item, UnitItem):
            return Unit()
        return self.catalog.get(item.unit_name)

    def _set_display(self, title: str, content: Text | str) -> None:
        if self.display_pane is None:
            return
        self.display_pane.border_title = title
        self.display_pane.clear()
        self.display_pane.write(content)

    def _show_properties(self) -> None:
        self._set_display("Properties", self.current_unit().properties_text())

    @on(ListView.Highlighted, "#units")
    def _on_unit_highlighted(self, event: ListView.Highlighted) -> None:
        self._show_properties()

    @on(Input.Submitted, "#filter")
    async def _on_filter_submitted(self, event: Input.Submitted) -> None:
        if self.catalog is None or self.focus_ring is None:
            return
        self.catalog.update(event.value)
        await self._rebuild_list()
        self.focus_ring.next()

    def action_focus_next_region(self) -> None:
        if self.focus_ring is not None:
            self.focus_ring.next()

    def action_focus_previous_region(self) -> None:
        if self.focus_ring is not None:
            self.focus_ring.previous()

    def action_focus_filter(self) -> None:
        if self.focus_ring is not None and self.filter_input is not None:
            self.focus_ring.set_to(self.filter_input)

    async def action_refresh(self) -> None:
        if self.catalog is None:
            return
        self.catalog.refresh()
        await self._rebuild_list()

    def action_view_journal(self) -> None:
        unit = self.current_unit()
        if not unit.name or self.runner is None:
            return
        self._set_display("Journal", f"Loading journal of {unit.name}...")
        args = journal_args(unit.name, user=self.options.user, lines=self.options.journal_lines)
        try:
            out = self.runner.exec(JOURNALCTL, args)
        except CommandError:
            return
        self._set_display("Journal", out.decode(errors="replace"))
        if self.focus_ring is not None:
            self.focus_ring.next()

    def action_toggle_unit(self) -> None:
        unit = self.current_unit()
        if unit.name:
            self._control(toggle_action(unit), unit)

    def action_restart_unit(self) -> None:
        unit = self.current_unit()
        if unit.name:
            self._control("restart", unit)

    def _control(self, action: str, unit: Unit) -> None:
        # Fire and forget: the list shows the new state after a manual refresh
        if self.runner is None:
            return
        log.info("%s %s", action, unit.name)
        with suppress(CommandError):
            self.runner.exec(SYSTEMCTL, control_args(action, unit.name, user=self.options.user))


def run_dash(options: AppOptions) -> None:
    app = CommanderApp(options)
    app.run()
