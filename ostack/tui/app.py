"""
ostui - OpenStack terminal dashboard.

Browse the resources of a cloud: one table per mode (servers, networks,
volumes, ...), switched with the keys configured in tui.yaml. Requests run
in textual workers through the CloudWorker; failures open an error popup
and the dashboard keeps running. Logs go to the log file only.

Usage:
    ostui
    ostui --os-cloud devstack
    ostui --os-cloud devstack --debug

Keys:
    ctrl+o  select cloud        ctrl+p  switch project
    r       refresh             /       filter rows
    enter/d describe            escape  close describe, clear filter
    q       quit
"""

from __future__ import annotations

from typing import Any, Optional

import typer
from textual import events, on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import DataTable, Footer, Input

from ostack.core.config import get_app_config
from ostack.core.config_schema import TuiModeSchema, TuiSchema
from ostack.core.exceptions import ApplicationError
from ostack.core.logging import get_logger, log_with_source, setup_logging
from ostack.tui.requests import build_request
from ostack.tui.screens import ErrorScreen, SelectScreen
from ostack.tui.widgets import DescribePane, HeaderBar, ResourceTable, StatusBar
from ostack.tui.worker import CloudWorker

logger = get_logger(__name__)


class OpenStackTUI(App):
    """Terminal dashboard for one OpenStack cloud at a time."""

    TITLE = "ostui"
    SUB_TITLE = "OpenStack terminal dashboard"

    CSS = """
    Screen {
        layout: vertical;
    }

    HeaderBar {
        dock: top;
        height: 1;
        background: $primary-background;
        color: $text;
        padding: 0 1;
    }

    #main {
        height: 1fr;
    }

    ResourceTable {
        width: 1fr;
        height: 1fr;
        border: solid $primary;
    }

    #describe {
        width: 45%;
        height: 1fr;
        border: solid $secondary;
        padding: 0 1;
        display: none;
    }

    #describe.visible {
        display: block;
    }

    #filter {
        dock: bottom;
        display: none;
    }

    #filter.visible {
        display: block;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+q", "quit", "Quit", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("slash", "filter", "Filter", key_display="/"),
        Binding("d", "describe", "Describe"),
        Binding("escape", "close_panels", "Close", show=False),
        Binding("ctrl+o", "select_cloud", "Cloud"),
        Binding("ctrl+p", "select_project", "Project"),
    ]

    def __init__(
        self,
        cloud: str | None = None,
        worker: CloudWorker | None = None,
        settings: TuiSchema | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or get_app_config().tui
        self.cloud_worker = worker or CloudWorker()
        self.initial_cloud = cloud
        self.modes = self.settings.modes
        self.mode_keys = {mode.key: i for i, mode in enumerate(self.modes)}
        self.mode_index = next(
            (i for i, mode in enumerate(self.modes) if mode.id == self.settings.default_mode), 0,
        )
        self.filter_text = ""

    @property
    def mode(self) -> TuiModeSchema:
        return self.modes[self.mode_index]

    def compose(self) -> ComposeResult:
        yield HeaderBar()
        with Horizontal(id="main"):
            yield ResourceTable(id="resources")
            with VerticalScroll(id="describe"):
                yield DescribePane(id="describe-content")
        yield Input(placeholder="Filter rows (enter to keep, escape to clear)", id="filter")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self._update_mode_title()
        self.query_one(ResourceTable).focus()
        if self.settings.auto_refresh_seconds > 0:
            self.set_interval(self.settings.auto_refresh_seconds, self.action_refresh)
        if self.initial_cloud:
            self.connect_cloud(self.initial_cloud)
        else:
            self.action_select_cloud()

    async def on_unmount(self) -> None:
        await self.cloud_worker.close()

    # -------------------------------------------------------------------------
    # State display
    # -------------------------------------------------------------------------

    def _update_mode_title(self) -> None:
        table = self.query_one(ResourceTable)
        table.border_title = f"{self.mode.title} [{self.mode.key}]"
        self.query_one(StatusBar).mode_title = self.mode.title

    def _update_header(self) -> None:
        self.query_one(HeaderBar).info = self.cloud_worker.connection_info()

    def show_error(self, message: str) -> None:
        log_with_source(logger, "tui", "error", "Request failed", error=message)
        self.query_one(StatusBar).state = "error"
        self.push_screen(ErrorScreen(message))

    # -------------------------------------------------------------------------
    # Workers
    # -------------------------------------------------------------------------

    @work(exclusive=True, group="connect")
    async def connect_cloud(self, cloud: str) -> None:
        status = self.query_one(StatusBar)
        status.state = "loading"
        try:
            await self.cloud_worker.connect_to_cloud(cloud)
        except ApplicationError as e:
            self.show_error(f"Failed to connect to the cloud {cloud}: {e.message}")
            return
        self._update_header()
        status.state = "connected"
        self.load_mode()

    @work(exclusive=True, group="connect")
    async def change_project(self, project_id: str) -> None:
        try:
            await self.cloud_worker.change_scope(project_id)
        except ApplicationError as e:
            self.show_error(f"Cannot switch project: {e.message}")
            return
        self._update_header()
        self.load_mode()

    @work(exclusive=True, group="api")
    async def load_mode(self) -> None:
        if not self.cloud_worker.connected:
            return
        status = self.query_one(StatusBar)
        table = self.query_one(ResourceTable)
        mode = self.mode
        status.state = "loading"
        try:
            request = build_request(mode.id)
            records = await self.cloud_worker.perform(request)
            if mode is not self.mode:
                return
            status.shown = table.load(records, request.model, mode.view, self.filter_text)
        except ApplicationError as e:
            self.show_error(f"Error performing API request\n\n{e.message}")
            return
        finally:
            self._update_header()
        status.total = len(records)
        status.state = "ready"

    @work(exclusive=True, group="popup")
    async def open_project_popup(self) -> None:
        try:
            projects = await self.cloud_worker.list_projects()
        except ApplicationError as e:
            self.show_error(f"Cannot list projects: {e.message}")
            return
        items = [(p["id"], _project_label(p)) for p in projects]
        self.push_screen(SelectScreen("Switch project", items), self._on_project_selected)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def action_refresh(self) -> None:
        self.load_mode()

    def action_filter(self) -> None:
        filter_input = self.query_one("#filter", Input)
        filter_input.add_class("visible")
        filter_input.focus()

    def action_describe(self) -> None:
        record = self.query_one(ResourceTable).selected_record()
        if record is None:
            return
        self.query_one(DescribePane).show_record(record)
        self.query_one("#describe").add_class("visible")

    def action_close_panels(self) -> None:
        filter_input = self.query_one("#filter", Input)
        describe = self.query_one("#describe")
        if filter_input.has_class("visible") or self.filter_text:
            filter_input.value = ""
            filter_input.remove_class("visible")
            self._set_filter("")
            self.query_one(ResourceTable).focus()
        elif describe.has_class("visible"):
            describe.remove_class("visible")

    def action_select_cloud(self) -> None:
        try:
            clouds = self.cloud_worker.list_clouds()
        except ApplicationError as e:
            self.show_error(e.message)
            return
        self.push_screen(SelectScreen("Select cloud", [(c, c) for c in clouds]), self._on_cloud_selected)

    def action_select_project(self) -> None:
        if not self.cloud_worker.connected:
            self.show_error("Not connected to a cloud (ctrl+o selects one)")
            return
        self.open_project_popup()

    def switch_mode(self, index: int) -> None:
        if index == self.mode_index:
            return
        self.mode_index = index
        self._update_mode_title()
        self.query_one("#describe").remove_class("visible")
        self.load_mode()

    def _set_filter(self, text: str) -> None:
        self.filter_text = text
        status = self.query_one(StatusBar)
        status.filter_text = text
        status.shown = self.query_one(ResourceTable).apply_filter(text)

    def _on_cloud_selected(self, cloud: str | None) -> None:
        if cloud:
            self.connect_cloud(cloud)

    def _on_project_selected(self, project_id: str | None) -> None:
        if project_id:
            self.change_project(project_id)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        if len(self.screen_stack) > 1 or isinstance(self.focused, Input) or event.character is None:
            return
        index = self.mode_keys.get(event.character)
        if index is not None:
            event.stop()
            self.switch_mode(index)

    @on(DataTable.RowSelected, "#resources")
    def on_row_selected(self) -> None:
        self.action_describe()

    @on(Input.Changed, "#filter")
    def on_filter_changed(self, event: Input.Changed) -> None:
        self._set_filter(event.value)

    @on(Input.Submitted, "#filter")
    def on_filter_submitted(self) -> None:
        self.query_one("#filter", Input).remove_class("visible")
        self.query_one(ResourceTable).focus()


def _project_label(project: dict[str, Any]) -> str:
    name = project.get("name") or project["id"]
    domain = project.get("domain_id")
    return f"{name} ({domain})" if domain else name


cli = typer.Typer(add_completion=False)


@cli.command()
def run(
    os_cloud: Optional[str] = typer.Option(None, "--os-cloud", envvar="OS_CLOUD", help="Cloud to connect to at start"),
    debug: bool = typer.Option(False, "--debug", help="Debug logs in the log file"),
) -> None:
    """OpenStack terminal dashboard."""
    setup_logging(level="DEBUG" if debug else None, enable_console=False)
    log_with_source(logger, "tui", "info", "Starting dashboard", cloud=os_cloud)
    OpenStackTUI(cloud=os_cloud).run()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
