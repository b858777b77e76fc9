"""Textual application hosting the dashboard."""

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Label, Static

from reprac.orchestrator import Orchestrator
from reprac.ui import render
from reprac.ui.modal import AddRepoModal, AddRepoResult

BANNER = (
    "    ________  ____  _________  _____\n"
    "   / ___/ _ \\/ __ \\/ ___/ __ `/ ___/\n"
    "  / /  /  __/ /_/ / /  / /_/ / /__  \n"
    " /_/   \\___/ ____/_/   \\__,_/\\___/  \n"
    "          /_/\n\n"
    "  track unreleased changes"
)


class DashboardApp(App):
    """Full-screen dashboard. All state lives in the orchestrator."""

    CSS = """
    #top {
        height: 10;
    }
    #banner {
        width: 44;
        border: round $accent;
        color: $accent;
    }
    #overview {
        width: 1fr;
        border: round $panel;
        border-title-align: left;
        padding: 0 1;
    }
    #repositories {
        border: round $panel;
        border-title-align: left;
    }
    #status-label {
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False),
        Binding("j", "move(1)", "Down", show=False),
        Binding("down", "move(1)", "Down", show=False),
        Binding("k", "move(-1)", "Up", show=False),
        Binding("up", "move(-1)", "Up", show=False),
        Binding("g", "top", "Top", show=False),
        Binding("G", "bottom", "Bottom", show=False),
        Binding("r", "refresh_all", "Refresh all"),
        Binding("R", "refresh_row", "Refresh row"),
        Binding("enter", "toggle", "Expand", show=False),
        Binding("space", "toggle", "Expand"),
        Binding("E", "expand_all", "Expand all", show=False),
        Binding("C", "collapse_all", "Collapse all", show=False),
        Binding("a", "add", "Add"),
        Binding("d", "delete", "Delete"),
        Binding("o", "open", "Browser"),
        Binding("question_mark", "help", "Help", key_display="?"),
    ]

    def __init__(self, orchestrator: Orchestrator) -> None:
        super().__init__()
        self.orchestrator = orchestrator

    def compose(self) -> ComposeResult:
        with Horizontal(id="top"):
            yield Static(BANNER, id="banner")
            yield Static("", id="overview")
        with VerticalScroll(id="repositories"):
            yield Static("", id="table")
        yield Label("", id="status-label")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "reprac"
        self.query_one("#overview").border_title = "overview"
        self.query_one("#repositories").border_title = "repositories"

        self.orchestrator.start()
        self.pump_results()
        interval = self.orchestrator.registry.settings.refresh_interval
        if interval > 0:
            self.set_interval(interval, self.action_refresh_all)
        self.redraw()

    @work(exclusive=True, group="results")
    async def pump_results(self) -> None:
        await self.orchestrator.pump(self.redraw)

    def redraw(self) -> None:
        orch = self.orchestrator
        self.query_one("#overview", Static).update(
            render.overview(orch.summary(), orch.has_auth)
        )
        height = max(self.query_one("#repositories").size.height - 1, 1)
        self.query_one("#table", Static).update(
            render.build_table(orch.snapshot(), orch.cursor, height)
        )
        self.query_one("#status-label", Label).update(Text(orch.status_message))

    async def action_quit(self) -> None:
        self.orchestrator.close()
        self.exit()

    def action_move(self, delta: int) -> None:
        self.orchestrator.move(delta)
        self.redraw()

    def action_top(self) -> None:
        self.orchestrator.move_to_top()
        self.redraw()

    def action_bottom(self) -> None:
        self.orchestrator.move_to_bottom()
        self.redraw()

    def action_refresh_all(self) -> None:
        self.orchestrator.refresh_all()
        self.redraw()

    def action_refresh_row(self) -> None:
        self.orchestrator.refresh_selected()
        self.redraw()

    def action_toggle(self) -> None:
        self.orchestrator.toggle_expanded()
        self.redraw()

    def action_expand_all(self) -> None:
        self.orchestrator.expand_all()
        self.redraw()

    def action_collapse_all(self) -> None:
        self.orchestrator.collapse_all()
        self.redraw()

    def action_add(self) -> None:
        def added(result: AddRepoResult | None) -> None:
            if result is not None:
                self.orchestrator.add_repository(result.owner, result.repo, result.notes)
            self.redraw()

        self.push_screen(AddRepoModal(), added)

    def action_delete(self) -> None:
        self.orchestrator.delete_selected()
        self.redraw()

    def action_open(self) -> None:
        self.orchestrator.open_selected()

    def action_help(self) -> None:
        self.orchestrator.show_help()
        self.redraw()
