"""Add-repository dialog."""

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Static


@dataclass(frozen=True)
class AddRepoResult:
    """Trimmed form fields."""

    owner: str
    repo: str
    notes: str = ""


class AddRepoModal(ModalScreen[AddRepoResult | None]):
    """Collect owner, repo and notes for a new repository."""

    DEFAULT_CSS = """
    AddRepoModal {
        align: center middle;
    }
    #add-repo-modal {
        width: 60;
        height: auto;
        border: round $accent;
        padding: 1 2;
    }
    #add-repo-error {
        color: $error;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Container(id="add-repo-modal"):
            yield Static("[bold]Add repository[/bold]\n")
            yield Input(placeholder="owner (e.g. your-org)", id="owner")
            yield Input(placeholder="repo (e.g. your-app)", id="repo")
            yield Input(placeholder="notes (optional)", id="notes")
            yield Static("", id="add-repo-error")
            yield Static("[dim]enter submit · tab next · esc cancel[/dim]")

    def on_mount(self) -> None:
        self.query_one("#owner", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        owner = self.query_one("#owner", Input).value.strip()
        repo = self.query_one("#repo", Input).value.strip()
        notes = self.query_one("#notes", Input).value.strip()

        if not owner or not repo:
            self.query_one("#add-repo-error", Static).update("Owner and repo are required")
            self.query_one("#owner" if not owner else "#repo", Input).focus()
            return

        self.dismiss(AddRepoResult(owner=owner, repo=repo, notes=notes))

    def action_cancel(self) -> None:
        self.dismiss(None)
