"""Pure rendering helpers: orchestrator state in, rich renderables out."""

from datetime import datetime

from rich.console import Group
from rich.text import Text

from reprac.orchestrator import RowView, Summary
from reprac.types.status import RefKind, Status

COLUMNS: list[tuple[str, int]] = [
    ("STATUS", 16),
    ("REPOSITORY", 28),
    ("BRANCH", 10),
    ("LAST TAG / RELEASE", 20),
    ("UNRELEASED", 14),
    ("NOTES", 22),
    ("CHECKED", 8),
]

BADGES: dict[Status, tuple[str, str]] = {
    Status.LOADING: ("⏳ loading...", "dim"),
    Status.BEHIND: ("▲ need deploy", "bold yellow"),
    Status.CLEAN: ("✓ up to date", "green"),
    Status.NO_RELEASE: ("◈ no release", "magenta"),
    Status.ERROR: ("✗ error", "bold red"),
}

PLACEHOLDER = "—"
COMMIT_DATE_FORMAT = "%H:%M:%S %d-%b-%y"


def truncate(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def format_checked(checked_at: datetime | None) -> str:
    if checked_at is None:
        return PLACEHOLDER
    return checked_at.astimezone().strftime("%H:%M:%S")


def badge(row: RowView) -> Text:
    label, style = BADGES[row.display_state]
    return Text(label, style=style)


def row_cells(row: RowView) -> list[Text]:
    """Cells of the main line of a row."""
    widths = [width for _, width in COLUMNS]
    repo_cell = Text(truncate(row.key, widths[1]), style="bold")
    notes_cell = Text(truncate(row.entry.notes, widths[5]), style="italic dim")
    status = row.status

    if row.loading or status is None:
        dash = Text(PLACEHOLDER, style="dim")
        return [badge(row), repo_cell, dash, dash.copy(), dash.copy(), notes_cell, dash.copy()]

    branch_cell = Text(truncate(status.default_branch or "main", widths[2]), style="cyan")

    if status.ref_name:
        prefix = "⬡ " if status.ref_kind is RefKind.RELEASE else "⬢ "
        tag_cell = Text(truncate(prefix + status.ref_name, widths[3]), style="blue")
    else:
        tag_cell = Text(PLACEHOLDER, style="dim")

    if status.state is Status.BEHIND:
        ahead_cell = Text(f"+{status.commits_ahead} commit(s)", style="yellow")
    elif status.state is Status.CLEAN:
        ahead_cell = Text("0", style="green")
    elif status.state is Status.ERROR:
        ahead_cell = Text(truncate(status.error_message, widths[4]), style="red")
    else:
        ahead_cell = Text(PLACEHOLDER, style="dim")

    checked_cell = Text(format_checked(status.checked_at), style="dim")
    return [badge(row), repo_cell, branch_cell, tag_cell, ahead_cell, notes_cell, checked_cell]


def commit_lines(row: RowView) -> list[Text]:
    """Detail lines shown under an expanded row that has unreleased commits."""
    status = row.status
    if not row.expanded or status is None or status.state is not Status.BEHIND:
        return []
    if not status.recent_commits:
        return []

    lines = []
    for commit in status.recent_commits:
        date = commit.timestamp.astimezone().strftime(COMMIT_DATE_FORMAT) if commit.timestamp else ""
        line = Text("    ")
        line.append(f"{date:<18}", style="dim")
        line.append("   ")
        line.append(f"{commit.short_id:<7}", style="cyan")
        line.append("   ")
        line.append(commit.headline)
        lines.append(line)

    more = status.commits_ahead - len(status.recent_commits)
    if more > 0:
        lines.append(Text(f"    + {more} more commits...", style="italic dim"))
    return lines


def row_height(row: RowView) -> int:
    """Terminal lines a row occupies."""
    return 1 + len(commit_lines(row))


def scroll_window(rows: list[RowView], cursor: int, height: int) -> tuple[int, int]:
    """
    Pick the slice of rows to draw so the cursor stays visible.

    Returns:
        (start, end) indexes into rows
    """
    total = len(rows)
    if total == 0:
        return 0, 0

    def fill(start: int) -> int:
        used, end = 0, start
        while end < total and used < height:
            used += row_height(rows[end])
            end += 1
        return end

    start = max(cursor - height // 2, 0)
    end = fill(start)
    if cursor >= end:
        start = cursor
        end = fill(start)
    return start, end


def _join_cells(cells: list[Text]) -> Text:
    line = Text()
    for cell, (_, width) in zip(cells, COLUMNS):
        cell = cell.copy()
        cell.truncate(width, overflow="ellipsis", pad=True)
        line.append_text(cell)
        line.append("  ")
    return line


def header_line() -> Text:
    return _join_cells([Text(title, style="bold") for title, _ in COLUMNS])


def build_table(rows: list[RowView], cursor: int, height: int | None = None) -> Group:
    """Header plus the visible rows, expanded rows followed by their commit lines."""
    lines = [header_line()]
    start, end = scroll_window(rows, cursor, height) if height else (0, len(rows))
    for row in rows[start:end]:
        style = "reverse" if row.selected else ("" if row.index % 2 == 0 else "on grey7")
        main = _join_cells(row_cells(row))
        if style:
            main.stylize(style)
        lines.append(main)
        lines.extend(commit_lines(row))
    return Group(*lines)


def overview(summary: Summary, has_auth: bool) -> Text:
    text = Text()
    if summary.loading:
        text.append(f"⏳  checking {summary.loading}...\n", style="dim")
    if summary.behind:
        text.append(f"▲  {summary.behind}  need deploy\n", style="bold yellow")
    if summary.clean:
        text.append(f"✓  {summary.clean}  up to date\n", style="green")
    if summary.no_release:
        text.append(f"◈  {summary.no_release}  no release\n", style="magenta")
    if summary.errors:
        text.append(f"✗  {summary.errors}  failed\n", style="red")
    text.append(f"·  {summary.total}  repos", style="dim")
    if not has_auth:
        text.append("\n\n⚠  no auth · set GITHUB_TOKEN", style="dim")
    return text
