"""Interactive branch picker built on Textual."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, Header, Static

from gira.branches import Branch
from gira.selector import SelectionState

STATUS_STYLES = {
    "Done": "green",
    "Discarded": "green",
    "To Do": "grey50",
    "Ready for Dev": "grey50",
}
NO_ISSUE_TEXT = "no issue"

HELP_TEXT = "<enter>: (de)select    <esc>: quit and delete    <ctrl-c>: immediately quit"


def selection_cell(branch: Branch) -> Text:
    if branch.selected:
        return Text("X", style="bold red")
    return Text(" ")


def status_cell(status: str) -> Text:
    """Render an issue status, coloured by how finished the issue is."""
    if not status:
        return Text(NO_ISSUE_TEXT, style="dim italic")
    return Text(status, style=STATUS_STYLES.get(status, ""))


def name_cell(branch: Branch) -> Text:
    text = Text(branch.display_name)
    if branch.protected:
        text.append(" (current)", style="turquoise2")
    return text


class BranchSelectApp(App[bool]):
    """Pick branches to delete.

    The app returns ``True`` when the user aborted and ``False`` when the
    selection should be committed, mirroring :attr:`SelectionState.cancelled`.
    """

    TITLE = "gira: Select branches to delete"

    CSS = """
    #help {
        padding: 0 1;
        color: $text-muted;
    }

    #branches {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "commit", "Quit and delete", priority=True),
        Binding("ctrl+c", "abort", "Immediately quit", priority=True),
        Binding("space", "toggle", "(De)select"),
    ]

    def __init__(self, state: SelectionState) -> None:
        super().__init__()
        self.state = state

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(HELP_TEXT, id="help")
        yield DataTable(id="branches", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#branches", DataTable)
        table.add_column("", key="selected", width=1)
        table.add_column("Status", key="status")
        table.add_column("Branch", key="branch")
        for branch in self.state.branches:
            table.add_row(
                selection_cell(branch),
                status_cell(branch.issue_status),
                name_cell(branch),
                key=branch.reference_name,
            )
        table.focus()

    def _refresh_row(self, branch: Branch) -> None:
        table = self.query_one("#branches", DataTable)
        table.update_cell(branch.reference_name, "selected", selection_cell(branch))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.state.move_to(event.cursor_row)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.state.move_to(event.cursor_row)
        self.action_toggle()

    def action_toggle(self) -> None:
        branch = self.state.current
        if branch is None:
            return
        if self.state.toggle():
            self._refresh_row(branch)
        elif branch.protected:
            self.bell()

    def action_commit(self) -> None:
        self.state.commit()
        self.exit(self.state.cancelled)

    def action_abort(self) -> None:
        self.state.abort()
        self.exit(self.state.cancelled)


def run_selector(branches: list[Branch]) -> bool:
    """Let the user pick branches, flipping their ``selected`` flags in place.

    Returns:
        Whether the user aborted. Leaving the app any other way counts as aborting.
    """
    state = SelectionState(branches)
    BranchSelectApp(state).run()
    return state.cancelled
