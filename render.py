"""
Rendering of session snapshots.

``project`` turns a ``SessionState`` into a plain ``Frame`` describing what is
on screen; ``paint`` turns a frame into rich renderables. Only ``paint``
knows about rich.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from constants import APP_NAME, APP_VERSION
from edit_buffer import EditField
from parameters import parse, highlight_parameters
from session import ControlMode, SessionState
from trove import CommandEntry

SEARCH_HELP = "Create <Ctrl-W> | Edit <Tab> | Delete <Ctrl-X> | GPT <Ctrl-A> | Quit <Esc>"
EDIT_HELP = "Next field <Tab> | Save <Enter> | Cancel <Esc>"
GPT_POPUP_MESSAGE = "Describe the command you want and press <Enter>. <Esc> to go back."
NO_KEY_POPUP_MESSAGE = (
    "No API key for command generation is configured. "
    "Set HOARD_GPT_API_KEY or gpt.api_key in your config. Press any key to continue."
)
NO_GENERATOR_POPUP_MESSAGE = (
    "An API key is set, but no command generator is available in this build. "
    "Press any key to continue."
)


@dataclass(frozen=True)
class Frame:
    """Everything the screen shows for one session state"""
    tabs: Tuple[str, ...]
    selected_tab: int
    items: Tuple[str, ...]
    selected_item: Optional[int]
    fields: Dict[EditField, str]
    highlighted_field: Optional[EditField]
    query_line: str
    title: str
    footer_left: str
    footer_right: str
    popup: Optional[str] = None


def project(state: SessionState, config) -> Frame:
    """Pure projection of a session state onto a frame"""
    editing = state.control_mode is ControlMode.EDIT
    entry = (state.draft if editing else state.selected_entry) or CommandEntry()

    fields = {
        EditField.NAME: entry.name,
        EditField.COMMAND: entry.command,
        EditField.TAGS: entry.tags_as_string(),
        EditField.DESCRIPTION: entry.description,
    }
    if editing and state.edit_field is not None:
        fields[state.edit_field] = state.edit_buffer

    popup = None
    if state.control_mode is ControlMode.GPT_PROMPT:
        popup = f"{GPT_POPUP_MESSAGE}\n\n> {state.prompt_text}"
    elif state.control_mode is ControlMode.KEY_NOT_CONFIGURED:
        popup = NO_GENERATOR_POPUP_MESSAGE if state.has_credential else NO_KEY_POPUP_MESSAGE

    footer_left = state.control_mode.value
    if state.control_mode is ControlMode.KEY_NOT_CONFIGURED and state.has_credential:
        footer_left = "Generator not available"
    if editing and state.edit_field is not None:
        footer_left = f"{footer_left}: {state.edit_field.value}"
    if state.message:
        footer_left = f"{footer_left} - {state.message}"

    footer_right = ""
    if state.control_mode is ControlMode.SEARCH:
        footer_right = SEARCH_HELP
    elif editing:
        footer_right = EDIT_HELP

    return Frame(
        tabs=state.namespaces,
        selected_tab=state.namespace_index,
        items=tuple(e.name for e in state.filtered_view),
        selected_item=state.selection_index if state.filtered_view else None,
        fields=fields,
        highlighted_field=state.edit_field if editing else None,
        query_line=f"{config.query_prefix}{state.query_text}",
        title=f" {APP_NAME.lower()} v{APP_VERSION} ",
        footer_left=footer_left,
        footer_right=footer_right,
        popup=popup,
    )


def _rgb(rgb: Tuple[int, int, int]) -> str:
    return "rgb({},{},{})".format(*rgb)


def paint(frame: Frame, config) -> Group:
    """Compose rich renderables for a frame"""
    primary = _rgb(config.color('primary'))
    secondary = _rgb(config.color('secondary'))
    tertiary = _rgb(config.color('tertiary'))
    command_color = _rgb(config.color('command'))

    def border(field: EditField) -> str:
        return secondary if frame.highlighted_field is field else primary

    tabs = Text()
    for i, tab in enumerate(frame.tabs):
        if i:
            tabs.append(" | ", style=primary)
        tabs.append(tab, style=f"underline {secondary}" if i == frame.selected_tab else primary)

    names = Text()
    for i, name in enumerate(frame.items):
        if i:
            names.append("\n")
        names.append(name, style=f"bold {tertiary} on {secondary}" if i == frame.selected_item else primary)

    command = frame.fields[EditField.COMMAND]
    if frame.highlighted_field is EditField.COMMAND:
        command_text = Text(command, style=primary)
    else:
        tokens = parse(command, config.parameter_token, config.parameter_ending_token)
        command_text = highlight_parameters(command, tokens, base_style=primary, param_style=command_color)

    details = Table.grid(expand=True)
    details.add_row(Panel(Text(frame.fields[EditField.TAGS], style=primary), title=" Tags ",
                          border_style=border(EditField.TAGS)))
    details.add_row(Panel(Text(frame.fields[EditField.DESCRIPTION], style=primary), title=" Description ",
                          border_style=border(EditField.DESCRIPTION)))
    details.add_row(Panel(command_text, title=" Hoarded command ", border_style=border(EditField.COMMAND)))

    if frame.highlighted_field is EditField.NAME:
        names = Text(frame.fields[EditField.NAME], style=primary)

    body = Table.grid(expand=True)
    body.add_column(ratio=3)
    body.add_column(ratio=7)
    body.add_row(Panel(names, title=" Commands ", border_style=border(EditField.NAME)), details)

    footer = Table.grid(expand=True)
    footer.add_column(justify="left")
    footer.add_column(justify="right")
    footer.add_row(Text(frame.footer_left, style=primary), Text(frame.footer_right, style=primary))

    parts = [Panel(tabs, title=" Hoard Namespace ", border_style=primary)]
    if frame.popup is not None:
        parts.append(Panel(Text(frame.popup, style=primary, justify="center"), title="GPT", border_style=secondary))
    else:
        parts.append(body)
    parts.append(Panel(Text(frame.query_line, style=primary), title=frame.title, border_style=primary))
    parts.append(footer)
    return Group(*parts)
