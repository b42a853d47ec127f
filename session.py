"""Interactive session state machine"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from edit_buffer import EditBuffer, EditField
from exceptions import GenerationError, StoreError
from logger import get_logger
from parameters import ParameterResolver, ValuePromptFn
from search import filter_entries, namespaces
from trove import CommandEntry, TroveStore
from credentials import TemplateGenerator


class ControlMode(Enum):
    SEARCH = "Search"
    EDIT = "Edit"
    GPT_PROMPT = "GPT"
    KEY_NOT_CONFIGURED = "API key not set"


class Key(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    BACK_TAB = "back_tab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CTRL_A = "ctrl_a"
    CTRL_C = "ctrl_c"
    CTRL_W = "ctrl_w"
    CTRL_X = "ctrl_x"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""

    @classmethod
    def text(cls, char: str) -> 'KeyEvent':
        return cls(Key.CHAR, char)


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session handed to the renderer"""
    control_mode: ControlMode
    edit_field: Optional[EditField]
    query_text: str
    selection_index: int
    filtered_view: Tuple[CommandEntry, ...]
    edit_buffer: str
    namespace_index: int
    namespaces: Tuple[str, ...]
    popup_visible: bool
    prompt_text: str = ""
    message: str = ""
    draft: Optional[CommandEntry] = None
    has_credential: bool = False

    @property
    def selected_entry(self) -> Optional[CommandEntry]:
        if not self.filtered_view:
            return None
        return self.filtered_view[self.selection_index]


class SessionController:
    """Drives search, edit and generation modes over the hoarded commands"""

    def __init__(self, entries: Sequence[CommandEntry], config, store: TroveStore,
                 value_prompt: ValuePromptFn, generator: Optional[TemplateGenerator] = None,
                 has_credential: bool = False, namespace: Optional[str] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.config = config
        self.store = store
        self.value_prompt = value_prompt
        self.generator = generator
        self.has_credential = has_credential
        self.resolver = ParameterResolver.from_config(config)

        self.entries: List[CommandEntry] = list(entries)
        self.namespaces = namespaces(self.entries, config.default_namespace)
        if namespace and namespace not in self.namespaces:
            self.namespaces.append(namespace)
        self.namespace_index = self.namespaces.index(namespace) if namespace else 0

        self.mode = ControlMode.SEARCH
        self.query_text = ""
        self.selection_index = 0
        self.filtered_view: List[CommandEntry] = []
        self.edit: Optional[EditBuffer] = None
        self.editing_identity: Optional[Tuple[str, str]] = None
        self.prompt_text = ""
        self.message = ""

        self.finished = False
        self.result: Optional[str] = None

        self._handlers: Dict[ControlMode, Callable[[KeyEvent], None]] = {
            ControlMode.SEARCH: self._handle_search,
            ControlMode.EDIT: self._handle_edit,
            ControlMode.GPT_PROMPT: self._handle_gpt_prompt,
            ControlMode.KEY_NOT_CONFIGURED: self._handle_key_not_configured,
        }
        self._refilter()

    @property
    def current_namespace(self) -> str:
        return self.namespaces[self.namespace_index]

    @property
    def selected_entry(self) -> Optional[CommandEntry]:
        if not self.filtered_view:
            return None
        return self.filtered_view[self.selection_index]

    def snapshot(self) -> SessionState:
        in_edit = self.mode is ControlMode.EDIT and self.edit is not None
        return SessionState(
            control_mode=self.mode,
            edit_field=self.edit.field if in_edit else None,
            query_text=self.query_text,
            selection_index=self.selection_index,
            filtered_view=tuple(self.filtered_view),
            edit_buffer=self.edit.text if in_edit else "",
            namespace_index=self.namespace_index,
            namespaces=tuple(self.namespaces),
            popup_visible=self.mode in (ControlMode.GPT_PROMPT, ControlMode.KEY_NOT_CONFIGURED),
            prompt_text=self.prompt_text,
            message=self.message,
            draft=replace(self.edit.draft, tags=list(self.edit.draft.tags)) if in_edit else None,
            has_credential=self.has_credential,
        )

    def handle(self, event: KeyEvent) -> SessionState:
        """Process one key event to completion and return the new state"""
        self.message = ""
        self._handlers[self.mode](event)
        return self.snapshot()

    # ---------- Selection ----------

    def _refilter(self):
        self.filtered_view = filter_entries(self.entries, self.current_namespace, self.query_text)
        self._clamp_selection()

    def _clamp_selection(self):
        if not self.filtered_view:
            self.selection_index = 0
        elif self.selection_index >= len(self.filtered_view) or self.selection_index < 0:
            self.selection_index = len(self.filtered_view) - 1

    def _set_query(self, query: str):
        before = {entry.identity for entry in self.filtered_view}
        selected = self.selected_entry
        self.query_text = query
        self._refilter()
        if {entry.identity for entry in self.filtered_view} != before:
            self.selection_index = 0
        elif selected is not None:
            # Same matches, possibly reordered: follow the selected entry
            self.selection_index = next(
                (i for i, entry in enumerate(self.filtered_view) if entry is selected),
                self.selection_index
            )

    def _switch_namespace(self, step: int):
        self.namespace_index = (self.namespace_index + step) % len(self.namespaces)
        self.selection_index = 0
        self._refilter()

    def _refresh_namespaces(self):
        current = self.current_namespace
        tabs = namespaces(self.entries, self.config.default_namespace)
        if current not in tabs:
            tabs.insert(min(self.namespace_index, len(tabs)), current)
        self.namespaces = tabs
        self.namespace_index = tabs.index(current)

    # ---------- Search mode ----------

    def _handle_search(self, event: KeyEvent):
        key = event.key
        if key is Key.CHAR:
            self._set_query(self.query_text + event.char)
        elif key is Key.BACKSPACE:
            self._set_query(self.query_text[:-1])
        elif key is Key.UP:
            self.selection_index = max(0, self.selection_index - 1)
        elif key is Key.DOWN:
            self.selection_index = min(max(len(self.filtered_view) - 1, 0), self.selection_index + 1)
        elif key is Key.LEFT:
            self._switch_namespace(-1)
        elif key is Key.RIGHT:
            self._switch_namespace(1)
        elif key is Key.ENTER:
            self._resolve_selected()
        elif key is Key.CTRL_W:
            self._start_edit(CommandEntry(namespace=self.current_namespace), None, EditField.NAME)
        elif key is Key.TAB:
            entry = self.selected_entry
            if entry is not None:
                self._start_edit(entry, entry.identity, EditField.NAME)
        elif key is Key.CTRL_X:
            self._delete_selected()
        elif key is Key.CTRL_A:
            if self.has_credential and self.generator is not None:
                self.prompt_text = ""
                self.mode = ControlMode.GPT_PROMPT
            else:
                self.mode = ControlMode.KEY_NOT_CONFIGURED
        elif key in (Key.ESCAPE, Key.CTRL_C):
            self.finished = True
            self.result = None

    def _resolve_selected(self):
        entry = self.selected_entry
        if entry is None:
            return
        resolved = self.resolver.resolve_interactively(entry.command, self.value_prompt)
        if resolved is None:
            self.message = "Cancelled"
            return
        self.logger.info(f"Selected command '{entry.name}' from namespace '{entry.namespace}'")
        self.finished = True
        self.result = resolved

    def _delete_selected(self):
        entry = self.selected_entry
        if entry is None:
            return
        position = next(i for i, e in enumerate(self.entries) if e is entry)
        remaining = self.entries[:position] + self.entries[position + 1:]
        if not self._save(remaining):
            return
        self.entries = remaining
        self.logger.info(f"Deleted command '{entry.name}' from namespace '{entry.namespace}'")
        self._refresh_namespaces()
        self._refilter()

    def _save(self, entries: List[CommandEntry]) -> bool:
        try:
            self.store.save_all(entries)
        except StoreError as e:
            self.logger.error(f"Could not save trove: {e}")
            self.message = f"Could not save: {e}"
            return False
        return True

    # ---------- Edit mode ----------

    def _start_edit(self, entry: CommandEntry, identity: Optional[Tuple[str, str]], field: EditField):
        self.edit = EditBuffer(entry, field)
        self.editing_identity = identity
        self.mode = ControlMode.EDIT

    def _leave_edit(self):
        self.edit = None
        self.editing_identity = None
        self.mode = ControlMode.SEARCH

    def _handle_edit(self, event: KeyEvent):
        key = event.key
        if key is Key.CHAR:
            self.edit.insert(event.char)
        elif key is Key.BACKSPACE:
            self.edit.backspace()
        elif key is Key.TAB:
            self.edit.next_field()
        elif key is Key.BACK_TAB:
            self.edit.previous_field()
        elif key is Key.ENTER:
            self._confirm_edit()
        elif key in (Key.ESCAPE, Key.CTRL_C):
            self.logger.debug("Edit cancelled, draft discarded")
            self._leave_edit()

    def _confirm_edit(self):
        draft = self.edit.commit()
        if not draft.name:
            self.message = "A command needs a name"
            return
        if not draft.namespace:
            draft.namespace = self.current_namespace

        entries = list(self.entries)
        index = None
        if self.editing_identity is not None:
            index = next((i for i, e in enumerate(entries) if e.identity == self.editing_identity), None)
        clash = next((i for i, e in enumerate(entries) if e.identity == draft.identity and i != index), None)

        if index is not None:
            entries[index] = draft
            if clash is not None:
                del entries[clash]
        elif clash is not None:
            entries[clash] = draft
        else:
            entries.append(draft)

        if not self._save(entries):
            return
        self.entries = entries
        self.logger.info(f"Saved command '{draft.name}' in namespace '{draft.namespace}'")
        self._leave_edit()
        self._refresh_namespaces()
        self._refilter()
        for i, entry in enumerate(self.filtered_view):
            if entry.identity == draft.identity:
                self.selection_index = i
                break

    # ---------- Generation ----------

    def _handle_gpt_prompt(self, event: KeyEvent):
        key = event.key
        if key is Key.CHAR:
            self.prompt_text += event.char
        elif key is Key.BACKSPACE:
            self.prompt_text = self.prompt_text[:-1]
        elif key is Key.ENTER:
            self._generate()
        elif key in (Key.ESCAPE, Key.CTRL_C):
            self.prompt_text = ""
            self.mode = ControlMode.SEARCH

    def _generate(self):
        prompt_text = self.prompt_text.strip()
        if not prompt_text:
            return
        try:
            template = self.generator.generate(prompt_text)
        except GenerationError as e:
            self.logger.error(f"Command generation failed: {e}")
            self.message = f"Generation failed: {e}"
            self.prompt_text = ""
            self.mode = ControlMode.SEARCH
            return
        self.prompt_text = ""
        draft = CommandEntry(namespace=self.current_namespace, command=template, description=prompt_text)
        self._start_edit(draft, None, EditField.COMMAND)

    def _handle_key_not_configured(self, event: KeyEvent):
        self.mode = ControlMode.SEARCH
