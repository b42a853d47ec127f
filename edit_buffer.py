"""Working copy of an entry while it is being edited"""

from dataclasses import replace
from enum import Enum

from constants import TAG_SEPARATOR
from trove import CommandEntry


class EditField(Enum):
    NAME = "Name"
    COMMAND = "Command"
    TAGS = "Tags"
    DESCRIPTION = "Description"

    def next(self) -> 'EditField':
        fields = list(EditField)
        return fields[(fields.index(self) + 1) % len(fields)]

    def previous(self) -> 'EditField':
        fields = list(EditField)
        return fields[(fields.index(self) - 1) % len(fields)]


def split_tags(text: str) -> list:
    """Split a tag string into trimmed, de-duplicated, non-empty tags"""
    tags = (tag.strip() for tag in text.split(TAG_SEPARATOR))
    return list(dict.fromkeys(tag for tag in tags if tag))


class EditBuffer:
    """Holds the text of one field of a draft entry.

    Switching fields snapshots the text into the draft. The entry the draft
    was copied from is never touched, so dropping the buffer discards every
    edit.
    """

    def __init__(self, entry: CommandEntry, field: EditField = EditField.NAME):
        self.draft = replace(entry, tags=list(entry.tags))
        self.field = field
        self.text = self._field_value(field)

    def _field_value(self, field: EditField) -> str:
        if field is EditField.NAME:
            return self.draft.name
        if field is EditField.COMMAND:
            return self.draft.command
        if field is EditField.TAGS:
            return self.draft.tags_as_string()
        return self.draft.description

    def _store_text(self):
        if self.field is EditField.NAME:
            self.draft.name = self.text.strip()
        elif self.field is EditField.COMMAND:
            self.draft.command = self.text
        elif self.field is EditField.TAGS:
            self.draft.tags = split_tags(self.text)
        else:
            self.draft.description = self.text

    def insert(self, text: str):
        self.text += text

    def backspace(self):
        self.text = self.text[:-1]

    def switch_to(self, field: EditField):
        """Commit the current field and load another one"""
        self._store_text()
        self.field = field
        self.text = self._field_value(field)

    def next_field(self):
        self.switch_to(self.field.next())

    def previous_field(self):
        self.switch_to(self.field.previous())

    def commit(self) -> CommandEntry:
        """Commit the current field and return a copy of the finished draft"""
        self._store_text()
        return replace(self.draft, tags=list(self.draft.tags))
