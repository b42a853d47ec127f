"""Trove storage for hoarded commands"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, Tuple

from logger import get_logger
from exceptions import StoreError
from constants import TROVE_VERSION, TAG_SEPARATOR


@dataclass
class CommandEntry:
    """Represents a hoarded command template"""
    name: str = ""
    namespace: str = ""
    command: str = ""
    tags: List[str] = field(default_factory=list)
    description: str = ""

    @property
    def identity(self) -> Tuple[str, str]:
        """(namespace, name) pair, unique within a trove"""
        return self.namespace, self.name

    def tags_as_string(self) -> str:
        return f"{TAG_SEPARATOR} ".join(self.tags)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CommandEntry':
        """Create from dictionary"""
        tags = data.get('tags') or []
        if isinstance(tags, str):
            tags = [tag.strip() for tag in tags.split(TAG_SEPARATOR) if tag.strip()]
        return cls(
            name=str(data.get('name') or ''),
            namespace=str(data.get('namespace') or ''),
            command=str(data.get('command') or ''),
            tags=list(dict.fromkeys(str(tag) for tag in tags)),
            description=str(data.get('description') or ''),
        )


class TroveStore:
    """Loads and saves the whole list of hoarded commands as one YAML file"""

    def __init__(self, trove_path: str):
        self.logger = get_logger(self.__class__.__name__)
        self.trove_path = trove_path

    def load(self) -> List[CommandEntry]:
        """Load all entries in file order"""
        if not os.path.exists(self.trove_path):
            self.logger.debug(f"Trove {self.trove_path} does not exist, starting empty")
            return []

        try:
            with open(self.trove_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Invalid YAML in trove {self.trove_path}: {e}")
            raise StoreError(f"Invalid YAML in trove file: {e}")
        except OSError as e:
            self.logger.error(f"Could not read trove {self.trove_path}: {e}")
            raise StoreError(f"Could not read trove file: {e}")

        if not isinstance(data, dict) or not isinstance(data.get('commands', []), list):
            raise StoreError(f"Trove file {self.trove_path} has no command list")

        entries = [CommandEntry.from_dict(item) for item in data.get('commands', []) if isinstance(item, dict)]
        self.logger.debug(f"Loaded {len(entries)} commands from {self.trove_path}")
        return entries

    def save_all(self, entries: List[CommandEntry]):
        """Rewrite the trove with the given entries"""
        data = {
            'version': TROVE_VERSION,
            'commands': [entry.to_dict() for entry in entries]
        }
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.trove_path)), exist_ok=True)
            with open(self.trove_path, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
            self.logger.info(f"Saved {len(entries)} commands to {self.trove_path}")
        except OSError as e:
            self.logger.error(f"Could not save trove {self.trove_path}: {e}")
            raise StoreError(f"Could not save trove file: {e}")
