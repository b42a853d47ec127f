"""Pytest configuration and fixtures"""

import pytest
import tempfile
import os
from unittest.mock import Mock

from config import Config
from trove import CommandEntry, TroveStore
from session import SessionController


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
        f.write("""
general:
  default_namespace: work
  query_prefix: "$ "
  read_from_current_directory: false
colors:
  primary: [1, 2, 3]
parameters:
  token: "@"
  ending_token: "%"
gpt:
  api_key: config_key
""")
        temp_path = f.name

    yield temp_path

    # Cleanup
    os.unlink(temp_path)


@pytest.fixture
def default_config(tmp_path):
    """Configuration with every default, backed by a file that does not exist yet"""
    return Config(str(tmp_path / "config.yml"))


@pytest.fixture
def sample_entries():
    """Sample hoarded commands for testing"""
    return [
        CommandEntry(
            name="ssh-prod",
            namespace="default",
            command="ssh #user!@prod.example.com",
            tags=["ssh", "remote"],
            description="Log into production"
        ),
        CommandEntry(
            name="grep-logs",
            namespace="default",
            command="grep -r #pattern /var/log",
            tags=["logs", "search"],
            description="Search the logs over ssh"
        ),
        CommandEntry(
            name="list",
            namespace="default",
            command="ls -la",
            tags=[],
            description="List files with details"
        ),
        CommandEntry(
            name="docker-ps",
            namespace="docker",
            command="docker ps -a",
            tags=["containers"],
            description="All containers"
        ),
    ]


@pytest.fixture
def trove_store(tmp_path, sample_entries):
    """Trove on disk holding the sample entries"""
    store = TroveStore(str(tmp_path / "trove.yml"))
    store.save_all(sample_entries)
    return store


@pytest.fixture
def value_prompt():
    """Parameter prompt that answers with the upper-cased parameter name"""
    return Mock(side_effect=lambda token, preview: token.name.upper())


@pytest.fixture
def controller(sample_entries, default_config, trove_store, value_prompt):
    """Session controller over the sample trove"""
    return SessionController(sample_entries, default_config, trove_store, value_prompt)


@pytest.fixture
def mock_console():
    """Mock rich console for testing"""
    return Mock()
