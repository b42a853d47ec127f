"""Tests for terminal input and the session loop"""

import io
import pytest
from unittest.mock import Mock, patch

from rich.console import Console

from interactive import InteractiveSession, ValuePrompt, decode_key
from parameters import ParameterToken
from session import Key, KeyEvent


class TestDecodeKey:

    @pytest.mark.parametrize("raw,key", [
        ('\r', Key.ENTER),
        ('\t', Key.TAB),
        ('\x1b[Z', Key.BACK_TAB),
        ('\x7f', Key.BACKSPACE),
        ('\x1b', Key.ESCAPE),
        ('\x1b[A', Key.UP),
        ('\x1b[D', Key.LEFT),
        ('\x01', Key.CTRL_A),
        ('\x17', Key.CTRL_W),
        ('\x18', Key.CTRL_X),
    ])
    def test_control_keys(self, raw, key):
        assert decode_key(raw) == KeyEvent(key)

    def test_printable_character(self):
        assert decode_key('#') == KeyEvent.text('#')

    def test_unknown_sequence_ignored(self):
        assert decode_key('\x1b[5~') is None
        assert decode_key('\x02') is None


class TestInteractiveSession:
    """Test cases for the session loop"""

    def _session(self, controller, config, keys):
        reader = Mock()
        reader.read.side_effect = keys
        console = Console(file=io.StringIO(), width=100)
        return InteractiveSession(controller, config, console=console, reader=reader)

    def test_returns_resolved_command(self, controller, default_config):
        session = self._session(controller, default_config, [
            KeyEvent.text("l"), KeyEvent.text("i"), KeyEvent(Key.ENTER),
        ])

        assert session.run() == "ls -la"

    def test_escape_returns_none(self, controller, default_config):
        session = self._session(controller, default_config, [KeyEvent(Key.ESCAPE)])

        assert session.run() is None


class TestValuePrompt:
    """Test cases for parameter prompting"""

    @patch('interactive.Prompt.ask')
    def test_returns_answer(self, mock_ask):
        mock_ask.return_value = "alice"
        prompt = ValuePrompt(Console(file=io.StringIO()))

        assert prompt(ParameterToken('user', [(4, 10)]), "ssh #user!@host") == "alice"

    @patch('interactive.Prompt.ask')
    def test_interrupt_cancels(self, mock_ask):
        mock_ask.side_effect = KeyboardInterrupt()
        prompt = ValuePrompt(Console(file=io.StringIO()))

        assert prompt(ParameterToken('user', [(4, 10)]), "ssh #user!@host") is None
