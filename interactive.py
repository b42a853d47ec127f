"""Terminal input and the interactive session loop"""

import sys
import tty
import termios
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from logger import get_logger
from parameters import ParameterToken
from render import project, paint
from session import Key, KeyEvent, SessionController

RAW_KEYS = {
    '\r': Key.ENTER,
    '\n': Key.ENTER,
    '\t': Key.TAB,
    '\x7f': Key.BACKSPACE,
    '\x08': Key.BACKSPACE,
    '\x1b': Key.ESCAPE,
    '\x1b[A': Key.UP,
    '\x1b[B': Key.DOWN,
    '\x1b[C': Key.RIGHT,
    '\x1b[D': Key.LEFT,
    '\x1b[Z': Key.BACK_TAB,
    '\x01': Key.CTRL_A,
    '\x03': Key.CTRL_C,
    '\x17': Key.CTRL_W,
    '\x18': Key.CTRL_X,
}


def decode_key(raw: str) -> Optional[KeyEvent]:
    """Map raw terminal input to a key event, None for keys hoard ignores"""
    if raw in RAW_KEYS:
        return KeyEvent(RAW_KEYS[raw])
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.text(raw)
    return None


class KeyReader:
    """Reads single key presses from the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.logger = get_logger(self.__class__.__name__)

    def read(self) -> KeyEvent:
        """Block until a key hoard understands is pressed"""
        while True:
            event = decode_key(self._get_key())
            if event is not None:
                return event

    def _get_key(self) -> str:
        """Get a single keypress from user with fallback for non-interactive terminals"""
        if not sys.stdin.isatty():
            try:
                return input()[:1] or '\r'
            except (EOFError, KeyboardInterrupt):
                return '\x1b'

        try:
            fd = sys.stdin.fileno()
            old_settings = termios.tcgetattr(fd)
            try:
                tty.setraw(fd)
                key = sys.stdin.read(1)

                # Handle arrow keys (escape sequences) vs standalone Escape
                if key == '\x1b':
                    import fcntl
                    import os

                    orig_fl = fcntl.fcntl(fd, fcntl.F_GETFL)
                    fcntl.fcntl(fd, fcntl.F_SETFL, orig_fl | os.O_NONBLOCK)
                    try:
                        next_chars = sys.stdin.read(2)
                        if next_chars:
                            key += next_chars
                    except (OSError, IOError):
                        # No more characters available - standalone escape
                        pass
                    finally:
                        fcntl.fcntl(fd, fcntl.F_SETFL, orig_fl)

                return key
            finally:
                termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        except (OSError, termios.error) as e:
            self.logger.debug(f"Raw key input unavailable: {e}")
            self.console.print("[yellow]Raw key input not supported in this terminal.[/yellow]")
            try:
                return input()[:1] or '\r'
            except (EOFError, KeyboardInterrupt):
                return '\x1b'


class ValuePrompt:
    """Asks the user for the value of one command parameter"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def __call__(self, token: ParameterToken, preview: str) -> Optional[str]:
        self.console.print()
        self.console.print(Text.assemble(("Command: ", "bold cyan"), (preview, "white")))
        try:
            return Prompt.ask(f"[bold yellow]{token.name}[/bold yellow]", console=self.console)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            self.console.print("Cancelled", style="yellow")
            return None


class InteractiveSession:
    """Renders the session and feeds it key presses until it finishes"""

    def __init__(self, controller: SessionController, config,
                 console: Optional[Console] = None, reader: Optional[KeyReader] = None):
        self.controller = controller
        self.config = config
        self.console = console or Console()
        self.reader = reader or KeyReader(self.console)
        self.logger = get_logger(self.__class__.__name__)

    def draw(self, state):
        self.console.clear()
        self.console.print(paint(project(state, self.config), self.config))

    def run(self) -> Optional[str]:
        """Run until a command is picked (returned) or the user quits (None)"""
        state = self.controller.snapshot()
        try:
            while not self.controller.finished:
                self.draw(state)
                event = self.reader.read()
                state = self.controller.handle(event)
        finally:
            self.console.clear()
        return self.controller.result
