import subprocess
import sys
from typing import Optional, TextIO

from rich.console import Console

from logger import get_logger
from exceptions import ValidationError
from constants import EXECUTION_MODES, DEFAULT_EXECUTION_MODE

try:
    import pyperclip
    CLIPBOARD_AVAILABLE = True
except ImportError:
    CLIPBOARD_AVAILABLE = False


class CommandExecutor:
    """Hands a resolved command over to the shell, the clipboard or stdout"""

    def __init__(self, console: Optional[Console] = None, output: Optional[TextIO] = None):
        self.console = console or Console(stderr=True)
        self.output = output or sys.stdout
        self.logger = get_logger(self.__class__.__name__)

    def handle(self, command: str, mode: str = DEFAULT_EXECUTION_MODE) -> bool:
        """Dispatch the command according to the execution mode"""
        if mode not in EXECUTION_MODES:
            raise ValidationError(f"Unknown execution mode '{mode}', expected one of {', '.join(EXECUTION_MODES)}")

        if mode == 'run':
            return self.run_command(command)
        if mode == 'copy':
            return self.copy_command(command)
        return self.print_command(command)

    def print_command(self, command: str) -> bool:
        """Write the command to stdout so shell widgets can pick it up"""
        self.output.write(command + "\n")
        self.output.flush()
        return True

    def copy_command(self, command: str) -> bool:
        """Copy command to clipboard"""
        if CLIPBOARD_AVAILABLE:
            try:
                pyperclip.copy(command)
                self.console.print("● Copied to clipboard:", style="green", end=" ")
                self.console.print(command, style="bold", markup=False)
                return True
            except pyperclip.PyperclipException as e:
                self.logger.warning(f"Copy failed: {e}")
                self.console.print(f"Copy failed: {e}", style="red")
        else:
            self.console.print("Clipboard unavailable", style="yellow")
        return self.print_command(command)

    def run_command(self, command: str) -> bool:
        """Execute command with minimal, clean output"""
        self.console.print("❯", style="bold blue", end=" ")
        self.console.print(command, style="bold", markup=False)
        self.logger.info(f"Running: {command}")

        try:
            result = subprocess.run(command, shell=True, text=True)
        except KeyboardInterrupt:
            self.console.print()
            self.console.print("Interrupted", style="yellow")
            return False
        except OSError as e:
            self.logger.error(f"Failed to execute command: {e}")
            self.console.print(f"Error: {e}", style="red")
            return False

        if result.returncode != 0:
            self.console.print(f"◀ exit {result.returncode}", style="dim red")
        return result.returncode == 0
