# Console I/O
# Hidden password entry, yes/no confirmation and colored output for the CLI.
# The vault engine never calls these directly: the CLI injects
# prompt_password as the engine's password source.

import getpass
import sys

from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()

# Output palette
KEY = Fore.MAGENTA
VALUE = Fore.CYAN
GOOD = Fore.YELLOW
BAD = Fore.RED
MUTED = Style.DIM


def paint(text: str, color: str) -> str:
    """Wrap text in a color, reset afterwards."""
    return f"{color}{text}{Style.RESET_ALL}"


def say(text: str, color: str = "") -> None:
    print(paint(text, color) if color else text)


def warn(text: str) -> None:
    print(paint(text, BAD), file=sys.stderr)


def prompt_password(label: str) -> str:
    """Read a password without echo."""
    return getpass.getpass(label)


def confirm(label: str, default: bool = False) -> bool:
    """Ask a yes/no question. Empty answer returns default."""
    suffix = " [Y/n] " if default else " [y/N] "
    answer = input(label + suffix).strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")
