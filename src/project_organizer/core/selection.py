"""Ways of choosing the project directory to work on."""

from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from ..exceptions import DirectorySelectionError, DirectoryNotFoundError

DirectoryProvider = Callable[[], Optional[str]]


class DialogDirectoryProvider:
    """Ask for a directory with the desktop folder picker."""

    def __init__(self, title: str = "Select project directory"):
        self.title = title

    def __call__(self) -> Optional[str]:
        try:
            import tkinter
            from tkinter import filedialog
        except ImportError as e:
            raise DirectorySelectionError(f"No directory dialog available: {e}")

        try:
            window = tkinter.Tk()
        except tkinter.TclError as e:
            raise DirectorySelectionError(f"Cannot open directory dialog: {e}")

        window.withdraw()
        try:
            selected = filedialog.askdirectory(title=self.title, mustexist=True)
        finally:
            window.destroy()
        return selected or None


class PromptDirectoryProvider:
    """Ask for a directory on the terminal."""

    def __init__(self, console: Optional[Console] = None, default: Optional[str] = None):
        self.console = console
        self.default = default

    def __call__(self) -> Optional[str]:
        kwargs = {"console": self.console} if self.console else {}
        if self.default:
            kwargs["default"] = self.default
        answer = Prompt.ask("Project directory", **kwargs)
        return answer.strip() if answer else None


def validate_target(path) -> Path:
    """Check that a selected path is an existing directory."""
    target = Path(path).expanduser()
    if not target.exists():
        raise DirectoryNotFoundError(f"Project path does not exist: {target}")
    if not target.is_dir():
        raise DirectoryNotFoundError(f"Project path is not a directory: {target}")
    return target.resolve()


def resolve_target(provider: DirectoryProvider) -> Path:
    """Get a directory from a provider and validate it."""
    selected = provider()
    if not selected:
        raise DirectorySelectionError("Failed to select project directory: cancelled")
    return validate_target(selected)
