"""Presentation boundary: show the image and its predicted label."""

from __future__ import annotations

from abc import ABC, abstractmethod

from PIL import Image
from rich.console import Console
from rich.table import Table


class BaseDisplay(ABC):
    """Somewhere to put an image and a text label."""

    @abstractmethod
    def set_image(self, image: Image.Image) -> None:
        """Show ``image``."""

    @abstractmethod
    def set_text(self, text: str) -> None:
        """Show ``text``."""


class ConsoleDisplay(BaseDisplay):
    """Render to the terminal with rich.

    The image is summarised (size and mode), the label is printed as-is.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.image: Image.Image | None = None
        self.text: str | None = None

    def set_image(self, image: Image.Image) -> None:
        self.image = image
        table = Table(title="Image")
        table.add_column("Width", justify="right")
        table.add_column("Height", justify="right")
        table.add_column("Mode")
        table.add_row(str(image.width), str(image.height), image.mode)
        self.console.print(table)

    def set_text(self, text: str) -> None:
        self.text = text
        self.console.print(f"[bold green]{text}[/bold green]")
