from __future__ import annotations

from typing import List, Optional, Protocol

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


class Notifier(Protocol):
    def open_conversation(self, member_ids: List[str]) -> str: ...

    def post_message(self, channel_id: str, text: str) -> None: ...


class ConsoleNotifier:
    """Prints conversations and messages instead of sending them."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._opened = 0

    def open_conversation(self, member_ids: List[str]) -> str:
        self._opened += 1
        channel_id = f"group-{self._opened:02d}"
        self.console.print(f"[cyan]Opened[/cyan] {channel_id} with {', '.join(member_ids)}")
        return channel_id

    def post_message(self, channel_id: str, text: str) -> None:
        self.console.print(Panel(Text(text), title=channel_id, expand=False))
