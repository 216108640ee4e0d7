"""
Dialog surface for showing text to the user
"""

import sys
from collections import deque
from abc import ABC, abstractmethod
from typing import Deque, Optional, TextIO, Tuple
from src.config.constants import DIALOG_HISTORY_LIMIT
from src.utils.logger import logger


class DialogClient(ABC):
    """Presentation surface used by menu actions"""

    @abstractmethod
    def show_text_dialog(self, title: str, message: str) -> None:
        """Show a titled text message"""


class ConsoleDialogClient(DialogClient):
    """Prints dialogs to a text stream"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.logger = logger

    def show_text_dialog(self, title: str, message: str) -> None:
        self.logger.debug(f"Dialog shown: {title}")
        self.stream.write(f"== {title} ==\n{message}\n")
        self.stream.flush()


class RecordingDialogClient(DialogClient):
    """Keeps the most recent dialogs in memory; used by the HTTP API and tests"""

    def __init__(self, max_dialogs: int = DIALOG_HISTORY_LIMIT):
        self.dialogs: Deque[Tuple[str, str]] = deque(maxlen=max_dialogs)

    def show_text_dialog(self, title: str, message: str) -> None:
        self.dialogs.append((title, message))

    @property
    def last(self) -> Optional[Tuple[str, str]]:
        return self.dialogs[-1] if self.dialogs else None
