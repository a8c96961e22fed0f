"""
Ghar Nari - Logger
==================

Tree-style logging for the storage engine.
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from gharnari.core.config import LOGS_DIR


# ANSI colors
RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
CYAN = "\033[96m"
GRAY = "\033[90m"

TreeItems = Sequence[Tuple[str, Any]]


class Logger:
    """Tree-style logger with colors."""

    def __init__(self):
        self.log_file = LOGS_DIR / "app.log"
        self.error_file = LOGS_DIR / "app_error.log"

    def _timestamp(self) -> str:
        """Get formatted timestamp."""
        return datetime.now().astimezone().strftime("%I:%M:%S %p %Z")

    def _write_file(self, message: str, error: bool = False) -> None:
        """Write to log file."""
        try:
            with open(self.error_file if error else self.log_file, "a", encoding="utf-8") as f:
                f.write(message + "\n")
        except OSError:
            pass

    def _format_tree(self, items: Optional[TreeItems]) -> str:
        """Format items as a tree."""
        if not items:
            return ""
        lines = []
        for i, (key, value) in enumerate(items):
            prefix = "└─" if i == len(items) - 1 else "├─"
            lines.append(f"  {prefix} {key}: {value}")
        return "\n".join(lines)

    def _emit(
        self,
        title: str,
        items: Optional[TreeItems],
        emoji: str,
        color: str,
        error: bool = False,
    ) -> None:
        timestamp = self._timestamp()
        tree_str = self._format_tree(items)

        # Console output with colors
        console_msg = f"{GRAY}[{timestamp}]{RESET} {emoji} {color}{BOLD}{title}{RESET}"
        if tree_str:
            console_msg += f"\n{CYAN}{tree_str}{RESET}"
        print(console_msg)

        # File output without colors
        file_msg = f"[{timestamp}] {emoji} {title}"
        if tree_str:
            file_msg += f"\n{tree_str}"
        self._write_file(file_msg, error=error)

    def tree(self, title: str, items: TreeItems, emoji: str = "ℹ️") -> None:
        """Log with tree format."""
        self._emit(title, items, emoji, "")

    def info(self, message: str) -> None:
        """Log info message."""
        self._emit(message, None, f"{BLUE}ℹ️{RESET}", "")

    def success(self, message: str) -> None:
        """Log success message."""
        self._emit(message, None, f"{GREEN}✅{RESET}", "")

    def warning(self, title: str, items: Optional[TreeItems] = None) -> None:
        """Log warning with optional tree details."""
        self._emit(title, items, "⚠️", YELLOW, error=True)

    def error(self, title: str, items: Optional[TreeItems] = None) -> None:
        """Log error with optional tree details."""
        self._emit(title, items, "❌", RED, error=True)

    def error_tree(
        self,
        title: str,
        error: BaseException,
        items: Optional[List[Tuple[str, Any]]] = None,
    ) -> None:
        """Log an exception with its type and message appended to the tree."""
        details = list(items or [])
        details.append(("Error Type", type(error).__name__))
        details.append(("Error", str(error)[:200]))
        self._emit(title, details, "❌", RED, error=True)


logger = Logger()
