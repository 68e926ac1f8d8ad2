from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, TextIO


class LogSource:
    """Flat text file holding one radiation sample per line."""

    def __init__(self, path: Path, encoding: str = "utf-8") -> None:
        self.path = path
        self.encoding = encoding

    @contextmanager
    def open_text(self) -> Iterator[TextIO]:
        """Yield a text handle that is closed when the block exits, even on error."""

        with self.path.open("r", encoding=self.encoding, errors="replace", newline=None) as handle:
            yield handle

    def read_lines(self) -> List[str]:
        """Read the whole file up front. Raises ``OSError`` when it cannot be read."""

        with self.open_text() as handle:
            return [line.rstrip("\n") for line in handle]
