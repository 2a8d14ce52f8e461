"""
Interactive search session: the keystroke -> search -> render loop.

The session only talks to its environment through three capabilities:
a ``Terminal`` (key/line input plus frame rendering), an opener callable
that launches a file with the default application, and the index store it
searches. ``spotlight_search.terminal`` provides the real implementations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol

from .config import Config
from .searcher import FileSearcher, SearchOutcome
from .store import FileRecord, IndexStore

INVALID_SELECTION = "invalid selection"


class SessionState(Enum):
    TYPING = "typing"
    SELECTING = "selecting"
    EXITING = "exiting"


class InputMode(Enum):
    """How the terminal delivers input: single keys or whole lines."""
    RAW = "raw"
    LINE = "line"


class Key(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    LEFT = "left"
    RIGHT = "right"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        return cls(Key.CHAR, char)


class QueryBuffer:
    """Bounded query text with an insertion cursor."""

    def __init__(self, max_length: int = 255):
        self.max_length = max_length
        self._chars: List[str] = []
        self.cursor = 0

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def insert(self, char: str) -> bool:
        if len(self._chars) >= self.max_length:
            return False
        self._chars.insert(self.cursor, char)
        self.cursor += 1
        return True

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        self.cursor -= 1
        del self._chars[self.cursor]
        return True

    def move(self, delta: int) -> bool:
        target = min(max(self.cursor + delta, 0), len(self._chars))
        if target == self.cursor:
            return False
        self.cursor = target
        return True

    def clear(self) -> None:
        self._chars.clear()
        self.cursor = 0


def elide_filename(filename: str, width: int) -> str:
    """Cut names wider than ``width`` and mark the cut with a trailing '...'."""
    if len(filename) <= width:
        return filename
    return filename[: max(width - 3, 0)] + "..."


def elide_path(path: str, width: int) -> str:
    """Keep the tail of long paths, replacing the head with '...'."""
    if len(path) < width:
        return path
    return "..." + path[len(path) - (width - 4):]


def status_text(query: str, outcome: SearchOutcome, total_files: int) -> str:
    if not query:
        return f"{total_files} files indexed, ready"
    return f"found {outcome.count} matches in {outcome.elapsed:.4f} seconds"


@dataclass(frozen=True)
class FrameRow:
    number: int
    filename: str
    path: str


@dataclass
class Frame:
    """Everything a renderer needs to redraw the screen."""
    query: str
    cursor: int
    records: List[FileRecord] = field(default_factory=list)
    rows: List[FrameRow] = field(default_factory=list)
    status: str = ""


class Terminal(Protocol):
    def set_mode(self, mode: InputMode) -> None: ...

    def read_key(self) -> KeyEvent: ...

    def read_line(self, prompt: str) -> str: ...

    def render(self, frame: Frame) -> None: ...


Opener = Callable[[str], None]


class InteractiveSession:
    """State machine driving incremental search over an index store."""

    def __init__(
        self,
        store: IndexStore,
        terminal: Terminal,
        opener: Opener,
        config: Optional[Config] = None,
    ):
        self.store = store
        self.terminal = terminal
        self.opener = opener
        self.config = config or Config()
        self.searcher = FileSearcher(store, self.config)
        self.buffer = QueryBuffer(self.config.session.max_query_length)
        self.state = SessionState.TYPING
        self.last = SearchOutcome("")

    @property
    def query(self) -> str:
        return self.buffer.text

    def run(self) -> None:
        """Loop until the user quits, then release the index."""
        self.refresh()
        while self.state is not SessionState.EXITING:
            self.handle(self.terminal.read_key())
        self.store.clear()

    def handle(self, event: KeyEvent) -> None:
        if self.state is not SessionState.TYPING:
            return

        if event.key is Key.ESCAPE:
            self.state = SessionState.EXITING
        elif event.key is Key.ENTER:
            self.commit()
        elif event.key is Key.BACKSPACE:
            if self.buffer.backspace():
                self.refresh()
        elif event.key in (Key.LEFT, Key.RIGHT):
            if self.buffer.move(-1 if event.key is Key.LEFT else 1):
                self.terminal.render(self.frame())
        elif event.key is Key.CHAR:
            if event.char.isprintable() and len(event.char) == 1 and self.buffer.insert(event.char):
                self.refresh()

    def commit(self) -> None:
        """Ask which of the current matches to open."""
        if self.last.count == 0:
            return

        self.state = SessionState.SELECTING
        self.terminal.set_mode(InputMode.LINE)
        try:
            answer = self.terminal.read_line(f"Open file ID (1-{self.last.count}): ")
        finally:
            self.terminal.set_mode(InputMode.RAW)

        record = self.selected(answer)
        status = None
        if record is not None:
            self.opener(record.fullpath)
            self.buffer.clear()
        else:
            status = INVALID_SELECTION
            if self.config.session.clear_query_on_cancel:
                self.buffer.clear()

        self.state = SessionState.TYPING
        self.refresh(status)

    def selected(self, answer: str) -> Optional[FileRecord]:
        try:
            choice = int(answer.strip())
        except ValueError:
            return None
        if 1 <= choice <= self.last.count:
            return self.last.records[choice - 1]
        return None

    def refresh(self, status: Optional[str] = None) -> None:
        """Re-run the search for the current buffer and redraw."""
        self.last = self.searcher.search(self.buffer.text)
        self.terminal.render(self.frame(status))

    def frame(self, status: Optional[str] = None) -> Frame:
        session = self.config.session
        rows = [
            FrameRow(
                number,
                elide_filename(record.filename, session.filename_width),
                elide_path(record.fullpath, session.path_width),
            )
            for number, record in enumerate(self.last.records, start=1)
        ]
        return Frame(
            query=self.buffer.text,
            cursor=self.buffer.cursor,
            records=list(self.last.records),
            rows=rows,
            status=status or status_text(self.buffer.text, self.last, self.store.size()),
        )
