"""Terminal capabilities for the interactive session.

Owns the input discipline (single keys vs. whole lines), key decoding with
ESC-sequence timing, frame drawing through rich, and launching files with
the platform's default application.
"""

import os
import select
import subprocess
import sys
from typing import List, Optional

from rich.console import Console, Group
from rich.markup import escape
from rich.rule import Rule
from rich.text import Text

from .config import Config
from .session import Frame, InputMode, Key, KeyEvent

if os.name == "nt":
    import msvcrt
else:
    import termios
    import tty

ESC_SEQUENCE_TIMEOUT_MS = 25
CSI_MAX_LENGTH = 32

_CONTROL_KEYS = {
    b"\r": Key.ENTER,
    b"\n": Key.ENTER,
    b"\x7f": Key.BACKSPACE,
    b"\x08": Key.BACKSPACE,
    b"\x03": Key.ESCAPE,
    b"\x04": Key.ESCAPE,
}


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _arrow_or_ignored(final: Optional[bytes]) -> KeyEvent:
    if final == b"C":
        return KeyEvent(Key.RIGHT)
    if final == b"D":
        return KeyEvent(Key.LEFT)
    return KeyEvent(Key.IGNORED)


class TerminalIO:
    """Keyboard input and screen output on a real terminal."""

    def __init__(self, config: Optional[Config] = None, console: Optional[Console] = None,
                 stdin_fd: Optional[int] = None) -> None:
        self.config = config or Config()
        self.console = console or Console(highlight=False)
        self.stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self._saved_tty_state = None
        self._pending: List[bytes] = []

    def __enter__(self) -> "TerminalIO":
        if os.name != "nt":
            self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
        self.set_mode(InputMode.RAW)
        return self

    def __exit__(self, *exc_info) -> None:
        self.set_mode(InputMode.LINE)
        self.console.clear()

    def set_mode(self, mode: InputMode) -> None:
        if os.name == "nt" or self._saved_tty_state is None:
            return
        if mode is InputMode.RAW:
            # Keys arrive one at a time without echo; signals stay enabled.
            tty.setcbreak(self.stdin_fd, termios.TCSANOW)
        else:
            termios.tcsetattr(self.stdin_fd, termios.TCSANOW, self._saved_tty_state)

    def _read_byte(self, timeout_ms: Optional[int] = None) -> Optional[bytes]:
        if self._pending:
            return self._pending.pop(0)
        if timeout_ms is not None:
            ready, _, _ = select.select([self.stdin_fd], [], [], timeout_ms / 1000.0)
            if not ready:
                return None
        ch = os.read(self.stdin_fd, 1)
        return ch or None

    def _read_csi_final(self) -> Optional[bytes]:
        """Consume CSI parameter bytes up to and including the final byte."""
        for _ in range(CSI_MAX_LENGTH):
            seq = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if seq is None:
                return None
            if 0x40 <= seq[0] <= 0x7E:
                return seq
        return None

    def read_key(self) -> KeyEvent:
        try:
            if os.name == "nt":
                return self._read_key_windows()
            return self._read_key_posix()
        except KeyboardInterrupt:
            return KeyEvent(Key.ESCAPE)

    def _read_key_posix(self) -> KeyEvent:
        ch = self._read_byte()
        if ch is None:
            return KeyEvent(Key.ESCAPE)
        if ch in _CONTROL_KEYS:
            return KeyEvent(_CONTROL_KEYS[ch])

        if ch == b"\x1b":
            seq = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if seq is None:
                return KeyEvent(Key.ESCAPE)
            if seq == b"O":
                # SS3: function keys and application-mode arrows.
                return _arrow_or_ignored(self._read_byte(ESC_SEQUENCE_TIMEOUT_MS))
            if seq != b"[":
                self._pending.append(seq)
                return KeyEvent(Key.ESCAPE)
            return _arrow_or_ignored(self._read_csi_final())

        if ch[0] < 0x20:
            return KeyEvent(Key.IGNORED)

        raw = ch
        for _ in range(_utf8_length(ch[0]) - 1):
            more = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if more is None:
                break
            raw += more
        return KeyEvent.of(raw.decode("utf-8", errors="replace"))

    def _read_key_windows(self) -> KeyEvent:
        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            code = msvcrt.getwch()
            if code == "K":
                return KeyEvent(Key.LEFT)
            if code == "M":
                return KeyEvent(Key.RIGHT)
            return KeyEvent(Key.IGNORED)
        if ch == "\x1b":
            return KeyEvent(Key.ESCAPE)
        encoded = ch.encode("utf-8", errors="replace")
        if encoded in _CONTROL_KEYS:
            return KeyEvent(_CONTROL_KEYS[encoded])
        if not ch.isprintable():
            return KeyEvent(Key.IGNORED)
        return KeyEvent.of(ch)

    def read_line(self, prompt: str) -> str:
        try:
            return self.console.input(f"\n  [cyan]{prompt}[/cyan]")
        except (EOFError, KeyboardInterrupt):
            return ""

    def render(self, frame: Frame) -> None:
        self.console.clear()
        self.console.print(self.compose(frame))

    def compose(self, frame: Frame) -> Group:
        """Build the renderable for one frame."""
        session = self.config.session
        viewport = self.config.search.max_results

        query_line = Text("  > ", style="cyan")
        query_line.append(frame.query[: frame.cursor], style="bold")
        cursor_char = frame.query[frame.cursor: frame.cursor + 1] or " "
        query_line.append(cursor_char, style="reverse")
        query_line.append(frame.query[frame.cursor + 1:], style="bold")

        lines = [
            Text("\n  SPOTLIGHT SEARCH", style="bold white"),
            Text("  Type to search. Enter to open. ESC to quit.\n", style="dim"),
            query_line,
            Text(""),
        ]
        for index in range(viewport):
            if index < len(frame.rows):
                row = frame.rows[index]
                line = Text("  ")
                line.append(f"[{row.number:2d}]", style="cyan")
                line.append("  ")
                line.append(f"{row.filename:<{session.filename_width}}", style="bold")
                line.append("  ")
                line.append(row.path, style="dim")
            elif index == 0 and frame.query and not frame.rows:
                line = Text("       No matches found.", style="yellow")
            else:
                line = Text("")
            lines.append(line)

        lines.append(Rule(style="dim"))
        lines.append(Text(f"  {frame.status}", style="dim"))
        return Group(*lines)


def open_with_default_app(path: str, console: Optional[Console] = None) -> None:
    """Launch ``path`` with the desktop's default handler, without waiting."""
    try:
        if os.name == "nt":
            os.startfile(path)
        elif sys.platform == "darwin":
            subprocess.Popen(["open", path], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        else:
            subprocess.Popen(["xdg-open", path], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        (console or Console(stderr=True)).print(f"[yellow]Warning: Could not open {escape(path)}: {e}[/yellow]")
