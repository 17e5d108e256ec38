"""Error kinds, diagnostics and Rust-style colored rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from lox.source import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class ErrorKind(Enum):
    LEX = "lex"
    SYNTAX = "syntax"
    RUNTIME = "runtime"


_CODES = {
    ErrorKind.LEX: "E100",
    ErrorKind.SYNTAX: "E200",
    ErrorKind.RUNTIME: "E300",
}
_KINDS = {code: kind for kind, code in _CODES.items()}

# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self.code]

    @property
    def line(self) -> int:
        if self.labels:
            return self.labels[0].span.start_line
        return 0

    def plain(self) -> str:
        """Single-line form: ``[line 3] Error: message``."""
        return f"[line {self.line}] Error: {self.message}"


class DiagnosticRenderer:
    """Renders diagnostics in a Rust-like layout, optionally coloured.

    *sources* maps file names to their text; files not listed are read
    from disk on first use.
    """

    def __init__(self, *, color: bool = True, sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._sources: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def _paint(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"{style}{text}{_RESET}"

    def _gutter(self, line_num: int | None = None) -> str:
        number = "" if line_num is None else str(line_num)
        return "  " + self._paint(f"{number:>4} |" if number else "   |", _BLUE)

    def _lines_of(self, filename: str) -> list[str]:
        if filename not in self._sources:
            path = Path(filename)
            try:
                self._sources[filename] = path.read_text().splitlines() if path.is_file() else []
            except OSError:
                self._sources[filename] = []
        return self._sources[filename]

    def _snippet(self, label: DiagnosticLabel, style: str) -> list[str]:
        span = label.span
        out = [f"  {self._paint('-->', _BLUE)} {span}", self._gutter()]
        lines = self._lines_of(span.file)
        if 1 <= span.start_line <= len(lines):
            out.append(f"{self._gutter(span.start_line)} {lines[span.start_line - 1]}")
            if span.start_line == span.end_line:
                width = max(1, span.end_col - span.start_col + 1)
                marker = " " * (span.start_col - 1) + self._paint("^" * width, style)
                out.append(f"{self._gutter()} {marker}")
        if label.message:
            out.append(f"{self._gutter()}   {self._paint(label.message, style)}")
        return out

    def render(self, diag: Diagnostic) -> str:
        style = _COLORS[diag.severity]
        head = self._paint(f"{diag.severity.value}[{diag.code}]", style)
        out = [head + self._paint(f": {diag.message}", _BOLD)]
        for label in diag.labels:
            out.extend(self._snippet(label, style))
        out.extend(f"  {self._paint('=', _BLUE)} note: {note}" for note in diag.notes)
        return "\n".join(out)


def make_diagnostic(kind: ErrorKind, message: str, span: Span, *notes: str) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR,
        code=_CODES[kind],
        message=message,
        labels=[DiagnosticLabel(span=span, message="")],
        notes=list(notes),
    )


class LoxError(Exception):
    """Base for errors that unwind a parse or a run."""

    kind: ErrorKind

    def __init__(self, message: str, span: Span) -> None:
        self.message = message
        self.span = span
        self.notes: list[str] = []
        super().__init__(f"[line {span.start_line}] {message}")

    @property
    def line(self) -> int:
        return self.span.start_line

    def to_diagnostic(self) -> Diagnostic:
        return make_diagnostic(self.kind, self.message, self.span, *self.notes)


class LoxSyntaxError(LoxError):
    """A grammar violation; aborts the remainder of the parse."""

    kind = ErrorKind.SYNTAX


class LoxRuntimeError(LoxError):
    """A failure while evaluating; aborts the remainder of the run."""

    kind = ErrorKind.RUNTIME


class ErrorCollector:
    """Accumulates diagnostics across lexing, parsing and running.

    Passed explicitly to each stage and inspected by the caller.
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report(self, kind: ErrorKind, message: str, span: Span) -> None:
        self.diagnostics.append(make_diagnostic(kind, message, span))

    def add(self, error: LoxError) -> None:
        self.diagnostics.append(error.to_diagnostic())

    def has(self, *kinds: ErrorKind) -> bool:
        return any(d.kind in kinds for d in self.diagnostics)

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def entries(self) -> list[tuple[str, int]]:
        """The recorded (message, line) pairs."""
        return [(d.message, d.line) for d in self.diagnostics]

    def clear(self) -> None:
        self.diagnostics.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)
