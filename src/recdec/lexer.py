"""
recdec Lexer (Tokenizer)
========================

This module implements the line-oriented tokenizer that feeds the parser.
It pulls raw lines on demand from a line source (any iterable of strings,
such as an open file or ``sys.stdin``) and hands out one whitespace-delimited
lexeme at a time through a single "current token" cell.

Token Rules
-----------
- Lexemes are delimited by spaces and line boundaries.
- Spaces and tabs are skipped before a lexeme, but a tab inside a run of
  non-space characters is part of the lexeme.
- Lines that are empty or contain only whitespace are skipped.
- The trailing line terminator (``\\n`` or ``\\r\\n``) is stripped, and so is
  any whitespace before it, so a trailing tab never joins the last lexeme.

There is no token classification: the parser compares lexemes directly
against the fixed vocabulary (``program``, ``begin``, ``end.``, ``<=``, ...).

Checkpoints
-----------
Speculative grammar alternatives need to undo consumption. A speculative
match spans a single lookahead token, so the lexer retains only the current
line and the one before it (``RETAINED_LINES``). :meth:`Lexer.restore` can
move back across that one line boundary; the line replayed after a restore
is not pulled from the source again. Memory use does not grow with the
length of the input.

Example Usage
-------------
>>> from recdec.lexer import Lexer
>>> lexer = Lexer(["program begin", "  a = 0 end."])
>>> list(lexer.tokenize())
['program', 'begin', 'a', '=', '0', 'end.']
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from recdec.errors import (
    SourceLocation,
    InputExhaustedError,
    TokenTooLongError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Capacity of one line buffer, terminator included
LINE_BUFFER_SIZE = 2048

# Longest lexeme accepted by default
MAX_TOKEN_LENGTH = LINE_BUFFER_SIZE - 1

# Characters skipped before a lexeme
WHITESPACE = " \t"

# Character that ends a lexeme (besides end of line)
DELIMITER = " "

# Non-blank lines kept for restoring checkpoints: the current one and its predecessor
RETAINED_LINES = 2


# =============================================================================
# Checkpoint
# =============================================================================

@dataclass(frozen=True)
class Checkpoint:
    """
    Snapshot of the lexer position.

    Attributes:
        line_index: Ordinal of the non-blank line (-1 before the first line)
        cursor: Offset into the current line
        token: Current token at the time of the snapshot
        token_column: 1-indexed column of the current token
    """
    line_index: int
    cursor: int
    token: str
    token_column: int


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Pull-based tokenizer over a line source.

    The lexer owns the line buffer, the cursor into it and the current
    token. The parser reads ``token`` and calls :meth:`next_token` once per
    lexeme it consumes.

    Usage:
        lexer = Lexer(open("prog.txt"), "prog.txt")
        lexer.next_token()          # prime the lookahead
        while lexer.token != "end.":
            lexer.next_token()

    Attributes:
        filename: Name of the input (for error reporting)
        max_token_length: Longest lexeme accepted before TokenTooLongError
        on_line: Optional callback receiving (line_number, text) for every
            freshly pulled non-blank line
        line: The current line, terminator stripped
        line_number: Physical line number of ``line`` (1-indexed)
        cursor: Offset into ``line`` just past the last scanned lexeme
        token: The current token
        token_column: 1-indexed column where ``token`` starts
    """

    def __init__(
        self,
        lines: Iterable[str] | str,
        filename: str = "<input>",
        max_token_length: int = MAX_TOKEN_LENGTH,
        on_line: Optional[Callable[[int, str], None]] = None,
    ):
        """
        Initialize the lexer.

        Args:
            lines: Line source; a plain string is split into lines
            filename: Name of the input for error messages
            max_token_length: Longest lexeme accepted
            on_line: Callback invoked for each newly read non-blank line
        """
        if isinstance(lines, str):
            lines = lines.splitlines(keepends=True)
        if max_token_length < 1:
            raise ValueError(f"max_token_length must be positive, got {max_token_length}")

        self._source = iter(lines)
        self.filename = filename
        self.max_token_length = max_token_length
        self.on_line = on_line

        # Most recent non-blank lines, as (line_number, text); _lines[0] has
        # absolute index _base
        self._lines: list[tuple[int, str]] = []
        self._base = 0
        self._line_index = -1
        self._physical_lines = 0

        self.line = ""
        self.line_number = 0
        self.cursor = 0
        self.token = ""
        self.token_column = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def location(self) -> SourceLocation:
        """Location of the current token."""
        return SourceLocation(
            self.filename,
            max(self.line_number, 1),
            max(self.token_column, 1),
        )

    @property
    def lines_read(self) -> int:
        """Number of physical lines pulled from the source, blank ones included."""
        return self._physical_lines

    # =========================================================================
    # Scanning
    # =========================================================================

    def skip_whitespace(self) -> None:
        """Advance the cursor over spaces and tabs."""
        while self.cursor < len(self.line) and self.line[self.cursor] in WHITESPACE:
            self.cursor += 1

    def refill_line(self) -> None:
        """
        Replace the current line with the next non-blank line.

        Raises:
            InputExhaustedError: If the line source has no further content
        """
        if self._line_index + 1 == self._base + len(self._lines):
            self._pull_line()
        self._line_index += 1
        self.line_number, self.line = self._lines[self._line_index - self._base]
        self.cursor = 0

    def next_token(self) -> str:
        """
        Scan the next lexeme into ``token`` and return it.

        Raises:
            InputExhaustedError: If the input ends before another lexeme
            TokenTooLongError: If the lexeme exceeds ``max_token_length``
        """
        self.skip_whitespace()
        while self.cursor >= len(self.line):
            self.refill_line()
            self.skip_whitespace()

        start = self.cursor
        end = self.line.find(DELIMITER, start)
        if end == -1:
            end = len(self.line)

        self.token_column = start + 1
        if end - start > self.max_token_length:
            raise TokenTooLongError(
                end - start,
                self.max_token_length,
                self.location,
                self.line,
            )

        self.token = self.line[start:end]
        self.cursor = end
        return self.token

    def tokenize(self) -> Iterator[str]:
        """
        Yield every remaining lexeme until the input is exhausted.

        Used for token dumps; the parser itself drives :meth:`next_token`.
        """
        while True:
            try:
                yield self.next_token()
            except InputExhaustedError:
                return

    # =========================================================================
    # Checkpoints
    # =========================================================================

    def checkpoint(self) -> Checkpoint:
        """Capture the current position for a later :meth:`restore`."""
        return Checkpoint(self._line_index, self.cursor, self.token, self.token_column)

    def restore(self, checkpoint: Checkpoint) -> None:
        """
        Move back to a position captured by :meth:`checkpoint`.

        Raises:
            ValueError: If the checkpoint's line is no longer retained
        """
        oldest = self._base if self._base else -1
        if checkpoint.line_index < oldest:
            raise ValueError(
                f"cannot restore to line index {checkpoint.line_index}; "
                f"only the last {RETAINED_LINES} lines are retained"
            )

        self._line_index = checkpoint.line_index
        if self._line_index >= 0:
            self.line_number, self.line = self._lines[self._line_index - self._base]
        else:
            self.line_number, self.line = 0, ""
        self.cursor = checkpoint.cursor
        self.token = checkpoint.token
        self.token_column = checkpoint.token_column

    # =========================================================================
    # Line Source Access
    # =========================================================================

    def _pull_line(self) -> None:
        """
        Read lines from the source until one has content, and retain it.

        The oldest retained line is dropped once more than RETAINED_LINES
        are held.
        """
        while True:
            try:
                raw = next(self._source)
            except StopIteration:
                raise InputExhaustedError(
                    SourceLocation(
                        self.filename,
                        max(self.line_number, 1),
                        len(self.line) + 1,
                    ),
                    self.line if self.line_number else None,
                ) from None

            self._physical_lines += 1
            text = raw.rstrip("\r\n").rstrip(WHITESPACE)
            if text:
                break
            logger.debug(f"Skipping blank line {self._physical_lines}")

        self._lines.append((self._physical_lines, text))
        if len(self._lines) > RETAINED_LINES:
            del self._lines[0]
            self._base += 1
        logger.debug(f"Read line {self._physical_lines}: {text!r}")
        if self.on_line is not None:
            self.on_line(self._physical_lines, text)
