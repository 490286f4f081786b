"""
recdec Validator Main Module
============================

This module provides the main validation interface. It wires the line
source, lexer and parser together:

    Lines → Lexer → Parser → ValidationResult

Usage
-----
Command line:
    $ recdec prog.txt
    $ cat prog.txt | recdec

Programmatic:
    >>> from recdec import validate
    >>> result = validate("program begin a = 0 end.")
    >>> result.summary()
    '1 assignments, 1 variable references'

Error Handling
--------------
Validation stops at the first violation. The exception raised by the
parser (a GrammarError subclass carrying the production's exit status) or
the lexer propagates unchanged to the caller; only RecursionError is
translated, into NestingTooDeepError.

Configuration
-------------
ValidatorOptions can be built from environment variables:

    RECDEC_MAX_TOKEN_LENGTH   longest accepted lexeme (default 2047)
    RECDEC_BACKTRACK          set to 0/false/no/off to keep speculative
                              consumption instead of restoring it
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional, TextIO

from recdec.lexer import Lexer, MAX_TOKEN_LENGTH, WHITESPACE
from recdec.parser import Parser
from recdec.errors import NestingTooDeepError

logger = logging.getLogger(__name__)


_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


# =============================================================================
# Options and Results
# =============================================================================

@dataclass
class ValidatorOptions:
    """
    Validator configuration options.

    Attributes:
        max_token_length: Longest lexeme accepted before TokenTooLongError
        backtrack: Restore lexer position and counters when a speculative
                   variable match does not start an assignment or test
                   expression. False reproduces the classic behavior where
                   the variable stays consumed and counted.
        on_line: Callback receiving (line_number, text) for each non-blank
                 input line as it is read (used for echoing)
    """
    max_token_length: int = MAX_TOKEN_LENGTH
    backtrack: bool = True
    on_line: Optional[Callable[[int, str], None]] = None

    @classmethod
    def from_env(cls) -> "ValidatorOptions":
        """
        Create ValidatorOptions from environment variables.

        Invalid values are logged and ignored.
        """
        options = cls()

        if max_length := os.environ.get("RECDEC_MAX_TOKEN_LENGTH"):
            try:
                value = int(max_length)
                if value < 1:
                    raise ValueError(value)
                options.max_token_length = value
            except ValueError:
                logger.warning(f"Ignoring invalid RECDEC_MAX_TOKEN_LENGTH={max_length!r}")

        if backtrack := os.environ.get("RECDEC_BACKTRACK"):
            options.backtrack = backtrack.strip().lower() not in _FALSE_STRINGS

        return options


@dataclass
class ValidationResult:
    """
    Outcome of a successful validation.

    Attributes:
        filename: Name of the validated input
        assignments: Number of assignment statements
        variable_refs: Number of variable references
        lines_read: Physical lines read from the input (blank lines included)
        warnings: Non-fatal remarks, such as text after the terminator
    """
    filename: str = "<input>"
    assignments: int = 0
    variable_refs: int = 0
    lines_read: int = 0
    warnings: list[str] = field(default_factory=list)

    def summary(self) -> str:
        """Report line in the classic '<n> assignments, <m> variable references' form."""
        return f"{self.assignments} assignments, {self.variable_refs} variable references"


# =============================================================================
# Validator
# =============================================================================

class Validator:
    """
    Syntax validator for the toy grammar.

    Each call creates a fresh lexer and parser, so results never depend on
    earlier runs.

    Example:
        validator = Validator()
        result = validator.validate_file("prog.txt")
        print(result.summary())

    Attributes:
        options: Validator configuration options
    """

    def __init__(self, options: Optional[ValidatorOptions] = None):
        self.options = options or ValidatorOptions()

    def validate_lines(self, lines: Iterable[str] | str, filename: str = "<input>") -> ValidationResult:
        """
        Validate a program read from a line source.

        Args:
            lines: Iterable of raw lines, or a whole program as one string
            filename: Input name for error messages

        Returns:
            ValidationResult with the gathered counts

        Raises:
            RecDecError: On the first violation
        """
        lexer = Lexer(
            lines,
            filename,
            max_token_length=self.options.max_token_length,
            on_line=self.options.on_line,
        )
        parser = Parser(lexer, backtrack=self.options.backtrack)

        try:
            counters = parser.parse()
        except RecursionError:
            raise NestingTooDeepError(lexer.location) from None

        result = ValidationResult(
            filename=filename,
            assignments=counters.assignments,
            variable_refs=counters.variable_refs,
            lines_read=lexer.lines_read,
        )
        # Only the terminator's own line is inspected; later lines are never read
        if lexer.line[lexer.cursor:].strip(WHITESPACE):
            result.warnings.append(
                f"{filename}:{lexer.line_number}: warning: text after the program terminator is ignored"
            )
        logger.info(f"{filename}: {result.summary()}")
        return result

    def validate_source(self, source: str, filename: str = "<input>") -> ValidationResult:
        """Validate a program held in a string."""
        return self.validate_lines(source.splitlines(keepends=True), filename)

    def validate_stream(self, stream: TextIO, filename: Optional[str] = None) -> ValidationResult:
        """
        Validate a program read lazily from an open text stream.

        Lines are pulled only as the parser needs them, so nothing past the
        program terminator is read.
        """
        if filename is None:
            filename = getattr(stream, "name", "<stream>")
        return self.validate_lines(stream, filename)

    def validate_file(self, filepath: str | Path) -> ValidationResult:
        """
        Validate a program file.

        Raises:
            FileNotFoundError: If the file does not exist
            RecDecError: On the first violation
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        with path.open(encoding="utf-8") as stream:
            return self.validate_stream(stream, str(path))


# =============================================================================
# Convenience Function
# =============================================================================

def validate(source: str, filename: str = "<input>", backtrack: bool = True) -> ValidationResult:
    """
    Validate a program held in a string.

    Args:
        source: Program text
        filename: Input name for error messages
        backtrack: See ValidatorOptions.backtrack

    Returns:
        ValidationResult with the gathered counts

    Raises:
        RecDecError: On the first violation
    """
    return Validator(ValidatorOptions(backtrack=backtrack)).validate_source(source, filename)
