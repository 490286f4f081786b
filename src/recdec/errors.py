"""
recdec Error Hierarchy
======================

This module defines the exception hierarchy for the validator.
All exceptions inherit from RecDecError, allowing callers to catch every
validation failure with a single except clause if desired.

Exception Hierarchy
-------------------
RecDecError (base)
├── LexerError (tokenizer-related)
│   ├── InputExhaustedError - input ended where another token was needed
│   └── TokenTooLongError - lexeme exceeds the token buffer
├── NestingTooDeepError - nesting exceeded the interpreter recursion limit
└── GrammarError (one per fatally violated production)
    ├── ProgramError     (100)
    ├── BlockError       (101)
    ├── StmtListError    (102)
    ├── MoreStmtsError   (103)
    ├── StmtError        (104)
    ├── IfStmtError      (106)
    ├── WhileStmtError   (107)
    └── ExprError        (109)

Codes 105 (assign), 108 (testexpr), 110 (variable) and 111 (digit) are part
of the taxonomy but never raised: those rules report failure by return value
and let the enclosing rule escalate.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
            ^ (pointer to the offending token)
    hint: <production> ::= ...
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# =============================================================================
# Exit Status Taxonomy
# =============================================================================

class ErrorCode(IntEnum):
    """Process exit status for each grammar production."""
    PROGRAM = 100
    BLOCK = 101
    STMTLIST = 102
    MORESTMTS = 103
    STMT = 104
    ASSIGN = 105        # reserved
    IFSTMT = 106
    WHILESTMT = 107
    TESTEXPR = 108      # reserved
    EXPR = 109
    VARIABLE = 110      # reserved
    DIGIT = 111         # reserved


# Production text shown as the hint of each grammar error
PRODUCTIONS: dict[str, str] = {
    "program": "<program> ::= program <block> .",
    "block": "<block> ::= begin <stmtlist> end",
    "stmtlist": "<stmtlist> ::= <stmt> <morestmts>",
    "morestmts": "<morestmts> ::= ; <stmtlist> | empty",
    "stmt": "<stmt> ::= <assign> | <ifstmt> | <whilestmt> | <block>",
    "assign": "<assign> ::= <variable> = <expr>",
    "ifstmt": "<ifstmt> ::= if <testexpr> then <stmt> else <stmt>",
    "whilestmt": "<whilestmt> ::= while <testexpr> do <stmt>",
    "testexpr": "<testexpr> ::= <variable> <= <expr>",
    "expr": "<expr> ::= + <expr> <expr> | * <expr> <expr> | <variable> | <digit>",
    "variable": "<variable> ::= a | b | c",
    "digit": "<digit> ::= 0 | 1 | 2",
}


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the validated input.

    Attributes:
        filename: Name of the input (or "<input>" / "<stdin>")
        line: Line number (1-indexed, blank lines included)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class RecDecError(Exception):
    """
    Base exception for all validation failures.

    Attributes:
        message: The error description
        location: Where in the input the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw input line at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.txt:1:9: error: block missing reserved word 'begin'
                program starts begin a = 0 end.
                        ^
            hint: <block> ::= begin <stmtlist> end
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")
            if self.location is not None and self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexer Exceptions
# =============================================================================

class LexerError(RecDecError):
    """Base exception for tokenizer failures."""
    pass


class InputExhaustedError(LexerError):
    """
    The line source ran out while another token was required.

    Raised from the lexer when a refill is requested and no further
    non-blank line exists, e.g. a program missing its closing 'end'.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unexpected end of input",
            location=location,
            hint="the program must finish with 'end.' or 'end .'",
            source_line=source_line,
        )


class TokenTooLongError(LexerError):
    """A lexeme is longer than the token buffer allows."""

    def __init__(
        self,
        length: int,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.length = length
        self.limit = limit
        super().__init__(
            f"token of {length} characters exceeds the limit of {limit}",
            location=location,
            source_line=source_line,
        )


class NestingTooDeepError(RecDecError):
    """Nesting of blocks and statements exceeded the recursion limit."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "statements are nested too deeply",
            location=location,
            hint="raise the interpreter recursion limit with sys.setrecursionlimit()",
        )


# =============================================================================
# Grammar Exceptions
# =============================================================================

class GrammarError(RecDecError):
    """
    Base exception for a committed grammar violation.

    Subclasses set `production` and `exit_code`; the production text is
    attached as the hint so the diagnostic names the violated rule.
    """

    production: str = ""
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            message,
            location=location,
            hint=PRODUCTIONS.get(self.production),
            source_line=source_line,
        )


class ProgramError(GrammarError):
    """Missing 'program' keyword or terminating '.'."""
    production = "program"
    exit_code = ErrorCode.PROGRAM


class BlockError(GrammarError):
    """Missing 'begin' or 'end' around a statement list."""
    production = "block"
    exit_code = ErrorCode.BLOCK


class StmtListError(GrammarError):
    """A statement was required but the list ended."""
    production = "stmtlist"
    exit_code = ErrorCode.STMTLIST


class MoreStmtsError(GrammarError):
    """A statement is followed by neither ';' nor 'end'."""
    production = "morestmts"
    exit_code = ErrorCode.MORESTMTS


class StmtError(GrammarError):
    """No statement alternative matches the lookahead token."""
    production = "stmt"
    exit_code = ErrorCode.STMT


class IfStmtError(GrammarError):
    """Malformed if statement after the 'if' keyword."""
    production = "ifstmt"
    exit_code = ErrorCode.IFSTMT


class WhileStmtError(GrammarError):
    """Malformed while statement after the 'while' keyword."""
    production = "whilestmt"
    exit_code = ErrorCode.WHILESTMT


class ExprError(GrammarError):
    """Invalid arithmetic expression or operand."""
    production = "expr"
    exit_code = ErrorCode.EXPR
