"""
recdec - Recursive Descent Syntax Validator
===========================================

This package validates programs written in a small imperative teaching
grammar: blocks, assignments, if/then/else, while/do and two-operand prefix
arithmetic over the variables ``a b c`` and the digits ``0 1 2``.

Validation is fail-fast. A valid program yields the number of assignment
statements and variable references; the first violation raises an error
naming the production that failed, with a distinct exit status per
production (100 program, 101 block, 102 stmtlist, 103 morestmts, 104 stmt,
106 ifstmt, 107 whilestmt, 109 expr).

Main Components
---------------
- **lexer**: pull-based, whitespace-delimited tokenizer over a line source
- **parser**: one method per grammar production, one-token lookahead
- **validator**: options, results and the Validator facade
- **cli**: the ``recdec`` command

Quick Start
-----------
    >>> from recdec import validate
    >>> validate("program begin a = + b 1 ; c = a end.").summary()
    '2 assignments, 4 variable references'

Or from the command line:
    $ recdec prog.txt
    2 assignments, 4 variable references
    Code successfully parsed.
"""

__version__ = "1.0.0"
__author__ = "recdec contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from recdec.validator import Validator, ValidatorOptions, ValidationResult, validate
from recdec.lexer import Lexer, Checkpoint, MAX_TOKEN_LENGTH
from recdec.parser import Parser, Counters
from recdec.errors import (
    ErrorCode,
    SourceLocation,
    RecDecError,
    LexerError,
    InputExhaustedError,
    TokenTooLongError,
    NestingTooDeepError,
    GrammarError,
    ProgramError,
    BlockError,
    StmtListError,
    MoreStmtsError,
    StmtError,
    IfStmtError,
    WhileStmtError,
    ExprError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Validator
    "Validator",
    "ValidatorOptions",
    "ValidationResult",
    "validate",
    # Lexer and parser
    "Lexer",
    "Checkpoint",
    "MAX_TOKEN_LENGTH",
    "Parser",
    "Counters",
    # Exception hierarchy
    "ErrorCode",
    "SourceLocation",
    "RecDecError",
    "LexerError",
    "InputExhaustedError",
    "TokenTooLongError",
    "NestingTooDeepError",
    "GrammarError",
    "ProgramError",
    "BlockError",
    "StmtListError",
    "MoreStmtsError",
    "StmtError",
    "IfStmtError",
    "WhileStmtError",
    "ExprError",
]
