"""
recdec Recursive Descent Parser
===============================

This module implements the predictive recursive descent validator for the
toy grammar. Each production is one method; all of them share the lexer's
single current-token cell. No tree is built: the parser only checks
structure and counts assignments and variable references.

Grammar
-------
program    ::= 'program' block '.'
block      ::= 'begin' stmtlist 'end'
stmtlist   ::= stmt morestmts
morestmts  ::= ';' stmtlist | empty
stmt       ::= assign | ifstmt | whilestmt | block
assign     ::= variable '=' expr
ifstmt     ::= 'if' testexpr 'then' stmt 'else' stmt
whilestmt  ::= 'while' testexpr 'do' stmt
testexpr   ::= variable '<=' expr
expr       ::= ('+' | '*') operand operand | variable | digit
operand    ::= variable | digit
variable   ::= 'a' | 'b' | 'c'
digit      ::= '0' | '1' | '2'

The fused lexeme 'end.' closes both the outermost block and the program.
A block that sees 'end.' leaves it unconsumed for program to check.

Operands of '+' and '*' are single variables or digits; nested prefix
expressions such as '+ + a b c' are rejected.

Lookahead Protocol
------------------
Every rule is entered with the next unconsumed lexeme in ``lexer.token``
and, on success, returns with the first lexeme past its match there.

Rules that only decide whether an alternative applies (assign, testexpr,
variable, digit, and the leading keyword checks of ifstmt, whilestmt and a
nested block) return False. Once an alternative is committed, any mismatch
raises the GrammarError subclass of the rule that detected it.

assign and testexpr match a variable before they know the alternative
applies. With backtracking enabled they restore the lexer position and the
counters when the follow-up token is wrong; with it disabled the variable
stays consumed and counted.

Example Usage
-------------
>>> from recdec.lexer import Lexer
>>> from recdec.parser import Parser
>>> parser = Parser(Lexer("program begin a = + b 1 ; c = a end."))
>>> parser.parse()
Counters(assignments=2, variable_refs=4)
"""

import logging
from dataclasses import dataclass
from typing import Type

from recdec.lexer import Lexer, Checkpoint
from recdec.errors import (
    GrammarError,
    ProgramError,
    BlockError,
    StmtListError,
    MoreStmtsError,
    StmtError,
    IfStmtError,
    WhileStmtError,
    ExprError,
    PRODUCTIONS,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Vocabulary
# =============================================================================

VARIABLES = frozenset({"a", "b", "c"})
DIGITS = frozenset({"0", "1", "2"})
OPERATORS = frozenset({"+", "*"})

# Lexemes that close a block
END_TOKENS = frozenset({"end", "end."})

# Lexemes that terminate the program after its block
PROGRAM_TERMINATORS = frozenset({".", "end."})

# Lexemes that cannot start a statement inside a statement list
LIST_TERMINATORS = END_TOKENS | {";"}


# =============================================================================
# Parser State
# =============================================================================

@dataclass
class Counters:
    """
    Statistics gathered during a parse.

    Attributes:
        assignments: Completed '<variable> = <expr>' statements
        variable_refs: Variable lexemes consumed anywhere in the program
    """
    assignments: int = 0
    variable_refs: int = 0


@dataclass(frozen=True)
class ParserCheckpoint:
    """Lexer position plus counter values at the start of a speculative match."""
    position: Checkpoint
    assignments: int
    variable_refs: int


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Recursive descent validator.

    A Parser instance validates one program; create a new instance (and a
    new Lexer) for every run.

    Attributes:
        lexer: Token source, primed by parse()
        backtrack: Restore position and counters when a speculative
            variable match turns out not to start the alternative
        counters: Assignment and variable reference counts
    """

    def __init__(self, lexer: Lexer, backtrack: bool = True):
        self.lexer = lexer
        self.backtrack = backtrack
        self.counters = Counters()

    def parse(self) -> Counters:
        """
        Validate a complete program.

        Returns:
            The counters gathered during the parse

        Raises:
            GrammarError: On the first committed grammar violation
            LexerError: If the input ends early or a lexeme is too long
        """
        self._parse_program()
        logger.debug(
            f"Parsed {self.counters.assignments} assignments, "
            f"{self.counters.variable_refs} variable references"
        )
        return self.counters

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def _token(self) -> str:
        return self.lexer.token

    def _advance(self) -> None:
        """Consume the current token."""
        self.lexer.next_token()

    def _error(self, error_class: Type[GrammarError], message: str) -> GrammarError:
        """Build a grammar error located at the current token."""
        return error_class(message, self.lexer.location, self.lexer.line)

    def _mark(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            self.lexer.checkpoint(),
            self.counters.assignments,
            self.counters.variable_refs,
        )

    def _rollback(self, mark: ParserCheckpoint, rule: str) -> None:
        """Undo a failed speculative match when backtracking is enabled."""
        if not self.backtrack:
            logger.debug(f"{rule}: keeping speculative consumption before {self._token!r}")
            return
        logger.debug(f"{rule}: backtracking from {self._token!r} to {mark.position.token!r}")
        self.lexer.restore(mark.position)
        self.counters.assignments = mark.assignments
        self.counters.variable_refs = mark.variable_refs

    # =========================================================================
    # Program Structure
    # =========================================================================

    def _parse_program(self) -> None:
        """
        Parse: 'program' block '.'

        The terminator ('.' or the fused 'end.') is checked but not
        consumed, so no input past the end of the program is read.
        """
        self._advance()
        if self._token != "program":
            raise self._error(ProgramError, "reserved word 'program' missing")
        self._advance()

        self._parse_block(required=True)

        if self._token not in PROGRAM_TERMINATORS:
            raise self._error(ProgramError, "program missing terminating '.'")

    def _parse_block(self, required: bool = False) -> bool:
        """
        Parse: 'begin' stmtlist 'end'

        Args:
            required: If True a missing 'begin' is a violation; otherwise
                the block is just one statement alternative and returns False

        Returns:
            True if a block was parsed, False if the lookahead is not 'begin'
        """
        if self._token != "begin":
            if required:
                raise self._error(BlockError, "block missing reserved word 'begin'")
            return False

        logger.debug(f"Block at line {self.lexer.line_number}")
        self._advance()
        self._parse_stmtlist()

        if self._token not in END_TOKENS:
            raise self._error(BlockError, "block missing reserved word 'end'")
        # 'end.' also terminates the program; leave it for _parse_program
        if self._token == "end":
            self._advance()
        return True

    def _parse_stmtlist(self) -> None:
        """
        Parse: stmt morestmts

        The right-recursive ';' stmtlist tail is iterated, so the stack
        depth depends on nesting only, not on the number of statements.
        """
        while True:
            if self._token in LIST_TERMINATORS:
                raise self._error(StmtListError, f"statement expected before '{self._token}'")
            self._parse_stmt()
            if not self._parse_morestmts():
                return

    def _parse_morestmts(self) -> bool:
        """
        Parse: ';' stmtlist | empty

        Consumes the ';' only; the caller parses the following stmtlist.

        Returns:
            True if a ';' was consumed, False if the list is closed
        """
        if self._token in END_TOKENS:
            return False
        if self._token == ";":
            self._advance()
            return True
        raise self._error(
            MoreStmtsError,
            f"expected ';' or 'end' after statement, found '{self._token}'",
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_stmt(self) -> None:
        """
        Parse: assign | ifstmt | whilestmt | block

        Alternatives are tried in that order; the first one that applies
        is committed.
        """
        if (
            self._parse_assign()
            or self._parse_ifstmt()
            or self._parse_whilestmt()
            or self._parse_block()
        ):
            return
        raise self._error(StmtError, f"invalid statement starting with '{self._token}'")

    def _parse_assign(self) -> bool:
        """Parse: variable '=' expr"""
        mark = self._mark()
        if not self._parse_variable():
            return False
        if self._token != "=":
            self._rollback(mark, "assign")
            return False
        self._advance()
        self._parse_expr()
        self.counters.assignments += 1
        return True

    def _parse_ifstmt(self) -> bool:
        """Parse: 'if' testexpr 'then' stmt 'else' stmt"""
        if self._token != "if":
            return False
        self._advance()

        if not self._parse_testexpr():
            raise self._error(
                IfStmtError,
                f"bad test expression in if statement, expected {PRODUCTIONS['testexpr']}",
            )
        if self._token != "then":
            raise self._error(IfStmtError, f"if statement missing 'then', found '{self._token}'")
        self._advance()
        self._parse_stmt()

        if self._token != "else":
            raise self._error(IfStmtError, f"if statement missing 'else', found '{self._token}'")
        self._advance()
        self._parse_stmt()
        return True

    def _parse_whilestmt(self) -> bool:
        """Parse: 'while' testexpr 'do' stmt"""
        if self._token != "while":
            return False
        self._advance()

        if not self._parse_testexpr():
            raise self._error(
                WhileStmtError,
                f"bad test expression in while statement, expected {PRODUCTIONS['testexpr']}",
            )
        if self._token != "do":
            raise self._error(WhileStmtError, f"while statement missing 'do', found '{self._token}'")
        self._advance()
        self._parse_stmt()
        return True

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_testexpr(self) -> bool:
        """
        Parse: variable '<=' expr

        Never raises for a missing variable or '<='; the calling statement
        reports the violation under its own code.
        """
        mark = self._mark()
        if not self._parse_variable():
            return False
        if self._token != "<=":
            self._rollback(mark, "testexpr")
            return False
        self._advance()
        self._parse_expr()
        return True

    def _parse_expr(self) -> None:
        """Parse: ('+' | '*') operand operand | variable | digit"""
        if self._token in OPERATORS:
            operator = self._token
            self._advance()
            for _ in range(2):
                if not (self._parse_variable() or self._parse_digit()):
                    raise self._error(
                        ExprError,
                        f"operator '{operator}' needs a variable or digit operand, "
                        f"found '{self._token}'",
                    )
        elif not (self._parse_variable() or self._parse_digit()):
            raise self._error(ExprError, f"invalid expression '{self._token}'")

    def _parse_variable(self) -> bool:
        if self._token not in VARIABLES:
            return False
        self._advance()
        self.counters.variable_refs += 1
        return True

    def _parse_digit(self) -> bool:
        if self._token not in DIGITS:
            return False
        self._advance()
        return True
