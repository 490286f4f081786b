# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the recursive descent validator.
#
# Test coverage includes:
#   - Valid programs and the assignment / variable reference counters
#   - Each grammar rule's violation and its exit status
#   - The fused 'end.' terminator and the unread input after it
#   - Speculative matches with and without backtracking
#   - Flat (non-nested) prefix expressions
# =============================================================================

import pytest
from recdec.lexer import Lexer
from recdec.parser import Parser, Counters
from recdec.errors import (
    ErrorCode,
    GrammarError,
    InputExhaustedError,
    ProgramError,
    BlockError,
    StmtListError,
    MoreStmtsError,
    StmtError,
    IfStmtError,
    WhileStmtError,
    ExprError,
)


# =============================================================================
# Helper Function
# =============================================================================

def parse(source, backtrack: bool = True) -> Counters:
    """Parse a program and return its counters."""
    return Parser(Lexer(source, "<test>"), backtrack=backtrack).parse()


# =============================================================================
# Valid Program Tests
# =============================================================================

class TestValidPrograms:
    """Programs that conform to the grammar."""

    def test_single_assignment(self):
        """One assignment of a digit."""
        assert parse("program begin a = 0 end.") == Counters(1, 1)

    def test_prefix_expression_and_statement_list(self):
        """Statements separated by ';' with a prefix operator."""
        assert parse("program begin a = + b 1 ; c = a end.") == Counters(2, 4)

    def test_while_statement(self):
        """Variables in the test expression are counted."""
        assert parse("program begin while a <= 1 do a = 0 end.") == Counters(1, 2)

    def test_if_statement(self):
        """if/then/else with assignments in both branches."""
        source = "program begin if a <= 1 then b = 2 else c = a end."
        assert parse(source) == Counters(2, 4)

    def test_multiply_operator(self):
        """'*' takes two operands like '+'."""
        assert parse("program begin a = * b c end.") == Counters(1, 3)

    def test_digit_operands(self):
        """Both operands may be digits."""
        assert parse("program begin a = + 1 2 end.") == Counters(1, 1)

    def test_nested_block_statement(self):
        """A block is a statement; its plain 'end' is consumed."""
        source = "program begin begin a = 0 end ; b = 1 end."
        assert parse(source) == Counters(2, 2)

    def test_separate_terminator(self):
        """'end .' is accepted as well as 'end.'."""
        assert parse("program begin a = 0 end .") == Counters(1, 1)

    def test_while_with_block_body(self):
        """Loop body is a block containing a statement list."""
        source = (
            "program begin "
            "while a <= + a 1 do begin a = + a 1 ; b = a end "
            "end."
        )
        assert parse(source) == Counters(2, 6)

    def test_nested_control_flow(self):
        """if inside while inside if."""
        source = [
            "program\n",
            "begin\n",
            "  if a <= 2 then\n",
            "    while b <= a do\n",
            "      if c <= 0 then c = 1 else c = 2\n",
            "  else\n",
            "    b = * a 2 ;\n",
            "  c = 0\n",
            "end.\n",
        ]
        # a b a c c c b a c
        assert parse(source) == Counters(4, 9)

    def test_multiline_with_blank_lines(self):
        """Blank lines and indentation are irrelevant."""
        source = ["program\n", "\n", "   begin\n", "\t a = 0\n", "\n", "end.\n"]
        assert parse(source) == Counters(1, 1)

    def test_trailing_tab_before_line_break(self):
        """A tab at the end of a line does not stick to the last lexeme."""
        assert parse(["program begin a = 0\t\n", "end.\n"]) == Counters(1, 1)

    def test_deep_nesting(self):
        """Blocks nest without a fixed ceiling."""
        depth = 50
        source = "program " + "begin " * depth + "a = 0" + " end" * (depth - 1) + " end."
        assert parse(source) == Counters(1, 1)

    def test_long_statement_list(self):
        """Thousands of ';'-separated statements do not grow the stack."""
        count = 5000
        source = "program begin " + " ; ".join(["a = b"] * count) + " end."
        assert parse(source) == Counters(count, 2 * count)

    def test_long_statement_list_inside_nested_blocks(self):
        """Each nested block iterates its own statement list."""
        inner = " ; ".join(["c = 1"] * 2000)
        source = f"program begin begin {inner} end ; while a <= 2 do begin {inner} end end."
        assert parse(source) == Counters(4000, 4001)

    def test_identical_runs(self):
        """Re-running on the same input gives the same counters."""
        source = "program begin a = + b 1 ; c = a end."
        assert parse(source) == parse(source)

    def test_input_after_terminator_not_read(self):
        """Nothing past the program terminator is pulled from the source."""
        def source():
            yield "program begin a = 0 end.\n"
            raise AssertionError("read past the end of the program")

        assert parse(source()) == Counters(1, 1)

    def test_text_after_terminator_ignored(self):
        """Trailing text on later lines is never examined."""
        assert parse(["program begin a = 0 end.\n", "garbage\n"]) == Counters(1, 1)

    def test_fused_terminator_in_nested_block(self):
        """'end.' in a nested block ends the whole program."""
        assert parse("program begin begin a = 0 end. end") == Counters(1, 1)


# =============================================================================
# Violation Tests
# =============================================================================

VIOLATIONS = [
    # program
    ("begin a = 0 end.", ProgramError, ErrorCode.PROGRAM),
    ("program begin a = 0 end ;", ProgramError, ErrorCode.PROGRAM),
    # block
    ("program starts begin a = 0 end.", BlockError, ErrorCode.BLOCK),
    ("program a = 0 end.", BlockError, ErrorCode.BLOCK),
    # stmtlist
    ("program begin end.", StmtListError, ErrorCode.STMTLIST),
    ("program begin a = 0 ; end.", StmtListError, ErrorCode.STMTLIST),
    ("program begin ; a = 0 end.", StmtListError, ErrorCode.STMTLIST),
    # morestmts
    ("program begin a = 0 b = 1 end.", MoreStmtsError, ErrorCode.MORESTMTS),
    ("program begin a = 0 .", MoreStmtsError, ErrorCode.MORESTMTS),
    # stmt
    ("program begin a 0 end.", StmtError, ErrorCode.STMT),
    ("program begin then end.", StmtError, ErrorCode.STMT),
    ("program begin 1 = a end.", StmtError, ErrorCode.STMT),
    ("program begin if a <= 1 then else b = 0 end.", StmtError, ErrorCode.STMT),
    # ifstmt
    ("program begin if a then b = 0 else c = 1 end.", IfStmtError, ErrorCode.IFSTMT),
    ("program begin if 0 <= 1 then b = 0 else c = 1 end.", IfStmtError, ErrorCode.IFSTMT),
    ("program begin if a <= 1 b = 0 else c = 1 end.", IfStmtError, ErrorCode.IFSTMT),
    ("program begin if a <= 1 then b = 0 end.", IfStmtError, ErrorCode.IFSTMT),
    # whilestmt
    ("program begin while a <= 1 a = 0 end.", WhileStmtError, ErrorCode.WHILESTMT),
    ("program begin while b do a = 0 end.", WhileStmtError, ErrorCode.WHILESTMT),
    # expr
    ("program begin a = 3 end.", ExprError, ErrorCode.EXPR),
    ("program begin a = + b end.", ExprError, ErrorCode.EXPR),
    ("program begin a = + + a b c end.", ExprError, ErrorCode.EXPR),
    ("program begin a = - b 1 end.", ExprError, ErrorCode.EXPR),
    ("program begin while a <= 5 do a = 0 end.", ExprError, ErrorCode.EXPR),
]


class TestViolations:
    """Each violation is reported by the innermost rule that detects it."""

    @pytest.mark.parametrize("source,error_class,code", VIOLATIONS)
    def test_violation(self, source, error_class, code):
        """The error class and exit status identify the production."""
        with pytest.raises(error_class) as exc_info:
            parse(source)
        assert exc_info.value.exit_code == code
        assert exc_info.value.production == error_class.production

    def test_all_grammar_errors_share_base(self):
        """Every violation can be caught as GrammarError."""
        with pytest.raises(GrammarError):
            parse("program begin a = 3 end.")

    def test_missing_begin_diagnostic(self):
        """The diagnostic names 'begin', echoes the line and points at the token."""
        with pytest.raises(BlockError) as exc_info:
            parse("program starts begin a = 0 end.")
        error = exc_info.value
        assert "begin" in error.message
        assert error.source_line == "program starts begin a = 0 end."
        assert error.location.column == 9
        assert "<block> ::= begin <stmtlist> end" in str(error)

    def test_diagnostic_names_production(self):
        """The production text is attached as the hint."""
        with pytest.raises(ExprError) as exc_info:
            parse("program begin a = 3 end.")
        assert exc_info.value.hint.startswith("<expr> ::=")

    def test_diagnostic_line_on_multiline_input(self):
        """The offending raw line is the one holding the bad token."""
        source = ["program\n", "begin\n", "  a = 0\n", "  b = 7\n", "end.\n"]
        with pytest.raises(MoreStmtsError) as exc_info:
            parse(source)
        assert exc_info.value.source_line == "  b = 7"
        assert exc_info.value.location.line == 4
        assert exc_info.value.location.column == 3

    def test_missing_end_exhausts_input(self):
        """A program without its closing 'end' runs out of input."""
        with pytest.raises(InputExhaustedError):
            parse("program begin a = 0")

    def test_empty_input(self):
        """No program at all is an input error, not a grammar error."""
        with pytest.raises(InputExhaustedError):
            parse("")


# =============================================================================
# Speculative Match Tests
# =============================================================================

class TestSpeculation:
    """assign and testexpr consume a variable before they are committed."""

    SOURCE = "program begin a 0 end."

    def test_backtracking_restores_position(self):
        """With backtracking the error points at the statement's first token."""
        parser = Parser(Lexer(self.SOURCE, "<test>"), backtrack=True)
        with pytest.raises(StmtError) as exc_info:
            parser.parse()
        assert exc_info.value.location.column == 15
        assert "'a'" in exc_info.value.message
        assert parser.counters.variable_refs == 0

    def test_without_backtracking_variable_stays_consumed(self):
        """Without backtracking the variable is consumed and counted."""
        parser = Parser(Lexer(self.SOURCE, "<test>"), backtrack=False)
        with pytest.raises(StmtError) as exc_info:
            parser.parse()
        assert exc_info.value.location.column == 17
        assert "'0'" in exc_info.value.message
        assert parser.counters.variable_refs == 1

    def test_testexpr_backtracking(self):
        """A failed test expression rewinds to its variable."""
        parser = Parser(Lexer("program begin while b do a = 0 end.", "<test>"))
        with pytest.raises(WhileStmtError) as exc_info:
            parser.parse()
        assert exc_info.value.location.column == 21
        assert parser.counters.variable_refs == 0

    def test_backtracking_across_lines(self):
        """Rewinding works when the follow-up token is on the next line."""
        parser = Parser(Lexer(["program begin a\n", "0 end.\n"], "<test>"))
        with pytest.raises(StmtError) as exc_info:
            parser.parse()
        assert exc_info.value.location.line == 1
        assert exc_info.value.source_line == "program begin a"

    @pytest.mark.parametrize("backtrack", [True, False])
    def test_valid_programs_unaffected(self, backtrack):
        """Backtracking never changes the counts of a valid program."""
        source = "program begin if a <= 1 then b = 2 else while c <= a do c = 0 end."
        assert parse(source, backtrack=backtrack) == Counters(2, 5)
