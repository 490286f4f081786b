"""
recdec - Syntax Validator Command-Line Interface
================================================

This module implements the ``recdec`` command. It validates one program
read from a file or standard input and reports either the statistics of a
valid program or the first grammar violation.

Usage Examples
--------------
Validate a file:
    $ recdec prog.txt
    2 assignments, 4 variable references
    Code successfully parsed.

Read from standard input, echoing every line as it is read:
    $ recdec --echo < prog.txt

Dump the token stream:
    $ recdec --tokens prog.txt

Exit Status
-----------
0 on success; 100-109 for the violated production (see recdec.errors);
1 for input errors (early end of input, overlong token, nesting too deep);
2 for bad arguments or unreadable files; 3 for internal errors.
"""

import logging
from typing import Optional, TextIO

import click

from recdec import __version__
from recdec.lexer import Lexer
from recdec.validator import Validator, ValidatorOptions
from recdec.cli.errors import handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def echo_line(line_number: int, text: str) -> None:
    """Print an input line as it is read."""
    click.echo(text)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
)
@click.option(
    "--echo",
    is_flag=True,
    help="Print each input line as it is read",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--backtrack/--no-backtrack",
    default=None,
    help="Restore the token stream when a statement that starts with a "
         "variable turns out not to be an assignment. --no-backtrack keeps "
         "the variable consumed and counted. Default: backtrack.",
)
@click.option(
    "--max-token-length",
    type=click.IntRange(min=1),
    default=None,
    help="Longest accepted token (default: 2047)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="recdec")
def main(
    input_file: TextIO,
    echo: bool,
    tokens: bool,
    backtrack: Optional[bool],
    max_token_length: Optional[int],
    verbose: bool,
) -> None:
    """
    Validate the syntax of a toy-language program.

    INPUT_FILE is the program to check; standard input is read when it is
    omitted or '-'.

    \b
    Grammar:
        <program>   ::= program <block> .
        <block>     ::= begin <stmtlist> end
        <stmtlist>  ::= <stmt> <morestmts>
        <morestmts> ::= ; <stmtlist> | empty
        <stmt>      ::= <assign> | <ifstmt> | <whilestmt> | <block>
        <assign>    ::= <variable> = <expr>
        <ifstmt>    ::= if <testexpr> then <stmt> else <stmt>
        <whilestmt> ::= while <testexpr> do <stmt>
        <testexpr>  ::= <variable> <= <expr>
        <expr>      ::= + <operand> <operand> | * <operand> <operand>
                      | <variable> | <digit>
        <variable>  ::= a | b | c
        <digit>     ::= 0 | 1 | 2

    Tokens are separated by spaces or line breaks. The last block may be
    closed with 'end.' instead of 'end .'.
    """
    setup_logging(verbose)

    # Environment first, then command-line overrides
    options = ValidatorOptions.from_env()
    if backtrack is not None:
        options.backtrack = backtrack
    if max_token_length is not None:
        options.max_token_length = max_token_length
    if echo:
        options.on_line = echo_line

    filename = input_file.name

    try:
        if verbose:
            click.echo(f"Validating {filename}...")
            click.echo(f"Backtracking: {'on' if options.backtrack else 'off'}")

        # Token dump mode
        if tokens:
            lexer = Lexer(
                input_file,
                filename,
                max_token_length=options.max_token_length,
                on_line=options.on_line,
            )
            for token in lexer.tokenize():
                click.echo(f"{lexer.line_number}:{lexer.token_column}\t{token}")
            return

        result = Validator(options).validate_stream(input_file, filename)

    except Exception as e:
        handle_cli_exception(e, verbose)

    for warning in result.warnings:
        click.echo(warning, err=True)

    if verbose:
        click.echo(f"Read {result.lines_read} lines")

    click.echo(result.summary())
    click.echo("Code successfully parsed.")


if __name__ == "__main__":
    main()
