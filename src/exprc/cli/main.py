"""
exprc - Expression Compiler Command-Line Interface
==================================================

Reads one expression, compiles it and prints the result of the selected
code generator.

Usage Examples
--------------
Evaluate:
    $ exprc "2+3*4"
    14

Prefix form:
    $ exprc -t lisp "2^3^2"
    (expt 2 (expt 3 2))

C program, compiled with a C toolchain:
    $ exprc -t c "2*(3+4)" > prog.c && cc prog.c -lm && ./a.out

WebAssembly text, executed on the built-in stack machine:
    $ exprc -t wat --run "2^10"
    1024

Interactive (prompts for one line):
    $ exprc
    > 1 + 2
    3

The default target can be set with the EXPRC_TARGET environment variable.
"""

import logging
from typing import Optional

import click

from exprc import __version__
from exprc.ast import ASTPrinter, nesting_guard
from exprc.cli.errors import handle_cli_exception
from exprc.codegen import GENERATORS
from exprc.compiler import Compiler, CompilerOptions
from exprc.config import ExprConfig
from exprc.runtime import StackMachine


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


def read_expression() -> str:
    """Prompt for and read a single line from stdin."""
    try:
        return input("> ")
    except EOFError:
        return ""


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("expression", required=False)
@click.option(
    "-t", "--target",
    type=click.Choice(sorted(GENERATORS), case_sensitive=False),
    default=None,
    help="Code generator to run (default: eval, or $EXPRC_TARGET)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree instead of generated output",
)
@click.option(
    "--run",
    is_flag=True,
    help="Execute the generated WebAssembly text on the stack machine (needs -t wat)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="exprc")
def main(
    expression: Optional[str],
    target: Optional[str],
    ast: bool,
    run: bool,
    verbose: bool,
) -> None:
    """
    Compile an arithmetic expression.

    EXPRESSION uses integers, +, *, ^ and parentheses. When omitted, one
    line is read from standard input.

    \b
    Targets:
        eval    value of the expression
        lisp    prefix expression
        c       C program printing the value
        wat     WebAssembly text module exporting "start"
    """
    config = ExprConfig.from_env()
    if target is not None:
        config.target = target.lower()
    config.verbose = config.verbose or verbose
    setup_logging(config.verbose)

    try:
        if run and config.target != "wat":
            raise click.UsageError("--run requires --target wat")

        if expression is None:
            expression = read_expression()

        logger.debug("Compiling %r for target %s", expression, config.target)
        compiler = Compiler(CompilerOptions(target=config.target))
        result = compiler.compile_source(expression)

        if ast:
            with nesting_guard(len(result.tokens)):
                click.echo(ASTPrinter().print(result.ast))
        elif run:
            click.echo(StackMachine().run(result.output))
        else:
            click.echo(str(result.output).rstrip("\n"))

    except Exception as e:
        handle_cli_exception(e, verbose=config.verbose)


if __name__ == "__main__":
    main()
