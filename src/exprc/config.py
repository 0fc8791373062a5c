"""
exprc Configuration
===================

Settings that select how an expression is compiled. Configuration can
come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of the environment)

Environment variables (all optional):
    EXPRC_TARGET: Default code generation target (eval, lisp, c, wat)
    EXPRC_VERBOSE: Enable debug logging ("1", "true", "yes", "on")
"""

from dataclasses import dataclass
import os

from exprc.codegen import DEFAULT_TARGET, GENERATORS


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ExprConfig:
    """
    Configuration for the exprc tools.

    Attributes:
        target: Code generation target name (default: "eval")
        verbose: Log each pipeline stage at DEBUG level
    """

    target: str = DEFAULT_TARGET
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "ExprConfig":
        """
        Create ExprConfig from environment variables.

        Unknown target names are ignored and the default is kept.
        """
        config = cls()

        if target := os.environ.get("EXPRC_TARGET"):
            if target.lower() in GENERATORS:
                config.target = target.lower()

        if verbose := os.environ.get("EXPRC_VERBOSE"):
            config.verbose = verbose.strip().lower() in TRUE_VALUES

        return config
