"""
exprc Command-Line Interface
============================

This package provides the `exprc` command: it reads one expression,
compiles it for the selected target and prints the result.

The tool is a Click application with unified error reporting and
exit codes (see errors.py).
"""

__all__ = ["main"]
