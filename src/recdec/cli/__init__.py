"""
recdec Command-Line Interface
=============================

This package provides the ``recdec`` command, a Click-based front end
that validates a program file (or standard input), prints the counts on
success and maps every failure to a process exit status.
"""

__all__ = ["recdec"]
