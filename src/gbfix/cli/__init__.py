"""
GBFix Command-Line Interface
============================

This package provides the ``gbfix`` command-line tool, which prints a
ROM's header and applies header updates requested through options.

The tool is implemented as a Click-based CLI application with help text
and error reporting.
"""

__all__ = ["gbfix"]
