"""
Object Emitter Command-Line Interface
=====================================

This package provides the command-line tool for the object emitter:

- **objemit**: converts a raw code image into a binary, loader binary or
  Intel HEX object file

The tool is a Click-based CLI application with help and error reporting
shared through objemit.cli.errors.
"""

__all__ = ["objemit"]
