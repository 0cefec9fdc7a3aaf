"""
FILE: questboard/repl/__init__.py
PURPOSE: REPL package for interactive board use
EXPORTS:
  - main() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - questboard.core.service (board commands)
NOTES:
  - Entry point for interactive mode
  - Provides autocomplete and command history
"""

from .main import main

__all__ = ["main"]
