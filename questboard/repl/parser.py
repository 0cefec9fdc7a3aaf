"""
FILE: questboard/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
NOTES:
  - Handles quoted strings: add "task with spaces"
  - Long flags (--project Work) and short value flags (-p Work, -x L)
  - Negative-looking values after a flag are taken as values
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union

# Short flag -> long flag name
SHORT_FLAGS = {
    "p": "project",
    "x": "difficulty",
    "P": "priority",
    "s": "status",
    "d": "desc",
    "t": "title",
    "q": "search",
    "y": "yes",
}

# Flags that never take a value
BOOLEAN_FLAGS = {"yes", "json", "raw", "enable", "disable"}


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "mv", "buy")
        args: Positional arguments
        flags: Flag arguments as dict (e.g., {"project": "Work", "yes": True})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""

    def flag_str(self, name: str) -> Union[str, None]:
        """String value of a flag, None when absent or given without a value."""
        value = self.flags.get(name)
        return value if isinstance(value, str) else None


def _flag_name(token: str) -> Union[str, None]:
    if token.startswith("--") and len(token) > 2:
        return token[2:]
    if token.startswith("-") and len(token) == 2 and token[1] in SHORT_FLAGS:
        return SHORT_FLAGS[token[1]]
    return None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('add "Ship v2" -x L --status todo')
        ParseResult(command="add", args=["Ship v2"], flags={"difficulty": "L", "status": "todo"})

        >>> parse_command("mv 3f2a done")
        ParseResult(command="mv", args=["3f2a", "done"], flags={})

        >>> parse_command("reset --yes")
        ParseResult(command="reset", args=[], flags={"yes": True})
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        # Unclosed quote: fall back to whitespace split
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, Union[str, bool]] = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]
        name = _flag_name(token)
        if name is None:
            args.append(token)
            i += 1
            continue

        has_value = (
            name not in BOOLEAN_FLAGS
            and i + 1 < len(tokens)
            and _flag_name(tokens[i + 1]) is None
        )
        if has_value:
            flags[name] = tokens[i + 1]
            i += 2
        else:
            flags[name] = True
            i += 1

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
