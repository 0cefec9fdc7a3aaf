"""
FILE: questboard/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - QuestboardCompleter (Completer for command/arg completion)
  - create_completer(task_ids, projects) -> QuestboardCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - questboard.core.catalog (columns, tiers, shop items)
NOTES:
  - Suggests command names when at start of line
  - Suggests task IDs for commands expecting an ID first
  - Suggests column keys after "mv <id>", item IDs after "buy"
  - Suggests project names after "use" and --project, tiers after --difficulty
  - Task IDs/projects come from callables so suggestions follow the live board
  - Case-insensitive matching
"""

from typing import Callable, Iterable, List, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.catalog import COLUMNS, DIFFICULTIES, SHOP
from ..core.constants import VALID_SORTS


class QuestboardCompleter(Completer):
    """
    Context-aware autocomplete for the board REPL.
    """

    COMMANDS = [
        "add", "ls", "board", "show", "edit", "mv", "done", "rm", "timer",
        "shop", "buy", "inventory", "stats", "video", "use", "sort", "find",
        "reset", "help", "clear", "exit", "quit",
    ]

    COMMAND_DESCRIPTIONS = {
        "add": "Create a task",
        "ls": "List tasks in view",
        "board": "Four-column board",
        "show": "Task details",
        "edit": "Edit task fields",
        "mv": "Move task to a column",
        "done": "Complete a task",
        "rm": "Delete a task",
        "timer": "Start/stop a task timer",
        "shop": "Browse upgrades",
        "buy": "Buy an upgrade",
        "inventory": "Owned upgrades",
        "stats": "Totals and time",
        "video": "Background video settings",
        "use": "Filter by project",
        "sort": "Change sort order",
        "find": "Filter by text",
        "reset": "Wipe everything",
        "help": "Show help",
        "clear": "Clear the screen",
        "exit": "Leave",
        "quit": "Leave",
    }

    ID_FIRST_COMMANDS = {"show", "edit", "mv", "done", "rm", "timer"}

    COMMAND_FLAGS = {
        "add": ["--project", "--difficulty", "--priority", "--status", "--desc"],
        "edit": ["--title", "--project", "--difficulty", "--priority", "--desc"],
        "ls": ["--status"],
        "video": ["--enable", "--disable", "--url"],
        "reset": ["--yes"],
        "rm": ["--yes"],
    }

    FLAG_DESCRIPTIONS = {
        "--project": "Project name",
        "--difficulty": "XS, S, M, L, XL",
        "--priority": "1 (highest) to 5",
        "--status": "Column",
        "--desc": "Description",
        "--title": "New title",
        "--enable": "Turn video on",
        "--disable": "Turn video off",
        "--url": "Video URL",
        "--yes": "Skip confirmation",
    }

    def __init__(
        self,
        task_ids: Optional[Callable[[], List[str]]] = None,
        projects: Optional[Callable[[], List[str]]] = None,
    ) -> None:
        self._task_ids = task_ids or (lambda: [])
        self._projects = projects or (lambda: [])

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Logic:
            1. Start of line -> commands
            2. First arg of an ID command -> task IDs
            3. Positional values (mv column, buy item, use project, sort mode)
            4. Value after a known flag
            5. Otherwise flags for the command
        """
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        trailing_space = text_before_cursor.endswith(" ")

        if not words or (not trailing_space and len(words) == 1):
            word = words[0] if words else ""
            yield from self._complete(word, self.COMMANDS, self.COMMAND_DESCRIPTIONS)
            return

        command = words[0].lower()
        # Index of the word being typed (0 = command)
        position = len(words) if trailing_space else len(words) - 1
        current = "" if trailing_space else words[-1]
        previous = words[position - 1] if position >= 1 else ""

        # Flag values
        if previous in ("--difficulty", "-x"):
            yield from self._complete(current, [d.key for d in DIFFICULTIES])
            return
        if previous in ("--status", "-s"):
            yield from self._complete(current, [c.key for c in COLUMNS])
            return
        if previous in ("--project", "-p"):
            yield from self._complete(current, self._projects())
            return

        if current.startswith("-"):
            yield from self._complete(current, self.COMMAND_FLAGS.get(command, []), self.FLAG_DESCRIPTIONS)
            return

        if command in self.ID_FIRST_COMMANDS and position == 1:
            yield from self._complete(current, self._task_ids())
            return
        if command == "mv" and position == 2:
            yield from self._complete(current, [c.key for c in COLUMNS])
            return
        if command == "buy" and position == 1:
            yield from self._complete(
                current, [i.id for i in SHOP], {i.id: f"{i.emoji} {i.cost} pts" for i in SHOP}
            )
            return
        if command == "use" and position == 1:
            yield from self._complete(current, self._projects() + ["all"])
            return
        if command == "sort" and position == 1:
            yield from self._complete(current, list(VALID_SORTS))
            return

        if trailing_space:
            yield from self._complete("", self.COMMAND_FLAGS.get(command, []), self.FLAG_DESCRIPTIONS)

    @staticmethod
    def _complete(word: str, candidates: Iterable[str], meta: Optional[dict] = None) -> Iterable[Completion]:
        word_lower = word.lower()
        for candidate in candidates:
            if candidate.lower().startswith(word_lower):
                yield Completion(
                    candidate,
                    start_position=-len(word),
                    display=candidate,
                    display_meta=(meta or {}).get(candidate, ""),
                )


def create_completer(
    task_ids: Optional[Callable[[], List[str]]] = None,
    projects: Optional[Callable[[], List[str]]] = None,
) -> QuestboardCompleter:
    """Factory used by the REPL (and tests)."""
    return QuestboardCompleter(task_ids=task_ids, projects=projects)
