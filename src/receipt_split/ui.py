"""Interactive UI components for picking roster members."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .exceptions import ValidationError
from .models import User
from .roster import Roster

logger = logging.getLogger(__name__)


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="mra" matches "María"
        query="pd" matches "Pedro"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


class UserCompleter(Completer):
    """Fuzzy search completer for roster members."""

    def __init__(self, users: list[User]):
        """Initialize the completer with selectable users."""
        self.users = users
        self.name_to_id = {user.name: user.id for user in users}

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for user in self.users:
            if not query or fuzzy_match(query, user.name.lower()):
                yield Completion(
                    text=user.name,
                    start_position=-len(document.text),
                    display=user.name,
                )


def select_user_interactive(
    roster: Roster, prompt: str, exclude: set[str] | None = None
) -> str | None:
    """
    Interactive user selection with fuzzy search.

    Args:
        roster: The fixed roster
        prompt: Prompt label
        exclude: User ids that cannot be picked

    Returns:
        Selected user id, or None when the input is empty or cancelled
    """
    users = [user for user in roster if user.id not in (exclude or set())]
    if not users:
        return None

    completer = UserCompleter(users)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt(f"{prompt}: ", complete_while_typing=True)
            if not result.strip():
                return None

            try:
                user = roster.resolve(result)
            except ValidationError:
                print("❌ Unknown name. Press Tab to see the roster.")
                continue

            if user.id in (exclude or set()):
                print(f"❌ {user.name} is already selected.")
                continue

            logger.debug(f"User selected {user.name}")
            return user.id

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None


def select_participants_interactive(roster: Roster) -> list[str]:
    """
    Pick participants one at a time; an empty entry finishes the list.

    Returns:
        Selected user ids in pick order
    """
    print("   Add participants one by one, press Enter on an empty line when done\n")

    selected: list[str] = []
    while True:
        user_id = select_user_interactive(
            roster, "Participant", exclude=set(selected)
        )
        if user_id is None:
            return selected
        selected.append(user_id)


def confirm(message: str) -> bool:
    """Simple yes/no confirmation that defaults to no."""
    response = input(f"{message} [y/N] ").strip().lower()
    return response in ("y", "yes")
