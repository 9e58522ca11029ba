"""The fixed set of users that share expenses."""

from collections.abc import Iterable, Iterator

from .exceptions import ValidationError
from .models import User

DEFAULT_ROSTER = [
    User(id="1", name="Juan"),
    User(id="2", name="María"),
    User(id="3", name="Pedro"),
]

UNKNOWN_USER_NAME = "Unknown"


class Roster:
    """An ordered, read-only collection of users.

    The roster is loaded once at startup. Order matters: it is the tie-break
    order of the settlement engine and the display order of every report.
    """

    def __init__(self, users: Iterable[User]):
        """Initialize the roster, rejecting empty or ambiguous user lists."""
        self._users = tuple(users)
        if not self._users:
            raise ValidationError("Roster must contain at least one user")

        ids = [user.id for user in self._users]
        if len(set(ids)) != len(ids):
            raise ValidationError(f"Roster has duplicate user ids: {ids}")

        names = [user.name.casefold() for user in self._users]
        if len(set(names)) != len(names):
            raise ValidationError("Roster has duplicate user names")

        self._by_id = {user.id: user for user in self._users}

    def __iter__(self) -> Iterator[User]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._by_id

    @property
    def users(self) -> tuple[User, ...]:
        return self._users

    def get_user_by_id(self, user_id: str) -> User | None:
        """Look up a user by id."""
        return self._by_id.get(user_id)

    def get_user_name(self, user_id: str) -> str:
        """Display name for a user id, or a placeholder for unknown ids."""
        user = self._by_id.get(user_id)
        return user.name if user else UNKNOWN_USER_NAME

    def resolve(self, token: str) -> User:
        """
        Resolve a user from an id or a case-insensitive display name.

        Args:
            token: User id or name as typed by the user

        Returns:
            The matching user

        Raises:
            ValidationError: If no user matches
        """
        token = token.strip()
        if token in self._by_id:
            return self._by_id[token]

        folded = token.casefold()
        for user in self._users:
            if user.name.casefold() == folded:
                return user

        raise ValidationError(f"Unknown user: '{token}'")
