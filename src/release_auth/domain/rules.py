"""Repository allow-list models.

Credentials are only ever attached to requests whose ``owner/name`` path
segments match one of these rules.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RepositoryRule:
    """Allow-listed repository.

    Attributes:
        owner: Repository owner (user or organization)
        name: Repository name
        source_url: Package index URL configured for the repository

    """

    owner: str
    name: str
    source_url: str = ""

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name are required")

    @property
    def display_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def matches(self, owner: str, name: str) -> bool:
        """Return True when owner/name match this rule, ignoring case."""
        return (
            self.owner.casefold() == owner.casefold()
            and self.name.casefold() == name.casefold()
        )


class RepositoryAllowList:
    """Immutable table of repositories that may receive credentials.

    An empty allow-list never matches anything.
    """

    __slots__ = ("_index", "_rules")

    def __init__(self, rules: Iterable[RepositoryRule] = ()) -> None:
        self._rules: tuple[RepositoryRule, ...] = tuple(rules)
        self._index: dict[tuple[str, str], RepositoryRule] = {}
        for rule in self._rules:
            key = (rule.owner.casefold(), rule.name.casefold())
            # First entry wins for duplicate owner/name pairs
            self._index.setdefault(key, rule)

    def match(self, owner: str, name: str) -> RepositoryRule | None:
        """Find the rule for ``owner/name``.

        Args:
            owner: Owner segment taken from a request URL
            name: Repository segment taken from a request URL

        Returns:
            Matching rule, or None when the pair is not allow-listed

        """
        if not owner or not name:
            return None
        return self._index.get((owner.casefold(), name.casefold()))

    def __iter__(self) -> Iterator[RepositoryRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __repr__(self) -> str:
        names = ", ".join(rule.display_name for rule in self._rules)
        return f"RepositoryAllowList([{names}])"
