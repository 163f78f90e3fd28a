"""
Challenge Repository.

Per-user challenge state of every project: the current, completed,
rejected and stored sets. The host owns the repository and persists it;
the engine only reads snapshots and moves challenges between sets.

Several builds may update the same user at once, so every operation is a
single step under one lock and readers only ever receive tuples.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from gamekins.challenges.base import Challenge, current_millis
from gamekins.challenges.dummy import DummyChallenge

logger = logging.getLogger(__name__)

DEFAULT_STORED_CHALLENGES = 2


class ChallengeSet(str, Enum):
    """The sets a challenge can live in."""

    CURRENT = "current"
    COMPLETED = "completed"
    REJECTED = "rejected"
    STORED = "stored"


@dataclass(frozen=True)
class RejectedChallenge:
    """A challenge the user or the lifecycle check rejected.

    Attributes:
        challenge: The rejected challenge
        reason: Why it was rejected
        rejected_at: Rejection time in epoch milliseconds
    """

    challenge: Challenge
    reason: str
    rejected_at: int = field(default_factory=current_millis)


@dataclass
class ProjectChallenges:
    """Challenge sets of one user in one project."""

    current: list[Challenge] = field(default_factory=list)
    completed: list[Challenge] = field(default_factory=list)
    rejected: list[RejectedChallenge] = field(default_factory=list)
    stored: list[Challenge] = field(default_factory=list)

    def items(self, which: ChallengeSet) -> list[Any]:
        return getattr(self, which.value)


def _index_of(items: list[Any], challenge: Challenge) -> Optional[int]:
    """Position of the challenge, preferring the same object over an equal one."""
    def unwrap(item: Any) -> Any:
        return item.challenge if isinstance(item, RejectedChallenge) else item

    for index, item in enumerate(items):
        if unwrap(item) is challenge:
            return index
    for index, item in enumerate(items):
        if unwrap(item) == challenge:
            return index
    return None


class ChallengeRepository:
    """Thread-safe store of challenge sets per user and project.

    Usage:
        repository = ChallengeRepository()
        repository.new_challenge("alice", "shop", challenge)

        # Later, when the lifecycle check solved it
        repository.complete_challenge("alice", "shop", challenge)

        completed = repository.completed("alice", "shop")
    """

    def __init__(self, max_stored: int = DEFAULT_STORED_CHALLENGES) -> None:
        """Initialize the repository.

        Args:
            max_stored: How many challenges a user may put aside per project
        """
        self.max_stored = max_stored
        self._lock = threading.Lock()
        self._projects: dict[tuple[str, str], ProjectChallenges] = {}

    def _state(self, user: str, project: str) -> ProjectChallenges:
        key = (user, project)
        if key not in self._projects:
            self._projects[key] = ProjectChallenges()
        return self._projects[key]

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def append(self, user: str, project: str, which: ChallengeSet, item: Any) -> None:
        """Append an item to one set.

        Args:
            user: Owner of the set
            project: Project the set belongs to
            which: Target set
            item: Challenge, or RejectedChallenge for the rejected set
        """
        if which == ChallengeSet.REJECTED and not isinstance(item, RejectedChallenge):
            raise TypeError("The rejected set holds RejectedChallenge entries")
        with self._lock:
            self._state(user, project).items(which).append(item)

    def remove_one(
        self, user: str, project: str, which: ChallengeSet, challenge: Challenge
    ) -> bool:
        """Remove one occurrence of a challenge from a set.

        Returns:
            True if the challenge was found and removed
        """
        with self._lock:
            items = self._state(user, project).items(which)
            index = _index_of(items, challenge)
            if index is None:
                return False
            del items[index]
            return True

    def snapshot(self, user: str, project: str, which: ChallengeSet) -> tuple[Any, ...]:
        """Immutable copy of one set."""
        with self._lock:
            return tuple(self._state(user, project).items(which))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def current(self, user: str, project: str) -> tuple[Challenge, ...]:
        return self.snapshot(user, project, ChallengeSet.CURRENT)

    def completed(self, user: str, project: str) -> tuple[Challenge, ...]:
        return self.snapshot(user, project, ChallengeSet.COMPLETED)

    def rejected(self, user: str, project: str) -> tuple[RejectedChallenge, ...]:
        return self.snapshot(user, project, ChallengeSet.REJECTED)

    def stored(self, user: str, project: str) -> tuple[Challenge, ...]:
        return self.snapshot(user, project, ChallengeSet.STORED)

    def projects(self, user: str) -> list[str]:
        """Projects the user has challenge state in."""
        with self._lock:
            return sorted(project for owner, project in self._projects if owner == user)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def new_challenge(self, user: str, project: str, challenge: Challenge) -> None:
        """Add a freshly generated challenge to the current set."""
        self.append(user, project, ChallengeSet.CURRENT, challenge)
        logger.debug(f"Added challenge for {user} in {project}: {challenge}")

    def add_if_unique(
        self,
        user: str,
        project: str,
        challenge: Challenge,
        key: Callable[[Challenge], Any] = str,
    ) -> bool:
        """Add a challenge unless a current one has the same key.

        The check and the append happen under one lock. A DummyChallenge is
        always added.

        Returns:
            True if the challenge was added
        """
        with self._lock:
            current = self._state(user, project).current
            if not isinstance(challenge, DummyChallenge):
                wanted = key(challenge)
                if any(key(existing) == wanted for existing in current):
                    return False
            current.append(challenge)
        logger.debug(f"Added challenge for {user} in {project}: {challenge}")
        return True

    def complete_challenge(self, user: str, project: str, challenge: Challenge) -> bool:
        """Move a solved challenge from current to completed.

        A dummy challenge is only removed; it never enters the history.

        Returns:
            True if the challenge was in the current set
        """
        with self._lock:
            state = self._state(user, project)
            index = _index_of(state.current, challenge)
            if index is None:
                return False
            removed = state.current.pop(index)
            if not isinstance(removed, DummyChallenge):
                state.completed.append(removed)
        return True

    def reject_challenge(
        self, user: str, project: str, challenge: Challenge, reason: str
    ) -> bool:
        """Move a challenge from current to rejected.

        Returns:
            True if the challenge was in the current set
        """
        with self._lock:
            state = self._state(user, project)
            index = _index_of(state.current, challenge)
            if index is None:
                return False
            removed = state.current.pop(index)
            state.rejected.append(RejectedChallenge(challenge=removed, reason=reason))
        logger.info(f"Rejected challenge for {user} in {project} ({reason}): {challenge}")
        return True

    def store_challenge(self, user: str, project: str, challenge: Challenge) -> bool:
        """Put a current challenge aside.

        Returns:
            True if it was moved, False if it is not current or the stored
            set is full
        """
        with self._lock:
            state = self._state(user, project)
            if len(state.stored) >= self.max_stored:
                return False
            index = _index_of(state.current, challenge)
            if index is None:
                return False
            state.stored.append(state.current.pop(index))
        return True

    def restore_challenge(self, user: str, project: str, challenge: Challenge) -> bool:
        """Move a stored challenge back to the current set.

        Returns:
            True if the challenge was stored
        """
        with self._lock:
            state = self._state(user, project)
            index = _index_of(state.stored, challenge)
            if index is None:
                return False
            state.current.append(state.stored.pop(index))
        return True
