"""
Cell: a mutable multiset of users with a running task counter.

One Cell models every destination of a Solution, and one more Cell models
the reservoir of users that have not been assigned yet (quota 0).

Invariants kept by every mutation:
  • fulfilled == Σ count(u) * type_tasks[u.user_type] over held users
  • a user whose count drops to 0 leaves both the map and the type index
  • a failed removal leaves the Cell untouched

The per-type index keeps users in a stored order. `extract` walks that order,
so callers that want cheap users first call `sort_by` once with their cost
function and then extract as many candidate combinations as they need.
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping, Sequence

from src.instance.cost_model import User
from src.solver.combinations import Combination


class InvalidRemovalError(RuntimeError):
    """Raised when removing a user that is absent or over-drawn."""


class Cell:
    """Users held at one destination (or in the reservoir).

    Args:
        type_tasks: Tasks one user of each type completes.
        quota: Tasks this cell must see fulfilled (0 for the reservoir).
    """

    def __init__(self, type_tasks: Sequence[int], quota: int = 0) -> None:
        self.quota = quota
        self._type_tasks = list(type_tasks)
        self._counts: dict[User, int] = {}
        self._type_index: list[list[User]] = [[] for _ in self._type_tasks]
        self._fulfilled = 0

    # ── Read access ───────────────────────────────────────────────────────────

    @property
    def fulfilled(self) -> int:
        """Tasks completed by the users currently held."""
        return self._fulfilled

    @property
    def is_satisfied(self) -> bool:
        return self._fulfilled >= self.quota

    def count(self, user: User) -> int:
        """How many users of this kind are held (0 if none)."""
        return self._counts.get(user, 0)

    def __contains__(self, user: object) -> bool:
        return user in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def items(self) -> Iterator[tuple[User, int]]:
        """(user, count) pairs, in insertion order."""
        return iter(list(self._counts.items()))

    def users_of_type(self, user_type: int) -> list[User]:
        """Users of one type in the index's stored order."""
        return list(self._type_index[user_type])

    def type_count(self, user_type: int) -> int:
        """Sum of counts of all held users of the given type."""
        return sum(self._counts[u] for u in self._type_index[user_type])

    def type_counts(self) -> list[int]:
        return [self.type_count(m) for m in range(len(self._type_tasks))]

    # ── Mutation ──────────────────────────────────────────────────────────────

    def assign(self, user: User, n: int) -> None:
        """Overwrite the count of user with n.

        Use `add` to increase an existing count instead.
        """
        if n < 0:
            raise ValueError(f"cannot assign a negative count ({n}) of {user}")
        current = self._counts.get(user)
        if current is None:
            if n == 0:
                return
            self._type_index[user.user_type].append(user)
            current = 0
        elif n == 0:
            self._drop(user)
        if n:
            self._counts[user] = n
        self._fulfilled += (n - current) * self._type_tasks[user.user_type]

    def add(self, user: User, n: int) -> None:
        """Add n users of this kind, creating the entry if needed."""
        if n < 0:
            raise ValueError(f"cannot add a negative count ({n}) of {user}")
        if n == 0:
            return
        current = self._counts.get(user)
        if current is None:
            self._type_index[user.user_type].append(user)
            current = 0
        self._counts[user] = current + n
        self._fulfilled += n * self._type_tasks[user.user_type]

    def remove(self, user: User, n: int) -> None:
        """Remove n users of this kind; the entry disappears at zero.

        Raises:
            InvalidRemovalError: if user is absent or fewer than n are held.
        """
        self._check_removal(user, n)
        current = self._counts[user]
        if current > n:
            self._counts[user] = current - n
        else:
            self._drop(user)
        self._fulfilled -= n * self._type_tasks[user.user_type]

    def add_all(self, extraction: Mapping[User, int]) -> None:
        for user, n in extraction.items():
            self.add(user, n)

    def remove_all(self, extraction: Mapping[User, int]) -> None:
        """Remove a batch of users; nothing changes if any removal is invalid."""
        for user, n in extraction.items():
            self._check_removal(user, n)
        for user, n in extraction.items():
            self.remove(user, n)

    # ── Extraction ────────────────────────────────────────────────────────────

    def extract(self, combination: Combination) -> dict[User, int]:
        """Pick users that satisfy combination, walking each type's stored order.

        Side-effect free. The caller guarantees enough users of each type
        are held; a short supply yields a short extraction.
        """
        extraction: dict[User, int] = {}
        for m, wanted in enumerate(combination.counts):
            taken = 0
            for user in self._type_index[m]:
                if taken >= wanted:
                    break
                n = min(self._counts[user], wanted - taken)
                extraction[user] = n
                taken += n
        return extraction

    def sort_by(self, unit_cost: Callable[[User], int]) -> None:
        """Stably reorder every type index by ascending unit_cost."""
        for index in self._type_index:
            index.sort(key=unit_cost)

    # ── Oracles (tests and coherence checks only) ─────────────────────────────

    def compute_fulfilled(self) -> int:
        """Recompute fulfilled from scratch."""
        return sum(n * self._type_tasks[u.user_type] for u, n in self._counts.items())

    # ── Internal ──────────────────────────────────────────────────────────────

    def _check_removal(self, user: User, n: int) -> None:
        current = self._counts.get(user)
        if current is None:
            raise InvalidRemovalError(f"user {user} is not in this cell")
        if n < 0:
            raise InvalidRemovalError(f"cannot remove a negative count ({n}) of {user}")
        if current < n:
            raise InvalidRemovalError(
                f"cannot remove {n} of user {user}: only {current} held"
            )

    def _drop(self, user: User) -> None:
        del self._counts[user]
        self._type_index[user.user_type].remove(user)

    def __repr__(self) -> str:
        return f"Cell(quota={self.quota}, fulfilled={self._fulfilled}, users={len(self._counts)})"
