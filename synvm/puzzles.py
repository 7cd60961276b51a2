"""Helpers for the puzzles found inside guest programs.

None of this touches the machine; the functions work on plain values.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence, Tuple, Union

LOGGER = logging.getLogger("synvm.puzzles")

WORD_MASK = 0x7FFF

Cell = Union[int, str]
Position = Tuple[int, int]

MOVES: Tuple[Tuple[str, int, int], ...] = (
    ("north", -1, 0),
    ("south", 1, 0),
    ("east", 0, 1),
    ("west", 0, -1),
)

VAULT_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
}

# Row 0 is the north edge; the walk starts bottom-left and ends top-right.
VAULT_GRID: Tuple[Tuple[Cell, ...], ...] = (
    ("*", 8, "-", 1),
    (4, "*", 11, "*"),
    ("+", 4, "-", 18),
    (22, "-", 9, "*"),
)

_MIRROR_TABLE = str.maketrans("bdpq", "dbqp")


class TeleporterSearch:
    """Memoized evaluation of the two-argument recursion guarded by register *r*.

    ``f(0, n) = n + 1``, ``f(m, 0) = f(m - 1, r)`` and
    ``f(m, n) = f(m - 1, f(m, n - 1))``, everything modulo 32768.
    Evaluation is iterative so deep chains do not hit the recursion limit.
    The cache belongs to the instance and only holds values for this *r*.
    """

    def __init__(self, r: int) -> None:
        self.r = int(r) & WORD_MASK
        self._cache: Dict[Tuple[int, int], int] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    def evaluate(self, m: int, n: int) -> int:
        cache = self._cache
        goal = (m, n & WORD_MASK)
        pending: List[Tuple[int, int]] = [goal]
        while pending:
            key = pending[-1]
            if key in cache:
                pending.pop()
                continue
            km, kn = key
            if km == 0:
                cache[key] = (kn + 1) & WORD_MASK
                pending.pop()
                continue
            if kn == 0:
                dep = (km - 1, self.r)
            else:
                inner = (km, kn - 1)
                if inner not in cache:
                    pending.append(inner)
                    continue
                dep = (km - 1, cache[inner])
            if dep in cache:
                cache[key] = cache[dep]
                pending.pop()
            else:
                pending.append(dep)
        return cache[goal]


def find_register(
    target: int = 6,
    *,
    m: int = 4,
    n: int = 1,
    candidates: Optional[Iterable[int]] = None,
) -> Optional[int]:
    """Return the first register value for which ``f(m, n) == target``."""
    for r in candidates if candidates is not None else range(1, WORD_MASK + 1):
        if TeleporterSearch(r).evaluate(m, n) == target:
            LOGGER.info("register value %d yields %d", r, target)
            return r
    return None


def walk_vault(
    grid: Sequence[Sequence[Cell]] = VAULT_GRID,
    *,
    start: Optional[Position] = None,
    goal: Optional[Position] = None,
    start_value: Optional[int] = None,
    goal_value: int = 30,
    max_steps: int = 20,
) -> Optional[List[str]]:
    """Breadth-first search for the shortest walk reaching *goal* carrying *goal_value*.

    Operator cells set the pending operation, number cells apply it to the
    running value. The start cell cannot be re-entered, reaching the goal
    ends the walk, and negative values are dead ends.
    """
    rows = len(grid)
    if start is None:
        start = (rows - 1, 0)
    if goal is None:
        goal = (0, len(grid[0]) - 1)
    if start_value is None:
        first = grid[start[0]][start[1]]
        if not isinstance(first, int):
            raise ValueError("start cell must hold a number when start_value is not given")
        start_value = first

    queue: Deque[Tuple[Position, int, Optional[str], Tuple[str, ...]]] = deque()
    queue.append((start, start_value, None, ()))
    seen = {(start, start_value, None)}
    while queue:
        pos, value, op, path = queue.popleft()
        if len(path) >= max_steps:
            continue
        for name, dr, dc in MOVES:
            row, col = pos[0] + dr, pos[1] + dc
            if not (0 <= row < rows and 0 <= col < len(grid[row])):
                continue
            if (row, col) == start:
                continue
            cell = grid[row][col]
            if isinstance(cell, str):
                if cell not in VAULT_OPERATORS:
                    raise ValueError(f"unknown vault operator {cell!r}")
                new_value, new_op = value, cell
            else:
                if op is None:
                    continue
                new_value, new_op = VAULT_OPERATORS[op](value, cell), None
                if new_value < 0:
                    continue
            new_path = path + (name,)
            if (row, col) == goal:
                if new_op is None and new_value == goal_value:
                    return list(new_path)
                continue
            state = ((row, col), new_value, new_op)
            if state in seen:
                continue
            seen.add(state)
            queue.append(((row, col), new_value, new_op, new_path))
    return None


def mirror(text: str) -> str:
    """Return *text* as read in a mirror: reversed, with b/d and p/q swapped."""
    return text[::-1].translate(_MIRROR_TABLE)


__all__ = [
    "TeleporterSearch",
    "find_register",
    "walk_vault",
    "mirror",
    "VAULT_GRID",
]
