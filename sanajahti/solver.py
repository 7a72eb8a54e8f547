from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Iterable, Sequence

from sanajahti.trie import PrefixIndex

DEFAULT_GRID_SIZE = 4


class InvalidGrid(ValueError):
    """Raised when a grid does not have the expected shape."""


class SolveTimeout(RuntimeError):
    """Raised when a solve runs past its time budget."""


@dataclass(frozen=True)
class Grid:
    """Square letter grid stored row-major."""

    size: int
    cells: tuple[str, ...]

    @classmethod
    def parse(cls, raw: str | Sequence, size: int = DEFAULT_GRID_SIZE, normalize: bool = False) -> Grid:
        """Build a grid from a string, a flat list of letters or a list of rows.

        Whitespace and commas in a string are separators. Cells are kept as
        given unless ``normalize`` is set, which upper-cases them the way the
        wordlist loader does. Any cell count other than ``size * size`` is
        rejected, as is a cell that is not exactly one character after
        normalizing.
        """
        if size < 1:
            raise InvalidGrid(f"grid size must be positive, got {size}")

        if isinstance(raw, str):
            items: list = [ch for ch in raw if not ch.isspace() and ch != ","]
        else:
            items = _flatten_rows(list(raw), size)

        expected = size * size
        if len(items) != expected:
            raise InvalidGrid(f"expected {expected} cells for a {size}x{size} grid, got {len(items)}")

        cells = []
        for idx, item in enumerate(items):
            cell = item.strip() if isinstance(item, str) else None
            if cell is not None and normalize:
                cell = cell.upper()
            if cell is None or len(cell) != 1:
                raise InvalidGrid(f"cell {idx} must be a single letter, got {item!r}")
            cells.append(cell)
        return cls(size, tuple(cells))

    def letter(self, idx: int) -> str:
        return self.cells[idx]

    def position(self, idx: int) -> tuple[int, int]:
        return divmod(idx, self.size)

    def rows(self) -> list[list[str]]:
        return [list(self.cells[r * self.size:(r + 1) * self.size]) for r in range(self.size)]

    def __str__(self) -> str:
        return " / ".join("".join(row) for row in self.rows())


def _flatten_rows(items: list, size: int) -> list:
    # A list of ``size`` rows, each a string or list of ``size`` letters.
    looks_like_rows = size > 1 and len(items) == size and all(
        not isinstance(it, str) or len(it.strip()) == size for it in items
    )
    if not looks_like_rows:
        return items
    cells = []
    for r, row in enumerate(items):
        row = list(row.strip()) if isinstance(row, str) else list(row)
        if len(row) != size:
            raise InvalidGrid(f"row {r} has {len(row)} cells, expected {size}")
        cells.extend(row)
    return cells


def neighbors(size: int) -> list[list[int]]:
    """Adjacency lists for every cell index; moves go in all 8 directions."""
    adjacency: list[list[int]] = []
    for idx in range(size * size):
        r, c = divmod(idx, size)
        adj = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = r + dr, c + dc
                if 0 <= nr < size and 0 <= nc < size:
                    adj.append(nr * size + nc)
        adjacency.append(adj)
    return adjacency


def _explore(start: int, cells: tuple[str, ...], adjacency: list[list[int]],
             index: PrefixIndex) -> dict[str, tuple[int, ...]]:
    """All words reachable from one start cell, each with the first path spelling it.

    Depth-first over an explicit stack of (cell, node, visited mask, path)
    frames. The visited mask belongs to the frame, so leaving a branch frees
    its cells for sibling branches.
    """
    found: dict[str, tuple[int, ...]] = {}
    node = index.child(index.root(), cells[start])
    if node is None:
        return found

    stack = [(start, node, 1 << start, (start,))]
    while stack:
        idx, node, visited, path = stack.pop()
        if index.is_word(node):
            word = "".join(cells[i] for i in path)
            if word not in found:
                found[word] = path

        if not node.children:
            continue
        # Reversed so neighbours come off the stack in adjacency order
        for nidx in reversed(adjacency[idx]):
            bit = 1 << nidx
            if visited & bit:
                continue
            child = index.child(node, cells[nidx])
            if child is None:
                continue
            stack.append((nidx, child, visited | bit, path + (nidx,)))

    return found


def _as_grid(grid: Grid | str | Sequence, size: int | None) -> Grid:
    if isinstance(grid, Grid):
        if size is not None and grid.size != size:
            raise InvalidGrid(f"expected a {size}x{size} grid, got {grid.size}x{grid.size}")
        return grid
    return Grid.parse(grid, size or DEFAULT_GRID_SIZE)


def find_words(
    grid: Grid | str | Sequence,
    index: PrefixIndex,
    workers: int = 0,
    timeout: float | None = None,
    size: int | None = None,
) -> dict[str, tuple[tuple[int, int], ...]]:
    """Map every word on the grid to one (row, col) path spelling it.

    Start cells are scanned row-major and the first path found wins, so each
    path begins at the topmost-leftmost cell that can start the word.

    ``workers > 0`` explores the start cells on a thread pool. ``timeout`` is
    checked between start cells; running past it raises SolveTimeout and
    discards everything found so far. On the thread pool only start cells that
    have not begun are cancelled; explorations already running finish in the
    background after the error is raised.
    """
    board = _as_grid(grid, size)
    adjacency = neighbors(board.size)
    starts = range(board.size * board.size)
    deadline = time.monotonic() + timeout if timeout else None

    per_start: list[dict[str, tuple[int, ...]]] = []
    if workers > 0:
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sanajahti-search")
        try:
            futures = [pool.submit(_explore, s, board.cells, adjacency, index) for s in starts]
            _, pending = wait(futures, timeout=timeout or None)
            if pending:
                raise SolveTimeout(f"{len(pending)} start cells unfinished after {timeout}s")
            per_start = [f.result() for f in futures]
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
    else:
        for s in starts:
            if deadline is not None and time.monotonic() > deadline:
                raise SolveTimeout(f"{len(starts) - s} start cells unfinished after {timeout}s")
            per_start.append(_explore(s, board.cells, adjacency, index))

    found: dict[str, tuple[tuple[int, int], ...]] = {}
    for result in per_start:
        for word, path in result.items():
            if word not in found:
                found[word] = tuple(board.position(i) for i in path)
    return found


def solve(
    grid: Grid | str | Sequence,
    index: PrefixIndex,
    workers: int = 0,
    timeout: float | None = None,
    size: int | None = None,
) -> set[str]:
    """Every vocabulary word that can be traced on the grid, once each."""
    return set(find_words(grid, index, workers=workers, timeout=timeout, size=size))


def rank_words(words: Iterable[str], max_results: int = 0, longest_first: bool = True) -> list[str]:
    if longest_first:
        result = sorted(words, key=lambda w: (-len(w), w))
    else:
        result = sorted(words, key=lambda w: (len(w), w))
    return result[:max_results] if max_results > 0 else result
