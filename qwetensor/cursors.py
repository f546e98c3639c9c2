"""
qwetensor: Cursors

Forward, single-pass positions into a tensor's cells. A cursor is a
borrowed view carrying (target, row, col) and nothing else; it never owns
or copies the tensor's storage. The tensor must not be mutated through
another path while a cursor over it is being stepped.

Two families:

    RowCursor   visits cells row by row, full traversal ends at (N, 0)
    ColCursor   visits cells column by column, full traversal ends at (0, N)

A CursorRange pairs a begin cursor with its end sentinel, which is how the
algebra in ``core_functions`` consumes them.

"""

from typing import Iterable, Iterator, Tuple


class _Cursor:
    """
    Shared (target, row, col) state of both cursor families.
    """
    __slots__ = ("target", "row", "col")

    def __init__(
        self,
        target,
        row: int = 0,
        col: int = 0) -> None:
        self.target = target
        self.row = row
        self.col = col


    def step(self) -> "_Cursor":
        raise NotImplementedError


    def copy(self) -> "_Cursor":
        """Independent cursor at the same position."""
        return type(self)(self.target, self.row, self.col)


    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)


    def _check_dereferenceable(self) -> None:
        dim = self.target.dim
        if not (0 <= self.row < dim and 0 <= self.col < dim):
            raise IndexError(
                f"{type(self).__name__} at ({self.row}, {self.col}) is outside the {dim}x{dim} grid")


    def get(self):
        """Read the cell under the cursor."""
        self._check_dereferenceable()
        return self.target._storage[self.row, self.col]


    def set(
        self,
        value) -> None:
        """Write the cell under the cursor."""
        self._check_dereferenceable()
        self.target._storage[self.row, self.col] = value


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (self.target is other.target
                and self.row == other.row
                and self.col == other.col)


    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(row={self.row}, col={self.col})"


class RowCursor(_Cursor):
    """
    Row-major cursor. Stepping advances the column and wraps onto the
    next row when the column reaches N.
    """
    __slots__ = ()

    def step(self) -> "RowCursor":
        self.col += 1
        if self.col == self.target.dim:
            self.col = 0
            self.row += 1
        return self


class ColCursor(_Cursor):
    """
    Column-major cursor. Stepping advances the row and wraps onto the
    next column when the row reaches N.
    """
    __slots__ = ()

    def step(self) -> "ColCursor":
        self.row += 1
        if self.row == self.target.dim:
            self.row = 0
            self.col += 1
        return self


class CursorRange:
    """
    A begin cursor together with the end sentinel it is stepped towards.

    Iterating a range yields cell values; the begin cursor itself is never
    moved, so a range can be traversed any number of times.
    """

    def __init__(
        self,
        begin: _Cursor,
        end: _Cursor) -> None:
        if type(begin) is not type(end) or begin.target is not end.target:
            raise TypeError("begin and end must be cursors of the same family over the same tensor")
        self.begin = begin
        self.end = end


    def cursors(self) -> Iterator[_Cursor]:
        """Yield the live cursor at each visited cell."""
        cursor = self.begin.copy()
        while cursor != self.end:
            yield cursor
            cursor.step()


    def positions(self) -> Iterator[Tuple[int, int]]:
        """Yield the (row, col) of each visited cell, in visiting order."""
        for cursor in self.cursors():
            yield cursor.position


    def __iter__(self):
        for cursor in self.cursors():
            yield cursor.get()


    def assign(
        self,
        values: Iterable) -> None:
        """
        Write ``values`` through the range in visiting order. Stops at
        whichever of the range or ``values`` runs out first.
        """
        for cursor, value in zip(self.cursors(), values):
            cursor.set(value)


    def __repr__(self) -> str:
        return f"CursorRange({self.begin!r} -> {self.end!r})"
