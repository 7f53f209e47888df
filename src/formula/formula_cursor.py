"""Lookahead cursor shared by the formula lexer and parser."""

from typing import Generic, List, Sequence, TypeVar


T = TypeVar('T')


class FormulaCursor(Generic[T]):
    """
    Read-only scanning cursor over an owned sequence.

    The cursor tracks two indices: the start of the current window and the
    current position.  Everything between them is the window that `slice()`
    returns, and `commit()` moves the window start up to the position.  The
    lexer uses the window to collect the characters of a lexeme, the parser
    only ever looks at `peek()`.

    The cursor never raises.  Reading past the end yields None.
    """

    def __init__(self, sequence: Sequence[T]) -> None:
        """
        Initialize the cursor.

        Args:
            sequence: Elements to scan; the cursor keeps its own copy
        """
        self._sequence: List[T] = list(sequence)
        self._window_start = 0
        self._position = 0

    @property
    def position(self) -> int:
        """Index of the element `peek(0)` returns."""
        return self._position

    @property
    def window_start(self) -> int:
        """Index where the current window begins."""
        return self._window_start

    def peek(self, n: int = 0) -> T | None:
        """
        Look at the element n places ahead of the current position.

        Args:
            n: Lookahead distance, 0 being the current element

        Returns:
            The element, or None if it lies beyond the end of the sequence
        """
        index = self._position + n
        if index >= len(self._sequence):
            return None

        return self._sequence[index]

    def advance(self) -> None:
        """Move one element forward; does nothing at the end of the sequence."""
        if self._position == len(self._sequence):
            return

        self._position += 1

    def slice(self) -> List[T]:
        """Return the elements of the current window."""
        return self._sequence[self._window_start:self._position]

    def commit(self) -> None:
        """Start a new, empty window at the current position."""
        self._window_start = self._position

    def __repr__(self) -> str:
        return (
            f"FormulaCursor(len={len(self._sequence)}, "
            f"window_start={self._window_start}, position={self._position})"
        )
