"""
Structural paths into an overlay.

A path is an ordered sequence of steps from the object root to a field. A
step is either a field name (``Ident``) or a numeric position (``Index``).
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from merkle_partial.exceptions import EmptyPathError, InvalidPathError


@dataclass(frozen=True)
class Ident:
    """Field name step."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    """Numeric step into a vector or list."""
    value: int

    def __post_init__(self):
        if self.value < 0:
            raise InvalidPathError(self.value, f"Path index must be non-negative, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


PathStep = Union[Ident, Index]
Path = Tuple[PathStep, ...]


def to_step(step: Union[PathStep, str, int]) -> PathStep:
    """Normalize a plain ``str`` or ``int`` into a path step."""
    if isinstance(step, (Ident, Index)):
        return step
    # bool is an int subclass but never a meaningful position
    if isinstance(step, bool):
        raise TypeError("Path steps must be str or int, got bool")
    if isinstance(step, int):
        return Index(step)
    if isinstance(step, str):
        return Ident(step)
    raise TypeError(f"Path steps must be str or int, got {type(step).__name__}")


def to_path(steps: Iterable[Union[PathStep, str, int]]) -> Path:
    return tuple(to_step(step) for step in steps)


def require_path(steps: Iterable[Union[PathStep, str, int]]) -> Path:
    """
    Normalize ``steps`` and reject an empty path.

    Raises:
        EmptyPathError: If there are no steps
    """
    path = to_path(steps)
    if not path:
        raise EmptyPathError()
    return path


def parse_path(text: str, separator: str = "/") -> Path:
    """
    Parse a textual path such as ``"validators/3/balance"``.

    Segments made only of ASCII digits become ``Index`` steps, everything
    else becomes an ``Ident``.

    Raises:
        EmptyPathError: If ``text`` contains no segments
    """
    segments: List[Union[str, int]] = []
    for segment in text.split(separator):
        segment = segment.strip()
        if not segment:
            continue
        segments.append(int(segment) if segment.isascii() and segment.isdigit() else segment)
    return require_path(segments)


def format_path(path: Sequence[PathStep]) -> str:
    return "/".join(str(step) for step in path)
