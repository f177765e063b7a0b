"""
Natural (numeric-aware) ordering of strings.

``host2`` sorts before ``host10`` because digit runs compare by value and
text runs compare lexically.
"""

import re
from typing import Iterable, Union


_RUN_PATTERN = re.compile(r"([0-9]+)")


def natural_key(value: str) -> tuple:
    """
    Split a string into alternating text and digit runs.

    Each run becomes a ``(kind, value)`` pair so that text and numbers never
    compare against each other directly: digit runs are ``(0, int, original)``
    and sort before text runs ``(1, text)``. The original digits break ties between
    ``"01"`` and ``"1"``.

    Args:
        value: String to tokenize

    Returns:
        Tuple usable as a sort key
    """
    key: list[tuple[Union[int, str], ...]] = []
    # split() with a capturing group puts digit runs at odd indexes
    for index, run in enumerate(_RUN_PATTERN.split(value)):
        if not run:
            continue
        if index % 2:
            key.append((0, int(run), run))
        else:
            key.append((1, run))
    return tuple(key)


def natural_sorted(values: Iterable[str]) -> list[str]:
    """Return values in natural order."""
    return sorted(values, key=natural_key)
