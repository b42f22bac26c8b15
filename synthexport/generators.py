"""
Built-in column value generators.

Each factory returns a zero-argument callable built with functools.partial over a
module-level function, so generators can be pickled for the process backend. None
of them keep state between calls; `random` module functions are thread-safe.
"""

from __future__ import annotations

import random
import string
from functools import partial
from typing import Callable, Dict, Sequence

ALPHANUMERIC = string.ascii_uppercase + string.digits

ValueGenerator = Callable[[], str]


def _constant(value: str) -> str:
    return value


def _random_chars(alphabet: str, length: int) -> str:
    return "".join(random.choices(alphabet, k=length))


def _random_choice(values: Sequence[str]) -> str:
    return random.choice(values)


def constant(value: str) -> ValueGenerator:
    return partial(_constant, value)


def alphanumeric(length: int) -> ValueGenerator:
    if length < 0:
        raise ValueError("length must be non-negative")
    return partial(_random_chars, ALPHANUMERIC, length)


def digits(length: int) -> ValueGenerator:
    if length < 0:
        raise ValueError("length must be non-negative")
    return partial(_random_chars, string.digits, length)


def choice(values: Sequence[str]) -> ValueGenerator:
    if not values:
        raise ValueError("choice needs at least one value")
    return partial(_random_choice, tuple(values))


GENERATOR_KINDS: Dict[str, Callable[..., ValueGenerator]] = {
    "constant": constant,
    "alphanumeric": alphanumeric,
    "digits": digits,
    "choice": choice,
}


__all__ = [
    "GENERATOR_KINDS",
    "ValueGenerator",
    "alphanumeric",
    "choice",
    "constant",
    "digits",
]
