"""Short random identifiers for history entries."""

from __future__ import annotations

import random
import string
from typing import Optional

ID_ALPHABET = string.digits + string.ascii_lowercase
DEFAULT_ID_LENGTH = 10


class IdGenerator:
    """Samples fixed-length ids from a 36-symbol alphabet.

    At the default length (36**10 ~ 3.7e15 values) the chance of any collision
    among 10,000 ids is about 1.4e-8. Ids carry no ordering.
    """

    def __init__(self, length: int = DEFAULT_ID_LENGTH, rng: Optional[random.Random] = None):
        if length < 1:
            raise ValueError("length must be positive")
        self.length = length
        self._rng = rng or random.Random()

    def new_id(self) -> str:
        return "".join(self._rng.choices(ID_ALPHABET, k=self.length))


_default_generator = IdGenerator()


def new_id() -> str:
    return _default_generator.new_id()
