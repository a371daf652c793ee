"""Request id allocation."""

from __future__ import annotations

import random

MAX_REQUEST_ID = 2**32


class RequestIdGenerator:
    """Monotonic 32-bit id source, randomly seeded so separate instances rarely overlap."""

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = random.randrange(MAX_REQUEST_ID)
        self._next = seed % MAX_REQUEST_ID

    def next_id(self) -> int:
        value = self._next
        self._next = (value + 1) % MAX_REQUEST_ID
        return value

    def peek(self) -> int:
        return self._next


# Shared by every transport unless one is injected.
shared_id_generator = RequestIdGenerator()
