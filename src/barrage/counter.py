import itertools
import logging

from .models import WorkUnit

logger = logging.getLogger(__name__)


class WorkCounter:
    """Hands out unit indices ``1..total``, each to exactly one caller.

    ``next()`` on an ``itertools.count`` is a single atomic step, so claims
    stay unique across tasks and threads without a lock.
    """

    def __init__(self, total: int) -> None:
        if total < 1:
            raise ValueError(f"total must be >= 1, got {total}")
        self.total = total
        self._next = itertools.count(1)
        self._high = 0

    def claim(self) -> WorkUnit | None:
        idx = next(self._next)
        if idx > self.total:
            return None
        self._high = idx
        return idx

    @property
    def claimed(self) -> int:
        return self._high

    @property
    def exhausted(self) -> bool:
        return self._high >= self.total
