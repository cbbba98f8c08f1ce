"""
Streaming quantile estimation (Cormode, Korn, Muthukrishnan, Srivastava).

The sketch keeps an ordered list of ``(value, g, delta)`` tuples, where ``g``
is the rank gap to the previous tuple and ``delta`` the uncertainty of the
tuple's rank. The allowed band ``f(r, n)`` is tight at both ends of the
distribution and widest around the median, and never exceeds ``2 * error * n``,
so every query is answered within ``error * n`` ranks.

Inserts are buffered and merged in sorted batches of ``ceil(1 / (2 * error))``,
each merge followed by a compression pass.
"""

import logging
import math

logger = logging.getLogger(__name__)

MIN_ERROR = 1e-10


class _Sample:
    __slots__ = ("value", "g", "delta")

    def __init__(self, value: float, g: int, delta: int) -> None:
        self.value = value
        self.g = g
        self.delta = delta

    def __repr__(self) -> str:
        return f"_Sample({self.value!r}, g={self.g}, delta={self.delta})"


class QuantileSketch:
    def __init__(self, error: float = 0.001) -> None:
        self.error = min(1.0, max(MIN_ERROR, error))
        self.compress_every = max(1, math.ceil(1.0 / (2.0 * self.error)))
        self.n = 0
        self._samples: list[_Sample] = []
        self._buffer: list[float] = []
        logger.debug(
            f"Created quantile sketch: error={self.error}, compress_every={self.compress_every}"
        )

    def __len__(self) -> int:
        return len(self._samples) + len(self._buffer)

    def __bool__(self) -> bool:
        return self.n > 0

    @property
    def count(self) -> int:
        return self.n

    def _band(self, r: float, n: int) -> int:
        return max(1, math.floor(2.0 * self.error * min(r, n - r)))

    def insert(self, value: float) -> None:
        self._buffer.append(value)
        self.n += 1
        if len(self._buffer) >= self.compress_every:
            self.compress()

    def _merged(self) -> list[_Sample]:
        """Existing tuples with the buffered values merged in, as if inserted
        one by one in sorted order. Existing tuples are not modified."""
        samples = self._samples
        if not self._buffer:
            return samples

        out: list[_Sample] = []
        n = self.n - len(self._buffer)
        r = 0
        i = 0
        for value in sorted(self._buffer):
            # equal values go after the ones already stored
            while i < len(samples) and samples[i].value <= value:
                r += samples[i].g
                out.append(samples[i])
                i += 1
            n += 1
            if not out or i == len(samples):
                delta = 0
            else:
                delta = self._band(r + 1, n) - 1
            out.append(_Sample(value, 1, delta))
            r += 1
        out.extend(samples[i:])
        return out

    def compress(self) -> None:
        if self._buffer:
            self._samples = self._merged()
            self._buffer.clear()

        samples = self._samples
        if len(samples) < 3:
            return

        before = len(samples)
        # lower rank bound of each tuple, unaffected by merges to its right
        ranks = []
        r = 0
        for s in samples:
            r += s.g
            ranks.append(r)

        # walk right to left, folding tuple i into its right neighbour
        kept = [samples[-1]]
        nxt = samples[-1]
        for i in range(len(samples) - 2, 0, -1):
            cur = samples[i]
            width = cur.g + nxt.g + nxt.delta
            lo = ranks[i - 1] + 1
            hi = ranks[i - 1] + width
            if width <= min(self._band(lo, self.n), self._band(hi, self.n)):
                nxt.g += cur.g
            else:
                kept.append(cur)
                nxt = cur
        kept.append(samples[0])
        kept.reverse()
        self._samples = kept
        logger.debug(f"Compressed sketch: {before} -> {len(kept)} tuples (n={self.n})")

    def query(self, phi: float) -> float | None:
        if not 0.0 <= phi <= 1.0:
            raise ValueError(f"quantile must be within [0, 1], got {phi}")
        samples = self._merged()
        if not samples:
            return None

        target = phi * self.n
        # unfloored window keeps the bound, and so the answers, monotone in phi
        window = max(1.0, 2.0 * self.error * min(target, self.n - target))
        bound = target + window / 2.0
        r = 0
        for prev, cur in zip(samples, samples[1:]):
            r += prev.g
            if r + cur.g + cur.delta > bound:
                return prev.value
        return samples[-1].value
