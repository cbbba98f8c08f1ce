import asyncio
import threading

import pytest

from barrage.counter import WorkCounter


def test_claims_in_order_then_exhausts():
    c = WorkCounter(3)
    assert [c.claim(), c.claim(), c.claim()] == [1, 2, 3]
    assert c.claim() is None
    assert c.claim() is None
    assert c.claimed == 3
    assert c.exhausted


def test_rejects_empty_range():
    with pytest.raises(ValueError):
        WorkCounter(0)


@pytest.mark.parametrize("total,workers", [(1, 1), (1, 8), (10, 3), (100, 7), (257, 16)])
def test_each_unit_claimed_once_across_tasks(total, workers):
    c = WorkCounter(total)
    claimed = []

    async def worker():
        while (unit := c.claim()) is not None:
            claimed.append(unit)
            await asyncio.sleep(0)

    async def main():
        await asyncio.gather(*(worker() for _ in range(workers)))

    asyncio.run(main())
    assert sorted(claimed) == list(range(1, total + 1))


def test_each_unit_claimed_once_across_threads():
    total = 5000
    c = WorkCounter(total)
    per_thread = [[] for _ in range(8)]

    def worker(out):
        while (unit := c.claim()) is not None:
            out.append(unit)

    threads = [threading.Thread(target=worker, args=(out,)) for out in per_thread]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    claimed = [u for out in per_thread for u in out]
    assert len(claimed) == total
    assert set(claimed) == set(range(1, total + 1))
    # each thread sees its own claims in increasing order
    assert all(out == sorted(out) for out in per_thread)
