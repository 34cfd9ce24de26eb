import asyncio
import gc

import pytest

from obiex.cache import TTLCache


class Counter:
    def __init__(self, fail_first: bool = False):
        self.calls = 0
        self.fail_first = fail_first

    async def __call__(self):
        self.calls += 1
        if self.fail_first and self.calls == 1:
            raise RuntimeError("upstream unavailable")
        return self.calls


@pytest.mark.asyncio
async def test_hit_does_not_call_producer():
    cache = TTLCache()
    producer = Counter()

    first = await cache.get_or_set("k", producer, 10)
    second = await cache.get_or_set("k", producer, 10)

    assert first == second == 1
    assert producer.calls == 1


@pytest.mark.asyncio
async def test_zero_ttl_refetches():
    cache = TTLCache()
    producer = Counter()

    await cache.get_or_set("k", producer, 0)
    await cache.get_or_set("k", producer, 0)

    assert producer.calls == 2


@pytest.mark.asyncio
async def test_expiry_uses_clock():
    now = [100.0]
    cache = TTLCache(clock=lambda: now[0])
    producer = Counter()

    assert await cache.get_or_set("k", producer, 10) == 1
    now[0] = 109.9
    assert await cache.get_or_set("k", producer, 10) == 1
    now[0] = 110.0
    assert await cache.get_or_set("k", producer, 10) == 2
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_failed_producer_does_not_poison_cache():
    cache = TTLCache()
    producer = Counter(fail_first=True)

    with pytest.raises(RuntimeError):
        await cache.get_or_set("k", producer, 10)
    assert "k" not in cache

    assert await cache.get_or_set("k", producer, 10) == 2
    assert producer.calls == 2


@pytest.mark.asyncio
async def test_failed_refresh_keeps_stale_entry_untouched():
    now = [0.0]
    cache = TTLCache(clock=lambda: now[0])

    async def ok():
        return "fresh"

    async def boom():
        raise RuntimeError("down")

    await cache.get_or_set("k", ok, 5)
    now[0] = 10.0
    with pytest.raises(RuntimeError):
        await cache.get_or_set("k", boom, 5)

    # Still expired: the failed refresh did not extend the old entry.
    assert await cache.get_or_set("k", ok, 5) == "fresh"


@pytest.mark.asyncio
async def test_keys_are_independent():
    cache = TTLCache()

    async def a():
        return "a"

    async def b():
        return "b"

    assert await cache.get_or_set("a", a, 10) == "a"
    assert await cache.get_or_set("b", b, 10) == "b"
    assert len(cache) == 2


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_fetch():
    cache = TTLCache()
    release = asyncio.Event()
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await release.wait()
        return ["BTC", "USDT"]

    waiters = [asyncio.ensure_future(cache.get_or_set("currencies", slow, 60)) for _ in range(5)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters)

    assert calls == 1
    assert all(r == ["BTC", "USDT"] for r in results)


@pytest.mark.asyncio
async def test_concurrent_failure_reaches_every_waiter():
    cache = TTLCache()
    release = asyncio.Event()
    calls = 0

    async def failing():
        nonlocal calls
        calls += 1
        await release.wait()
        raise RuntimeError("down")

    waiters = [asyncio.ensure_future(cache.get_or_set("k", failing, 60)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert calls == 1
    assert all(isinstance(r, RuntimeError) for r in results)
    assert "k" not in cache


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_fetch():
    cache = TTLCache()
    release = asyncio.Event()

    async def slow():
        await release.wait()
        return "value"

    first = asyncio.ensure_future(cache.get_or_set("k", slow, 60))
    second = asyncio.ensure_future(cache.get_or_set("k", slow, 60))
    await asyncio.sleep(0)
    first.cancel()
    release.set()

    assert await second == "value"
    with pytest.raises(asyncio.CancelledError):
        await first


@pytest.mark.asyncio
async def test_failure_after_all_waiters_cancelled_is_not_reported_unhandled():
    loop = asyncio.get_running_loop()
    reported = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        cache = TTLCache()
        release = asyncio.Event()

        async def failing():
            await release.wait()
            raise RuntimeError("down")

        waiter = asyncio.ensure_future(cache.get_or_set("k", failing, 60))
        await asyncio.sleep(0)
        fetch = cache._in_flight["k"]
        waiter.cancel()
        release.set()
        while not fetch.done():
            await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert not fetch.cancelled()
        del fetch, waiter
        gc.collect()

        assert reported == []
        assert "k" not in cache
    finally:
        loop.set_exception_handler(None)
