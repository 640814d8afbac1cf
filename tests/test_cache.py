"""Tests for the TTL cache."""

import threading

import pytest

from skybrief.cache import Cache


class TestCacheTtl:
    """Lazy expiry against an injected clock."""

    def test_hit_before_ttl(self, clock):
        cache = Cache(ttl_seconds=300, clock=clock)
        cache.put("metar_KJFK", "payload")

        clock.advance(299.9)
        assert cache.get("metar_KJFK") == "payload"

    def test_absent_at_ttl(self, clock):
        cache = Cache(ttl_seconds=300, clock=clock)
        cache.put("metar_KJFK", "payload")

        clock.advance(300)
        assert cache.get("metar_KJFK") is None

    def test_expired_entry_not_evicted(self, clock):
        cache = Cache(ttl_seconds=300, clock=clock)
        cache.put("metar_KJFK", "payload")
        clock.advance(600)

        assert cache.get("metar_KJFK") is None
        assert len(cache) == 1
        assert cache.stats()['fingerprints'] == ["metar_KJFK"]

    def test_put_refreshes_entry(self, clock):
        cache = Cache(ttl_seconds=300, clock=clock)
        cache.put("metar_KJFK", "old")
        clock.advance(400)
        cache.put("metar_KJFK", "new")
        clock.advance(100)

        assert cache.get("metar_KJFK") == "new"

    def test_missing(self):
        assert Cache().get("taf_EGLL") is None

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            Cache(ttl_seconds=0)


class TestCacheMaintenance:

    def test_fingerprint(self):
        assert Cache.fingerprint("metar", "kjfk") == "metar_KJFK"
        assert Cache.fingerprint("airport", " egll ") == "airport_EGLL"

    def test_stats(self):
        cache = Cache()
        cache.put("taf_KJFK", 1)
        cache.put("metar_KJFK", 2)

        assert cache.stats() == {'count': 2, 'fingerprints': ["metar_KJFK", "taf_KJFK"]}

    def test_clear(self):
        cache = Cache()
        cache.put("metar_KJFK", 1)
        cache.put("metar_KLAX", 2)

        assert cache.clear() == 2
        assert len(cache) == 0
        assert cache.get("metar_KJFK") is None

    def test_concurrent_puts(self):
        cache = Cache()

        def writer(prefix):
            for i in range(200):
                cache.put(f"{prefix}_{i:04d}", i)

        threads = [threading.Thread(target=writer, args=(f"k{n}",)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 1600
