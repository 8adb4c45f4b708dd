import threading

from wakeadvisor.services.vessel_cache import VesselStateCache


class TestVesselStateCache:
    """Tests for monotonic enrichment of static data"""

    def test_lookup_unknown(self, cache):
        assert cache.lookup(367000001) is None
        assert 367000001 not in cache
        assert len(cache) == 0

    def test_first_update_creates_entry(self, cache):
        cache.update(367000001, type_code=70, name="MAERSK HUDSON")
        entry = cache.lookup(367000001)
        assert entry.id == 367000001
        assert entry.type_code == 70
        assert entry.name == "MAERSK HUDSON"
        assert 367000001 in cache

    def test_absent_name_does_not_erase(self, cache):
        cache.update(367000001, type_code=70, name="MAERSK HUDSON")
        cache.update(367000001, type_code=None, name=None)
        cache.update(367000001, name="")
        entry = cache.lookup(367000001)
        assert entry.name == "MAERSK HUDSON"
        assert entry.type_code == 70

    def test_fields_fill_in_separately(self, cache):
        cache.update(367000001, name="ATLANTIC")
        assert cache.lookup(367000001).type_code is None
        cache.update(367000001, type_code=82)
        entry = cache.lookup(367000001)
        assert entry.name == "ATLANTIC"
        assert entry.type_code == 82

    def test_present_value_replaces_present_value(self, cache):
        cache.update(367000001, type_code=70, name="OLD NAME")
        cache.update(367000001, type_code=80, name="NEW NAME")
        entry = cache.lookup(367000001)
        assert (entry.type_code, entry.name) == (80, "NEW NAME")

    def test_lookup_returns_copy(self, cache):
        cache.update(367000001, type_code=70)
        cache.lookup(367000001).type_code = 30
        assert cache.lookup(367000001).type_code == 70

    def test_instances_are_independent(self):
        first, second = VesselStateCache(), VesselStateCache()
        first.update(1, type_code=70)
        assert second.lookup(1) is None

    def test_concurrent_updates(self, cache):
        def writer(offset):
            for i in range(200):
                cache.update(i, type_code=70 + offset % 10, name=f"SHIP {i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 200
        assert all(cache.lookup(i).name == f"SHIP {i}" for i in range(200))
