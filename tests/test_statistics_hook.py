"""
Tests for attaching statistics to a cache and for the Statistics object.
"""

import pytest

from lru_engine import Cache, LRUError, NotMonitoring, Statistics, StatisticsSnapshot

# ============================================================================
# Attaching / detaching
# ============================================================================


def test_statistics_without_monitor_raises():
    """Test statistics access without a hook raises NotMonitoring."""
    c = Cache(2)
    assert not c.is_monitoring
    with pytest.raises(NotMonitoring):
        c.statistics


def test_monitor_attaches_new_statistics():
    """Test monitor() with no argument creates a hook."""
    c = Cache(2)
    stats = c.monitor()
    assert c.is_monitoring
    assert c.statistics is stats
    c.stop_monitoring()
    assert not c.is_monitoring
    with pytest.raises(NotMonitoring):
        c.statistics


def test_monitor_shares_existing_statistics():
    """Test one Statistics object can aggregate several caches."""
    stats = Statistics()
    first, second = Cache(2), Cache(2)
    first.monitor(stats)
    second.monitor(stats)
    first.contains("x")
    second.contains("y")
    assert stats.misses == 2


# ============================================================================
# Event accounting
# ============================================================================


def test_miss_then_hit_scenario():
    """Scenario: miss on empty cache, then hit after insert."""
    c = Cache(2)
    stats = c.monitor(None, "x")

    c.contains("x")
    assert stats.misses_for("x") == 1
    assert stats.hits_for("x") == 0

    c.insert("x", 1)
    c.contains("x")
    assert stats.hits_for("x") == 1
    assert stats.misses_for("x") == 1


def test_slot_and_index_paths_each_register_once():
    """Test the fast path and the full probe both record exactly one hit."""
    c = Cache(3, [("a", 1), ("b", 2)])
    stats = c.monitor()
    c.lookup("a")  # index path
    c.lookup("a")  # slot path
    c.contains("a")  # slot path
    c.find("b")  # index path
    assert stats.hits == 4
    assert stats.misses == 0


def test_event_count_matches_call_count():
    """Test hits + misses equals the number of lookup-class calls."""
    c = Cache(3)
    stats = c.monitor()
    calls = 0
    for key in ["a", "b", "a", "c", "d", "a", "b"]:
        if c.contains(key):
            c.insert(key, 0)
            calls += 2
        else:
            c.insert(key, 0)
            calls += 1
        c.get(key)
        c.find(key)
        calls += 2
    with pytest.raises(KeyError):
        c.lookup("zzz")
    calls += 1
    assert stats.total_accesses == calls


def test_insert_of_new_key_records_nothing():
    """Test inserting an absent key is not a lookup event."""
    c = Cache(2)
    stats = c.monitor()
    c.insert("a", 1)
    assert stats.total_accesses == 0
    c.insert("a", 2)
    assert stats.hits == 1


def test_erase_and_iteration_record_nothing(abc_cache):
    """Test non-lookup operations leave the counters alone."""
    stats = abc_cache.monitor()
    abc_cache.erase("a")
    abc_cache.erase("zz")
    list(abc_cache.ordered_begin())
    abc_cache.shrink(1)
    assert stats.total_accesses == 0


def test_monitoring_does_not_change_behavior():
    """Test a monitored cache behaves exactly like an unmonitored one."""
    plain, watched = Cache(2), Cache(2)
    watched.monitor()
    for c in (plain, watched):
        c.insert("a", 1)
        c.insert("b", 2)
        c.lookup("a")
        c.insert("c", 3)
    assert plain == watched


# ============================================================================
# Statistics object
# ============================================================================


def test_statistics_rates():
    """Test hit and miss rates."""
    stats = Statistics()
    assert stats.hit_rate == 0.0
    assert stats.miss_rate == 0.0
    stats.register_hit("a")
    stats.register_hit("a")
    stats.register_miss("b")
    stats.register_hit("c")
    assert stats.hits == 3
    assert stats.misses == 1
    assert stats.hit_rate == 0.75
    assert stats.miss_rate == 0.25


def test_statistics_per_key_monitoring():
    """Test per-key counters only exist for monitored keys."""
    stats = Statistics(["a"])
    stats.register_hit("a")
    stats.register_miss("b")
    assert stats.is_monitoring("a")
    assert not stats.is_monitoring("b")
    assert stats["a"].accesses == 1
    with pytest.raises(LRUError):
        stats.hits_for("b")

    stats.monitor("b")
    stats.register_miss("b")
    assert stats.misses_for("b") == 1
    assert stats.number_of_monitored_keys == 2

    stats.unmonitor("a")
    assert stats.number_of_monitored_keys == 1
    stats.unmonitor_all()
    assert stats.number_of_monitored_keys == 0


def test_statistics_reset_keeps_monitored_keys():
    """Test reset() zeroes counters but keeps key monitoring."""
    stats = Statistics(["a"])
    stats.register_hit("a")
    stats.reset()
    assert stats.total_accesses == 0
    assert stats.is_monitoring("a")
    assert stats.hits_for("a") == 0


def test_statistics_snapshot():
    """Test snapshot() returns a validated pydantic model."""
    stats = Statistics(["a"])
    stats.register_hit("a")
    stats.register_miss("a")
    snap = stats.snapshot()
    assert isinstance(snap, StatisticsSnapshot)
    assert snap.total_accesses == 2
    assert snap.hit_rate == 0.5
    assert snap.keys[0].key == "'a'"
    assert snap.keys[0].hits == 1
    assert snap.model_dump()["misses"] == 1
