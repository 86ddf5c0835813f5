"""
Tests for hash-order and recency-order cursors.
"""

import pytest

from lru_engine import Cache, CacheIterator, InvalidIterator, Pair, ReadOnlyIterator

# ============================================================================
# Walking the views
# ============================================================================


def test_ordered_walk_is_oldest_to_newest(abc_cache):
    """Test recency-order iteration yields oldest first."""
    abc_cache.insert("a", 10)
    pairs = [tuple(p) for p in abc_cache.ordered_begin()]
    assert pairs == [("b", 2), ("c", 3), ("a", 10)]


def test_unordered_walk_covers_all_entries(abc_cache):
    """Test hash-order iteration visits every entry exactly once."""
    seen = [p.key for p in abc_cache.begin()]
    assert sorted(seen) == ["a", "b", "c"]
    assert sorted(abc_cache) == ["a", "b", "c"]
    assert sorted(abc_cache.items()) == [("a", 1), ("b", 2), ("c", 3)]


def test_advance_reaches_end(abc_cache):
    """Test advancing a cursor step by step."""
    cursor = abc_cache.ordered_begin()
    keys = []
    while cursor != abc_cache.ordered_end():
        keys.append(cursor.key)
        cursor.advance()
    assert keys == ["a", "b", "c"]
    assert cursor.is_end


def test_iterating_cursor_does_not_move_it(abc_cache):
    """Test iterating over a cursor leaves its position unchanged."""
    cursor = abc_cache.ordered_begin()
    list(cursor)
    assert cursor.key == "a"


def test_unordered_advance_from_find(abc_cache):
    """Test a hash-order cursor from find() can continue walking."""
    order = abc_cache.keys()
    cursor = abc_cache.find(order[0])
    cursor.advance()
    assert cursor.key == order[1]


def test_empty_cache_begin_equals_end():
    """Test begin == end on an empty cache for both views."""
    c = Cache(3)
    assert c.begin() == c.end()
    assert c.ordered_begin() == c.ordered_end()
    assert list(c.ordered_begin()) == []


# ============================================================================
# Dereference and mutability
# ============================================================================


def test_value_write_through_mutable_cursor(abc_cache):
    """Test assigning a value through a cursor updates the cache."""
    cursor = abc_cache.find("b")
    cursor.value = 20
    assert abc_cache.lookup("b") == 20
    assert abc_cache.ordered_keys() == ["a", "b", "c"]


def test_value_write_through_pair(abc_cache):
    """Test assigning a value through a pair updates the cache."""
    pair = abc_cache.ordered_begin().pair
    pair.value = 100
    assert abc_cache["a"] == 100
    assert pair.first == "a"
    assert pair.second == 100


def test_readonly_cursor_rejects_writes(abc_cache):
    """Test read-only cursors and pairs refuse writes."""
    cursor = abc_cache.ordered_cbegin()
    with pytest.raises(ReadOnlyIterator):
        cursor.value = 1
    with pytest.raises(TypeError):
        cursor.pair.value = 1
    assert abc_cache["a"] == 1


def test_dereference_end_raises(abc_cache):
    """Test dereferencing an end cursor raises."""
    with pytest.raises(InvalidIterator):
        abc_cache.end().key
    with pytest.raises(InvalidIterator):
        abc_cache.ordered_end().value


def test_pair_compares_with_tuples(abc_cache):
    """Test pairs compare equal to matching 2-tuples."""
    pair = abc_cache.find("a").pair
    assert pair == ("a", 1)
    assert pair != ("a", 2)
    key, value = pair
    assert (key, value) == ("a", 1)
    assert isinstance(pair, Pair)


# ============================================================================
# Conversion and equality
# ============================================================================


def test_unordered_to_ordered_conversion(abc_cache):
    """Test converting a hash-order cursor continues in recency order."""
    ordered = abc_cache.find("b").to_ordered()
    assert ordered.is_ordered
    assert [p.key for p in ordered] == ["b", "c"]


def test_ordered_to_unordered_conversion(abc_cache):
    """Test converting back addresses the same entry."""
    ordered = abc_cache.ordered_begin()
    unordered = ordered.to_unordered()
    assert not unordered.is_ordered
    assert unordered == ordered
    assert unordered == abc_cache.find("a")


def test_to_readonly_keeps_position(abc_cache):
    """Test a read-only copy refers to the same entry."""
    cursor = abc_cache.find("c")
    const = cursor.to_readonly()
    assert const == cursor
    assert not const.is_mutable
    assert const.value == 3


def test_default_cursors_equal_any_end(abc_cache):
    """Test default-constructed cursors compare equal to end cursors."""
    assert CacheIterator() == CacheIterator()
    assert CacheIterator() == abc_cache.end()
    assert abc_cache.ordered_end() == CacheIterator()
    assert CacheIterator() != abc_cache.ordered_begin()


def test_end_cursors_of_different_caches_differ(abc_cache):
    """Test end cursors are tied to their owner."""
    other = Cache(1)
    assert abc_cache.end() != other.end()
    assert abc_cache.end() == abc_cache.ordered_cend()


# ============================================================================
# Invalidation
# ============================================================================


def test_cursor_expires_when_entry_erased(abc_cache):
    """Test cursors into erased entries report expiry and refuse access."""
    cursor = abc_cache.find("a")
    abc_cache.erase("a")
    assert cursor.is_expired
    assert not cursor.is_valid
    with pytest.raises(InvalidIterator):
        cursor.key


def test_cursor_expires_on_eviction():
    """Test cursors into evicted entries expire."""
    c = Cache(1, [("a", 1)])
    cursor = c.find("a")
    c.insert("b", 2)
    assert cursor.is_expired


def test_cursor_expires_on_clear_and_shrink(abc_cache):
    """Test clear() and shrink() expire outstanding cursors."""
    first = abc_cache.ordered_begin()
    abc_cache.shrink(2)
    assert first.is_expired

    last = abc_cache.find("c")
    abc_cache.clear()
    assert last.is_expired


def test_cursor_survives_value_replacement(abc_cache):
    """Test re-insertion keeps cursors to the same key valid."""
    cursor = abc_cache.find("a")
    abc_cache.insert("a", 42)
    assert cursor.is_valid
    assert cursor.value == 42
    assert cursor.to_ordered().advance().is_end


def test_unordered_walk_detects_structural_change(abc_cache):
    """Test an in-flight hash-order walk fails after the index changes."""
    cursor = abc_cache.begin()
    abc_cache.insert("d", 4)
    with pytest.raises(InvalidIterator):
        cursor.advance()


def test_erase_foreign_cursor_raises(abc_cache):
    """Test erasing through another cache's cursor raises."""
    other = Cache(5, [("a", 1)])
    with pytest.raises(InvalidIterator):
        abc_cache.erase(other.find("a"))
    assert "a" in abc_cache
    assert "a" in other
