"""Tests for the search cache."""

from json_table_explorer.search import SearchCache, search_text


def test_search_text_is_lowercased_compact_json():
    assert search_text({"Name": "Zoë", "n": [1, 2]}) == '{"name":"zoë","n":[1,2]}'


def test_cache_matches_substrings_case_insensitively():
    dataset = [{"name": "Alice"}, {"name": "Bob"}]
    cache = SearchCache.build(dataset)
    assert len(cache) == 2
    assert cache.matches(0, "ALI")
    assert not cache.matches(1, "ali")


def test_empty_query_matches_everything():
    cache = SearchCache.build([{"a": 1}])
    assert cache.matches(0, "")


def test_search_also_hits_keys():
    cache = SearchCache.build([{"city": "Paris"}])
    assert cache.matches(0, "city")


def test_cache_belongs_to_one_dataset():
    dataset = [{"a": 1}]
    cache = SearchCache.build(dataset)
    assert cache.covers(dataset)
    assert not cache.covers([{"a": 1}])
