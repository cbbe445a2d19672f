"""Tests for RequestCache and CachedAction."""

from __future__ import annotations

import json
import logging

import pytest

from stepforge.core.canonical import canonical_json_bytes
from stepforge.core.hasher import fingerprint
from stepforge.core.request_cache import CacheCorruptionError, CachedAction, RequestCache
from stepforge.models.requests import ChatRequest, Message

REQUEST = {"model": "m", "messages": [{"role": "user", "content": "hello"}]}
RESPONSE = {"output": "hi there", "usage": {"tokens": 3}, "choices": [1, 2.5, "x", True]}


class TestLookupStore:
    def test_miss(self, cache: RequestCache):
        assert cache.lookup(REQUEST) is None

    def test_roundtrip(self, cache: RequestCache):
        cache.store(REQUEST, RESPONSE)
        assert cache.lookup(REQUEST) == RESPONSE

    def test_entry_path_is_request_fingerprint(self, cache: RequestCache):
        cache.store(REQUEST, RESPONSE)
        key = fingerprint(canonical_json_bytes(REQUEST))
        assert RequestCache.key_for(REQUEST) == key
        assert (cache.cache_dir / f"{key}.json").exists()

    def test_persisted_shape(self, cache: RequestCache):
        cache.store(REQUEST, RESPONSE)
        path = cache.path_for(RequestCache.key_for(REQUEST))
        assert json.loads(path.read_text()) == {"request": REQUEST, "response": RESPONSE}

    def test_insertion_order_does_not_matter(self, cache: RequestCache):
        cache.store(REQUEST, RESPONSE)
        reordered = {"messages": [{"content": "hello", "role": "user"}], "model": "m"}
        assert RequestCache.key_for(reordered) == RequestCache.key_for(REQUEST)
        assert cache.lookup(reordered) == RESPONSE

    def test_unset_optional_fields_share_entry(self, cache: RequestCache):
        bare = ChatRequest(model="m", messages=[Message(content="hello")])
        cache.store(bare, RESPONSE)
        explicit = ChatRequest(
            model="m", messages=[Message(content="hello")], temperature=None
        )
        assert cache.lookup(explicit) == RESPONSE
        assert cache.lookup(REQUEST) == RESPONSE

    def test_null_fields_in_response_survive(self, cache: RequestCache):
        response = {"output": "x", "refusal": None, "choices": [{"logprobs": None}]}
        cache.store(REQUEST, response)
        assert cache.lookup(REQUEST) == response
        assert cache.lookup(REQUEST)["refusal"] is None

    def test_tuples_in_response_become_lists(self, cache: RequestCache):
        cache.store(REQUEST, {"pair": (1, 2)})
        assert cache.lookup(REQUEST) == {"pair": [1, 2]}

    def test_null_valued_response_key_counts_as_different(self, cache: RequestCache, caplog):
        cache.store(REQUEST, {"output": "x", "refusal": None})
        with caplog.at_level(logging.WARNING, logger="stepforge.core.request_cache"):
            cache.store(REQUEST, {"output": "x"})
        assert "different response" in caplog.text
        assert "refusal" in cache.lookup(REQUEST)

    def test_different_request_misses(self, cache: RequestCache):
        cache.store(REQUEST, RESPONSE)
        other = {**REQUEST, "temperature": 0.5}
        assert cache.lookup(other) is None

    def test_store_never_overwrites(self, cache: RequestCache, caplog):
        cache.store(REQUEST, RESPONSE)
        with caplog.at_level(logging.WARNING, logger="stepforge.core.request_cache"):
            kept = cache.store(REQUEST, {"output": "something else"})
        assert kept.response == RESPONSE
        assert cache.lookup(REQUEST) == RESPONSE
        assert "different response" in caplog.text

    def test_identical_restore_is_quiet(self, cache: RequestCache, caplog):
        cache.store(REQUEST, RESPONSE)
        with caplog.at_level(logging.WARNING):
            cache.store(REQUEST, RESPONSE)
        assert caplog.records == []

    def test_unreadable_entry(self, cache: RequestCache):
        path = cache.path_for(RequestCache.key_for(REQUEST))
        path.parent.mkdir(parents=True)
        path.write_text("{")
        with pytest.raises(CacheCorruptionError):
            cache.lookup(REQUEST)

    def test_entry_missing_fields(self, cache: RequestCache):
        path = cache.path_for(RequestCache.key_for(REQUEST))
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"request": REQUEST}))
        with pytest.raises(CacheCorruptionError):
            cache.lookup(REQUEST)

    def test_path_for_rejects_non_fingerprints(self, cache: RequestCache):
        with pytest.raises(ValueError):
            cache.path_for("../../etc/passwd")


class TestFetch:
    def test_miss_then_hit(self, cache: RequestCache, backend):
        first, from_cache = cache.fetch(REQUEST, backend)
        assert from_cache is False
        second, from_cache = cache.fetch(REQUEST, backend)
        assert from_cache is True
        assert first == second
        assert len(backend.requests) == 1

    def test_backend_sees_canonical_request(self, cache: RequestCache, backend):
        cache.fetch(ChatRequest(model="m", messages=[Message(content="hello")]), backend)
        assert backend.requests == [REQUEST]

    def test_backend_failure_caches_nothing(self, cache: RequestCache, doubles):
        def boom(request):
            raise RuntimeError("down")

        with pytest.raises(RuntimeError):
            cache.fetch(REQUEST, doubles.RecordingAction(boom))
        assert cache.lookup(REQUEST) is None


class TestCachedAction:
    def test_counts_hits_and_misses(self, cache: RequestCache, backend):
        action = CachedAction(backend, cache)
        action.issue(REQUEST)
        action.issue(REQUEST)
        action.issue({**REQUEST, "model": "other"})
        assert (action.misses, action.hits) == (2, 1)
        assert len(backend.requests) == 2

    def test_satisfies_external_action(self, cache: RequestCache, backend):
        from stepforge.core.external import ExternalAction

        assert isinstance(CachedAction(backend, cache), ExternalAction)
