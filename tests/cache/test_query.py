"""Tests for Query state transitions."""

import threading

from queryhydrate.cache.query import Query, QueryState, QueryStatus


def make_query(notify=None) -> Query:
    return Query(query_key="a", query_hash='"a"', cache_time=1000, notify=notify)


class TestQueryState:
    """Tests for the initial query state."""

    def test_new_query_has_no_data(self) -> None:
        """A new query should be idle with no data and updated_at of zero."""
        query = make_query()

        assert query.state == QueryState()
        assert query.state.has_data is False
        assert query.state.updated_at == 0
        assert query.state.status == QueryStatus.IDLE


class TestSetData:
    """Tests for Query.set_data."""

    def test_set_data_marks_success(self) -> None:
        """set_data should store the value, timestamp, and success status."""
        query = make_query()

        query.set_data({"id": 1}, updated_at=100)

        assert query.state.data == {"id": 1}
        assert query.state.has_data is True
        assert query.state.updated_at == 100
        assert query.state.status == QueryStatus.SUCCESS

    def test_set_data_none_is_present(self) -> None:
        """None is a real value and should count as data."""
        query = make_query()

        query.set_data(None, updated_at=5)

        assert query.state.has_data is True
        assert query.state.data is None

    def test_set_data_defaults_to_now(self) -> None:
        """Without updated_at, the current time should be used."""
        query = make_query()

        query.set_data("x")

        assert query.state.updated_at > 0

    def test_set_data_clears_error(self) -> None:
        """A successful set should clear a previous error."""
        query = make_query()
        query.set_error(RuntimeError("boom"))

        query.set_data("x", updated_at=1)

        assert query.state.error is None
        assert query.state.status == QueryStatus.SUCCESS


class TestOtherTransitions:
    """Tests for mark_updated, set_loading, and set_error."""

    def test_mark_updated_keeps_data_absent(self) -> None:
        """mark_updated should only change the timestamp."""
        query = make_query()

        query.mark_updated(42)

        assert query.state.updated_at == 42
        assert query.state.has_data is False
        assert query.state.status == QueryStatus.IDLE

    def test_set_loading(self) -> None:
        """set_loading should keep existing data."""
        query = make_query()
        query.set_data("x", updated_at=1)

        query.set_loading()

        assert query.state.status == QueryStatus.LOADING
        assert query.state.data == "x"

    def test_set_error_keeps_data(self) -> None:
        """set_error should keep the previous value."""
        query = make_query()
        query.set_data("x", updated_at=1)
        error = RuntimeError("boom")

        query.set_error(error)

        assert query.state.status == QueryStatus.ERROR
        assert query.state.error is error
        assert query.state.data == "x"

    def test_transitions_notify(self) -> None:
        """Every state change should call the notify callback."""
        seen = []
        query = make_query(notify=seen.append)

        query.set_loading()
        query.set_data("x", updated_at=1)
        query.mark_updated(2)

        assert seen == [query, query, query]


class TestConditionalWrites:
    """Tests for set_data_if_newer and mark_updated_if_newer."""

    def test_set_data_if_newer_applies_strictly_newer(self) -> None:
        """A strictly newer timestamp should replace the value."""
        query = make_query()
        query.set_data("old", updated_at=10)

        assert query.set_data_if_newer("new", 11) is True
        assert query.state.data == "new"
        assert query.state.updated_at == 11
        assert query.state.status == QueryStatus.SUCCESS

    def test_set_data_if_newer_rejects_equal_or_older(self) -> None:
        """Equal or older timestamps should leave the query unchanged."""
        seen = []
        query = make_query(notify=seen.append)
        query.set_data("local", updated_at=10)
        seen.clear()

        assert query.set_data_if_newer("remote", 10) is False
        assert query.set_data_if_newer("remote", 3) is False
        assert query.state.data == "local"
        assert seen == []

    def test_set_data_if_newer_fills_unset_query(self) -> None:
        """A query that was never written should accept a zero timestamp."""
        query = make_query()

        assert query.set_data_if_newer("x", 0) is True
        assert query.state.has_data is True
        assert query.state.data == "x"

    def test_mark_updated_if_newer(self) -> None:
        """The timestamp should only move forward."""
        query = make_query()

        assert query.mark_updated_if_newer(5) is True
        assert query.mark_updated_if_newer(5) is False
        assert query.mark_updated_if_newer(2) is False
        assert query.state.updated_at == 5
        assert query.state.has_data is False

    def test_concurrent_writers_keep_newest(self) -> None:
        """Racing conditional writes should leave the newest value in place."""
        query = make_query()
        timestamps = list(range(1, 201))
        barrier = threading.Barrier(4)

        def writer(offset: int) -> None:
            barrier.wait()
            for updated_at in timestamps[offset::4]:
                query.set_data_if_newer(f"v{updated_at}", updated_at)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert query.state.updated_at == 200
        assert query.state.data == "v200"
