"""Tests for the tile refresh loop."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from homeboard.widgets.base import Error, Loading, NormalizedField, Ready, parse_widget_spec
from homeboard.widgets.poller import TilePoller
from homeboard.widgets.proxy import HttpTransport


def caddy_spec(**extra):
    return parse_widget_spec({"type": "caddy", "url": "http://c", **extra})


class TestTilePollerTiming:
    """Tests for interval and backoff."""

    def test_placeholder_before_first_result(self) -> None:
        """A new poller shows placeholders."""
        poller = TilePoller(caddy_spec(fields=["requests"]))
        assert isinstance(poller.result, Loading)
        assert [f.label for f in poller.result.fields] == ["caddy.requests"]

    def test_interval_precedence(self) -> None:
        """Spec interval beats kind interval beats the default."""
        assert TilePoller(caddy_spec(refresh_interval=30)).interval() == 30.0
        assert TilePoller(parse_widget_spec({"type": "tracearr"})).interval() == 5.0
        assert TilePoller(caddy_spec(), default_interval=12).interval() == 12

    def test_backoff(self) -> None:
        """Consecutive failures double the delay up to the cap."""
        poller = TilePoller(caddy_spec(), default_interval=10, max_backoff=300)
        assert poller.delay(0) == 10
        assert poller.delay(1) == 20
        assert poller.delay(2) == 40
        assert poller.delay(10) == 300

    def test_backoff_never_below_interval(self) -> None:
        """A long interval is not shortened by the cap."""
        poller = TilePoller(caddy_spec(refresh_interval=600), max_backoff=300)
        assert poller.delay(3) == 600


class TestTilePollerLoop:
    """Tests for the running loop."""

    @pytest.mark.asyncio
    async def test_publishes_results(self) -> None:
        """Results reach the callback and replace the placeholder."""
        ready = Ready((NormalizedField("caddy.requests", 1),))
        published = asyncio.Event()
        seen = []

        def on_result(result):
            seen.append(result)
            published.set()

        with patch("homeboard.widgets.poller.refresh_widget", AsyncMock(return_value=ready)):
            poller = TilePoller(caddy_spec(refresh_interval=60), on_result=on_result)
            poller.start()
            await asyncio.wait_for(published.wait(), timeout=1)
            await poller.stop()

        assert seen == [ready]
        assert poller.result == ready
        assert not poller.running

    @pytest.mark.asyncio
    async def test_refresh_exception_becomes_error(self) -> None:
        """An exception in refresh is published as an error."""
        published = asyncio.Event()
        with patch("homeboard.widgets.poller.refresh_widget", AsyncMock(side_effect=RuntimeError("boom"))):
            poller = TilePoller(caddy_spec(refresh_interval=60), on_result=lambda r: published.set())
            poller.start()
            await asyncio.wait_for(published.wait(), timeout=1)
            await poller.stop()

        assert poller.result == Error("boom")

    @pytest.mark.asyncio
    async def test_update_spec_restarts(self) -> None:
        """A new spec resets placeholders and refreshes with the new spec."""
        ready = Ready((NormalizedField("caddy.upstreams", 2),))
        refresh = AsyncMock(return_value=ready)
        published = asyncio.Event()

        with patch("homeboard.widgets.poller.refresh_widget", refresh):
            poller = TilePoller(caddy_spec(refresh_interval=60), on_result=lambda r: published.set())
            poller.start()
            await asyncio.wait_for(published.wait(), timeout=1)

            published.clear()
            new_spec = caddy_spec(refresh_interval=60, fields=["upstreams"])
            poller.update_spec(new_spec)
            assert [f.label for f in poller.result.fields] == ["caddy.upstreams"]
            assert poller.running

            await asyncio.wait_for(published.wait(), timeout=1)
            await poller.stop()

        assert poller.spec == new_spec
        assert refresh.await_args_list[-1].args[0] == new_spec

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        """Stopping an idle poller is a no-op."""
        poller = TilePoller(caddy_spec())
        await poller.stop()
        assert not poller.running


def gated_refresh(slow_spec, slow_result, fast_result):
    """A refresh whose call for ``slow_spec`` completes only after ``release``.

    The slow call finishes even when its task is cancelled, like an upstream
    request that is already on the wire.
    """
    started = asyncio.Event()
    release = asyncio.Event()

    async def refresh(spec, transport):
        if spec != slow_spec:
            return fast_result
        started.set()
        try:
            await release.wait()
        except asyncio.CancelledError:
            await release.wait()
        return slow_result

    return refresh, started, release


class TestTilePollerSuperseded:
    """Results of superseded requests are never published."""

    @pytest.mark.asyncio
    async def test_update_spec_discards_in_flight_result(self) -> None:
        """A request started before update_spec cannot overwrite the new tile."""
        old_spec = caddy_spec(refresh_interval=60)
        new_spec = caddy_spec(refresh_interval=60, fields=["upstreams"])
        stale = Ready((NormalizedField("caddy.requests", 1),))
        fresh = Ready((NormalizedField("caddy.upstreams", 2),))
        refresh, started, release = gated_refresh(old_spec, stale, fresh)
        seen = []
        published = asyncio.Event()

        def on_result(result):
            seen.append(result)
            published.set()

        with patch("homeboard.widgets.poller.refresh_widget", refresh):
            poller = TilePoller(old_spec, on_result=on_result)
            poller.start()
            await asyncio.wait_for(started.wait(), timeout=1)
            old_task = poller._task

            poller.update_spec(new_spec)
            await asyncio.wait_for(published.wait(), timeout=1)
            release.set()
            await asyncio.wait_for(old_task, timeout=1)
            await poller.stop()

        assert seen == [fresh]
        assert poller.result == fresh

    @pytest.mark.asyncio
    async def test_stop_discards_in_flight_result(self) -> None:
        """A request still running at stop() is not published."""
        spec = caddy_spec(refresh_interval=60)
        stale = Ready((NormalizedField("caddy.requests", 1),))
        refresh, started, release = gated_refresh(spec, stale, stale)
        seen = []

        with patch("homeboard.widgets.poller.refresh_widget", refresh):
            poller = TilePoller(spec, on_result=seen.append)
            poller.start()
            await asyncio.wait_for(started.wait(), timeout=1)

            stopping = asyncio.create_task(poller.stop())
            await asyncio.sleep(0)
            release.set()
            await asyncio.wait_for(stopping, timeout=1)

        assert seen == []
        assert isinstance(poller.result, Loading)
        assert not poller.running


class TestTilePollerTransport:
    """Tests for transport reuse."""

    @pytest.mark.asyncio
    async def test_default_transport_reused(self) -> None:
        """Every refresh of a tile goes through the same transport."""
        refresh = AsyncMock(return_value=Ready(()))
        calls = asyncio.Event()

        def on_result(result):
            if refresh.await_count >= 2:
                calls.set()

        with patch("homeboard.widgets.poller.refresh_widget", refresh):
            poller = TilePoller(caddy_spec(refresh_interval=0.01), on_result=on_result)
            poller.start()
            await asyncio.wait_for(calls.wait(), timeout=1)
            await poller.stop()

        transports = {id(call.args[1]) for call in refresh.await_args_list}
        assert len(transports) == 1
        assert isinstance(refresh.await_args_list[0].args[1], HttpTransport)
