"""Tests for the autosave task."""

import asyncio
import time

import pytest

from handlers import AutosaveTask


class SlowGateway:
    """Gateway whose save blocks like a slow HTTP request."""

    def __init__(self, delay: float):
        self.delay = delay
        self.pages = {}
        self.save_calls = 0

    def save(self, page_id, components):
        self.save_calls += 1
        time.sleep(self.delay)
        self.pages[page_id] = components
        return True

    def load(self, page_id):
        return self.pages.get(page_id, [])


@pytest.mark.asyncio
async def test_tick_skips_clean_page(store, gateway):
    task = AutosaveTask(store, interval=1.0)

    assert await task.tick() is False
    assert gateway.save_calls == 0


@pytest.mark.asyncio
async def test_tick_saves_dirty_page(store, gateway):
    store.add({"type": "section"})
    task = AutosaveTask(store, interval=1.0)

    assert await task.tick() is True
    assert task.saves == 1
    assert store.is_dirty is False
    assert len(gateway.pages["page-1"]) == 1


@pytest.mark.unit
def test_invalid_interval(store):
    with pytest.raises(ValueError):
        AutosaveTask(store, interval=0)


@pytest.mark.asyncio
async def test_loop_saves_once_per_change(store, gateway):
    store.add({"type": "section"})
    task = AutosaveTask(store, interval=0.01)

    task.start()
    assert task.running is True
    await asyncio.sleep(0.1)
    await task.stop()

    assert task.running is False
    assert gateway.save_calls == 1
    assert store.is_dirty is False


@pytest.mark.asyncio
async def test_loop_retries_failed_saves(store, gateway):
    gateway.fail = True
    store.add({"type": "section"})
    task = AutosaveTask(store, interval=0.01)

    task.start()
    await asyncio.sleep(0.1)
    await task.stop()

    assert gateway.save_calls >= 2
    assert task.saves == 0
    assert store.is_dirty is True


@pytest.mark.asyncio
async def test_stop_without_start(store):
    task = AutosaveTask(store)
    await task.stop()
    assert task.running is False


@pytest.mark.asyncio
async def test_slow_save_keeps_loop_responsive(store):
    """Other coroutines keep running while a save is in flight."""
    gateway = SlowGateway(delay=0.3)
    store.gateway = gateway
    store.add({"type": "section"})
    task = AutosaveTask(store, interval=0.01)

    task.start()
    worst = 0.0
    for _ in range(20):
        started = time.perf_counter()
        await asyncio.sleep(0.01)
        worst = max(worst, time.perf_counter() - started)
    await task.stop()

    assert gateway.save_calls >= 1
    assert worst < 0.1


@pytest.mark.asyncio
async def test_edit_during_save_keeps_page_dirty(store):
    gateway = SlowGateway(delay=0.1)
    store.gateway = gateway
    store.add({"type": "section"})

    pending = asyncio.create_task(store.save_async())
    await asyncio.sleep(0.02)
    store.add({"type": "footer"})

    assert await pending is True
    assert store.is_dirty is True
    assert len(gateway.pages["page-1"]) == 1

    assert await store.save_async() is True
    assert store.is_dirty is False
    assert len(gateway.pages["page-1"]) == 2
