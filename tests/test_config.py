"""Tests for the context-local configuration."""

import asyncio
import logging

import pytest

import pycollection as pc


def test_defaults() -> None:
    """Test the default configuration values."""
    config = pc.get_config()
    assert config.throw_on_number_limit is False
    assert config.max_repr_items == 20


def test_set_config_roundtrip() -> None:
    """Test set_config updates the active configuration."""
    try:
        pc.set_config(max_repr_items=5)
        assert pc.get_config().max_repr_items == 5
    finally:
        pc.set_config(max_repr_items=20)


def test_set_config_unknown_option() -> None:
    """Test set_config rejects unknown options."""
    with pytest.raises(TypeError, match="unknown_option"):
        pc.set_config(unknown_option=True)


def test_config_context_restores_on_error() -> None:
    """Test config_context restores previous values when the block raises."""
    with pytest.raises(KeyError), pc.config_context(throw_on_number_limit=True):
        assert pc.get_config().throw_on_number_limit is True
        raise KeyError
    assert pc.get_config().throw_on_number_limit is False


def test_config_change_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Test configuration changes are logged at debug level."""
    with caplog.at_level(logging.DEBUG, logger="pycollection"):
        with pc.config_context(max_repr_items=2):
            pass
    assert "max_repr_items" in caplog.text


@pytest.mark.asyncio
async def test_config_context_is_task_local() -> None:
    """Test concurrent tasks each see their own config_context values."""
    started = asyncio.Event()
    release = asyncio.Event()

    async def read_inside(size: int) -> int:
        with pc.config_context(max_repr_items=size):
            if size == 1:
                started.set()
                await release.wait()
            else:
                await started.wait()
                release.set()
            await asyncio.sleep(0)
            return pc.get_config().max_repr_items

    assert await asyncio.gather(read_inside(1), read_inside(2)) == [1, 2]
    assert pc.get_config().max_repr_items == 20


@pytest.mark.asyncio
async def test_set_config_in_task_does_not_leak() -> None:
    """Test set_config inside a task leaves the caller's context unchanged."""

    async def update() -> int:
        pc.set_config(max_repr_items=3)
        return pc.get_config().max_repr_items

    assert await asyncio.create_task(update()) == 3
    assert pc.get_config().max_repr_items == 20
