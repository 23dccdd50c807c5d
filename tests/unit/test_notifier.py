"""Unit tests for change notification."""

import logging

import pytest

from depictions.core.notifier import ObserverRegistry
from depictions.core.routing import collection_address, item_address


@pytest.fixture
def registry() -> ObserverRegistry:
    return ObserverRegistry()


class TestObserverRegistry:
    """Tests for fan-out of change notifications."""

    def test_exact_address(self, registry: ObserverRegistry) -> None:
        """Test that an observer hears changes to its own address."""
        seen: list[str] = []
        registry.register(item_address(1), seen.append)

        registry.notify(item_address(1))

        assert seen == [item_address(1)]

    def test_other_item_not_notified(self, registry: ObserverRegistry) -> None:
        seen: list[str] = []
        registry.register(item_address(1), seen.append)

        registry.notify(item_address(2))

        assert seen == []

    def test_collection_change_reaches_item_observers(self, registry: ObserverRegistry) -> None:
        """Test that a change to the collection reaches observers of its rows."""
        seen: list[str] = []
        registry.register(item_address(5), seen.append)

        registry.notify(collection_address())

        assert seen == [collection_address()]

    def test_item_change_needs_descendant_flag(self, registry: ObserverRegistry) -> None:
        """Test that collection observers hear row changes only when asked to."""
        plain: list[str] = []
        descendants: list[str] = []
        registry.register(collection_address(), plain.append)
        registry.register(collection_address(), descendants.append, notify_for_descendants=True)

        registry.notify(item_address(3))

        assert plain == []
        assert descendants == [item_address(3)]

    def test_prefix_is_not_descendant(self, registry: ObserverRegistry) -> None:
        """Test that an address sharing a prefix is not treated as a child."""
        seen: list[str] = []
        registry.register(item_address(1), seen.append, notify_for_descendants=True)

        registry.notify(item_address(12))

        assert seen == []

    def test_unregister(self, registry: ObserverRegistry) -> None:
        seen: list[str] = []
        unregister = registry.register(collection_address(), seen.append)

        unregister()
        unregister()
        registry.notify(collection_address())

        assert seen == []
        assert len(registry) == 0

    def test_failing_observer_is_isolated(
        self, registry: ObserverRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a failing observer neither raises nor stops the others."""
        seen: list[str] = []

        def broken(address: str) -> None:
            raise RuntimeError("observer exploded")

        registry.register(collection_address(), broken)
        registry.register(collection_address(), seen.append)

        with caplog.at_level(logging.ERROR, logger="depictions.core.notifier"):
            registry.notify(collection_address())

        assert seen == [collection_address()]
        assert "observer exploded" in caplog.text

    def test_trailing_slash_is_same_address(self, registry: ObserverRegistry) -> None:
        """Test that a change on ``.../depictions/`` reaches observers of ``.../depictions``."""
        seen: list[str] = []
        item_seen: list[str] = []
        registry.register(collection_address(), seen.append)
        registry.register(item_address(2) + "/", item_seen.append)

        registry.notify(collection_address() + "/")
        registry.notify(item_address(2))

        assert seen == [collection_address() + "/"]
        assert item_seen == [collection_address() + "/", item_address(2)]
