"""Tests for the registry-query coordinator."""

import pytest

from peppermint.filters.registry import RegistryCoordinator
from peppermint.renderers import NotificationOptions


class BrokenRegistry:
    def get_notifications(self, tag=None):
        raise RuntimeError("registry unavailable")


@pytest.fixture
def coordinator(renderer, clock):
    return RegistryCoordinator(renderer, window_seconds=1.0, clock=clock)


def test_refuses_when_tag_is_displayed(coordinator, renderer):
    renderer.show("Peppermint Tracker", NotificationOptions(body="hi", tag="peppermint-abc"))
    assert coordinator.try_claim("abc", 10.0) is False


def test_claims_when_nothing_displayed(coordinator):
    assert coordinator.try_claim("abc", 10.0) is True


def test_pending_claim_blocks_until_window_passes(coordinator):
    assert coordinator.try_claim("abc", 10.0)
    assert not coordinator.try_claim("abc", 10.5)
    assert coordinator.try_claim("abc", 11.5)


def test_closed_notification_can_be_shown_again(coordinator, renderer):
    renderer.show("t", NotificationOptions(body="b", tag="peppermint-abc"))
    assert not coordinator.try_claim("abc", 10.0)
    renderer.close("peppermint-abc")
    assert coordinator.try_claim("abc", 10.0)


def test_registry_failure_falls_back_to_pending_claims(clock):
    coordinator = RegistryCoordinator(BrokenRegistry(), clock=clock)
    assert coordinator.try_claim("abc", 10.0)
    assert not coordinator.try_claim("abc", 10.2)


def test_expire(coordinator):
    coordinator.try_claim("abc", 10.0)
    coordinator.expire(12.0)
    assert len(coordinator) == 0
