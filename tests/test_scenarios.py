"""End-to-end delivery across the surfaces of one device."""

import pytest

from peppermint.core.dispatcher import Device, PushDispatcher, build_coordinator
from peppermint.core.event import DeliveryOutcome
from peppermint.core.fingerprint import fingerprint
from peppermint.errors import ConfigError
from peppermint.renderers import LogRenderer

DEFAULT_PAYLOAD = {"data": {"title": "Peppermint Tracker", "body": "New update!"}}

RENDERED = DeliveryOutcome.RENDERED
SUPPRESSED = DeliveryOutcome.SUPPRESSED


@pytest.fixture(params=["broadcast", "registry"])
def device(request, config, renderer, clock):
    config.coordination.strategy = request.param
    device = Device(config, renderer, clock=clock)
    yield device
    device.close()


def renders(outcomes):
    return sum(1 for o in outcomes.values() if o is RENDERED)


@pytest.mark.parametrize("order", [("tab", "worker"), ("worker", "tab")])
def test_hidden_page_and_worker_render_once(device, renderer, order):
    for name in order:
        if name == "worker":
            device.add_worker("worker")
        else:
            device.add_page("tab", visible=False, focused=False)

    outcomes = device.deliver(DEFAULT_PAYLOAD)

    assert outcomes == {"tab": SUPPRESSED, "worker": RENDERED}
    (shown,) = renderer.history
    assert shown.tag == "peppermint-" + fingerprint("Peppermint TrackerNew update!", "")


def test_platform_notification_payload_renders_nothing(device, renderer):
    device.add_worker("worker")
    device.add_page("tab", visible=True, focused=True)

    outcomes = device.deliver({"notification": {"title": "t", "body": "b"}})

    assert renders(outcomes) == 0
    assert renderer.history == []


def test_identical_events_two_seconds_apart_both_render(config, renderer, clock):
    device = Device(config, renderer, clock=clock)
    device.add_worker("worker")
    device.add_page("tab", visible=False, focused=False)

    first = device.deliver(DEFAULT_PAYLOAD)
    clock.advance(2.0)
    second = device.deliver(DEFAULT_PAYLOAD)

    assert renders(first) == 1
    assert renders(second) == 1
    assert len(renderer.history) == 2
    # Same tag: the platform replaces the first one.
    assert len(renderer.get_notifications()) == 1
    device.close()


def test_worker_only_renders_once(device, renderer):
    device.add_worker("worker")
    outcomes = device.deliver(DEFAULT_PAYLOAD)
    assert outcomes == {"worker": RENDERED}
    assert len(renderer.history) == 1


@pytest.mark.parametrize("order", [("tab", "worker"), ("worker", "tab")])
def test_focused_page_and_worker_render_once(device, renderer, order):
    for name in order:
        if name == "worker":
            device.add_worker("worker")
        else:
            device.add_page("tab", visible=True, focused=True)

    outcomes = device.deliver(DEFAULT_PAYLOAD)

    assert outcomes == {"tab": RENDERED, "worker": SUPPRESSED}
    assert renderer.history[0].surface == "tab"


def test_two_visible_focused_tabs_render_once(device, renderer):
    device.add_page("tab-1", visible=True, focused=True)
    device.add_page("tab-2", visible=True, focused=True)
    device.add_worker("worker")

    assert renders(device.deliver(DEFAULT_PAYLOAD)) == 1


def test_subset_delivery(device, renderer):
    device.add_worker("worker")
    device.add_page("tab", visible=True, focused=True)

    outcomes = device.deliver(DEFAULT_PAYLOAD, only=["worker"])

    assert outcomes == {"worker": RENDERED}


def test_closed_page_stops_receiving(device):
    page = device.add_page("tab", visible=True, focused=True)
    device.add_worker("worker")
    device.remove(page)

    assert device.deliver(DEFAULT_PAYLOAD) == {"worker": RENDERED}


def test_different_content_renders_separately(device, renderer):
    device.add_worker("worker")
    device.deliver({"data": {"title": "Alice sent a message", "body": "hi"}})
    device.deliver({"data": {"title": "Bob sent a message", "body": "hi"}})
    assert len(renderer.history) == 2


def test_dispatcher_stats(config, renderer, clock):
    device = Device(config, renderer, clock=clock)
    device.add_worker("worker")
    device.deliver(DEFAULT_PAYLOAD)
    device.deliver(DEFAULT_PAYLOAD)
    assert device.dispatcher.stats == {"dispatched": 2, "rendered": 1}
    device.close()


def test_empty_dispatcher():
    assert PushDispatcher().dispatch(DEFAULT_PAYLOAD) == {}


def test_registry_strategy_needs_queryable_renderer(registry_config):
    with pytest.raises(ConfigError):
        build_coordinator(registry_config, LogRenderer(echo=False))


def test_worker_defers_to_focused_page_among_many(device, renderer):
    device.add_worker("worker")
    device.add_page("background-tab", visible=False, focused=False)
    device.add_page("active-tab", visible=True, focused=True)

    outcomes = device.deliver(DEFAULT_PAYLOAD)

    assert outcomes == {
        "worker": SUPPRESSED,
        "background-tab": SUPPRESSED,
        "active-tab": RENDERED,
    }
    assert [n.surface for n in renderer.history] == ["active-tab"]


def test_visible_unfocused_page_leaves_rendering_to_worker(device, renderer):
    device.add_worker("worker")
    device.add_page("tab", visible=True, focused=False)

    assert device.deliver(DEFAULT_PAYLOAD) == {"worker": RENDERED, "tab": SUPPRESSED}


def test_worker_renders_after_page_loses_focus(device, renderer):
    device.add_worker("worker")
    page = device.add_page("tab", visible=True, focused=True)

    device.deliver({"data": {"title": "first", "body": "x"}})
    page.set_focus(False)
    outcomes = device.deliver({"data": {"title": "second", "body": "x"}})

    assert outcomes == {"worker": RENDERED, "tab": SUPPRESSED}
    assert [n.surface for n in renderer.history] == ["tab", "worker"]


def test_delivery_time_comes_from_device_clock(config, renderer, clock):
    device = Device(config, renderer, clock=clock)
    device.add_page("tab", visible=True, focused=True)
    device.add_worker("worker")

    assert device.deliver(DEFAULT_PAYLOAD) == {"tab": RENDERED, "worker": SUPPRESSED}

    clock.advance(5.0)
    assert device.deliver(DEFAULT_PAYLOAD, only=["worker"]) == {"worker": RENDERED}
    assert len(renderer.history) == 2
    device.close()


def test_repeat_inside_window_on_device_clock(config, renderer, clock):
    device = Device(config, renderer, clock=clock)
    device.add_page("tab", visible=True, focused=True)
    device.add_worker("worker")

    device.deliver(DEFAULT_PAYLOAD)
    clock.advance(0.5)

    assert device.deliver(DEFAULT_PAYLOAD, only=["worker"]) == {"worker": SUPPRESSED}
    device.close()


def test_click_closes_notification_and_opens_link(config, renderer, clock):
    opened = []
    device = Device(config, renderer, clock=clock, open_window=opened.append)
    device.add_worker("worker")

    device.deliver({"data": {"title": "Alice sent a message", "body": "hi", "link": "/chat"}})
    (shown,) = renderer.get_notifications()

    assert device.click(shown.tag) == "/chat"
    assert opened == ["/chat"]
    assert renderer.get_notifications() == []
    device.close()


def test_click_without_link_opens_root(config, renderer, clock):
    opened = []
    device = Device(config, renderer, clock=clock, open_window=opened.append)
    device.add_worker("worker")

    device.deliver(DEFAULT_PAYLOAD)
    (shown,) = renderer.get_notifications()

    assert device.click(shown.tag) == "/"
    assert opened == ["/"]
    assert len(renderer) == 0
    device.close()


def test_click_without_worker(config, renderer, clock):
    device = Device(config, renderer, clock=clock)
    device.add_page("tab", visible=True, focused=True)
    assert device.click("peppermint-abc") is None
    device.close()
