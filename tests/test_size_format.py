from pintable.services.event_bus import EventBus, TableEvent
from pintable.services.size_format import SizeFormatter


def test_numbers_scaled_strings_passed_through():
    fmt = SizeFormatter(scale=1.0, multiplier=2)
    assert fmt(50) == 100.0
    assert fmt("30%") == "30%"
    assert fmt(None) is None


def test_follows_dpi_changes():
    bus = EventBus()
    fmt = SizeFormatter(scale=1.0, multiplier=2)
    fmt.follow(bus)
    bus.publish(TableEvent.DPI_SCALE_CHANGED, {"scale": 1.5})
    assert fmt(10) == 30.0


def test_scale_listeners_see_new_scale():
    fmt = SizeFormatter(scale=1.0, multiplier=1)
    seen = []
    fmt.on_scale_changed(lambda scale: seen.append((scale, fmt(10))))
    fmt.scale = 2
    fmt.scale = 2.0
    assert seen == [(2.0, 20.0)]


def test_listeners_registered_before_follow_still_see_new_scale():
    bus = EventBus()
    fmt = SizeFormatter(scale=1.0, multiplier=1)
    seen = []
    fmt.on_scale_changed(lambda _scale: seen.append(fmt(10)))
    bus.subscribe(TableEvent.DPI_SCALE_CHANGED, lambda _evt: seen.append(fmt(10)))
    fmt.follow(bus)
    bus.publish(TableEvent.DPI_SCALE_CHANGED, {"scale": 3.0})
    # the plain bus subscriber ran first and still saw the old scale
    assert seen == [10.0, 30.0]
