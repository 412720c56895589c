"""Tests for the scheduler event bus."""

from hue_scheduler import Event, EventBus, EventFilter


def make_event(event_type="scene.activated", entity_id="abc"):
    return Event(type=event_type, source="scheduler", entity_id=entity_id)


class TestEventFilter:
    def test_empty_filter_matches_everything(self):
        assert EventFilter().matches(make_event())

    def test_type_filter(self):
        event_filter = EventFilter(event_type="group.turned_off")
        assert event_filter.matches(make_event("group.turned_off"))
        assert not event_filter.matches(make_event("scene.activated"))

    def test_entity_filter(self):
        event_filter = EventFilter(entity_id="abc")
        assert event_filter.matches(make_event(entity_id="abc"))
        assert not event_filter.matches(make_event(entity_id="xyz"))

    def test_domain_wildcard(self):
        event_filter = EventFilter(event_type="group.*")
        assert event_filter.matches(make_event("group.turned_off"))
        assert not event_filter.matches(make_event("scene.activated"))


class TestEventBus:
    def test_publish_to_matching_handlers(self):
        bus = EventBus()
        everything, scenes_only = [], []
        bus.subscribe(everything.append)
        bus.subscribe(scenes_only.append, EventFilter(event_type="scene.activated"))

        bus.publish(make_event("scene.activated"))
        bus.publish(make_event("group.turned_off"))

        assert len(everything) == 2
        assert [e.type for e in scenes_only] == ["scene.activated"]

    def test_publish_returns_delivery_count(self):
        bus = EventBus()
        bus.subscribe(lambda event: None)
        bus.subscribe(lambda event: None, EventFilter(event_type="cycle.aborted"))

        assert bus.publish(make_event("scene.activated")) == 1
        assert bus.publish(make_event("cycle.aborted", entity_id=None)) == 2
        assert len(bus) == 2

    def test_failing_handler_does_not_stop_others(self, caplog):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        bus.publish(make_event())

        assert bus.publish(make_event()) == 1
        assert len(received) == 2
        assert "Error in event handler broken" in caplog.text

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.unsubscribe(received.append)

        bus.publish(make_event())

        assert received == []
