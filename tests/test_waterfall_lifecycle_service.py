import pytest

from dreamjournal.widgets import waterfall_lifecycle_service as lifecycle_module
from dreamjournal.widgets.waterfall_estimator import EstimatorConfig
from dreamjournal.widgets.waterfall_lifecycle_service import (LayoutPhase,
                                                              WaterfallLifecycleService)

# Every item estimates to exactly 100px.
FLAT_CONFIG = EstimatorConfig(base_height=100, image_height=0, line_height=0,
                              tag_row_height=0, min_height=0)


class FakeTimer:
    def __init__(self):
        self.scheduled = []

    def singleShot(self, delay, callback):
        self.scheduled.append((delay, callback))

    def fire_all(self):
        scheduled, self.scheduled = self.scheduled, []
        for _, callback in scheduled:
            callback()


class FakeMeasurementSource:
    def __init__(self, heights=None):
        self.heights = heights or {}

    def measure(self, key):
        return self.heights.get(key)


class FakeView:
    def __init__(self, width=400):
        self.width = width
        self.source = FakeMeasurementSource()
        self.applied = []

    def container_width(self):
        return self.width

    def correction_delay_ms(self):
        return 100

    def measurement_source(self):
        return self.source

    def _apply_waterfall_pass(self, items, result):
        self.applied.append((items, result))


@pytest.fixture
def timer(monkeypatch):
    fake_timer = FakeTimer()
    monkeypatch.setattr(lifecycle_module, "QTimer", fake_timer)
    return fake_timer


def make_service(view, columns=2, gap=10):
    service = WaterfallLifecycleService(view, FLAT_CONFIG)
    service.columns = columns
    service.gap = gap
    return service


def test_new_items_run_estimated_pass_and_schedule_correction(timer):
    view = FakeView()
    service = make_service(view)
    items = [{"id": n} for n in range(4)]

    assert service.set_inputs(items=items) is True

    assert len(view.applied) == 1
    _, result = view.applied[0]
    assert result.measured is False
    assert [p.top for p in result.positions] == [0, 0, 110, 110]
    assert result.container_height == 210
    assert service.phase == LayoutPhase.AWAITING_PAINT
    assert [delay for delay, _ in timer.scheduled] == [100]


def test_correction_repacks_with_measured_heights_then_goes_idle(timer):
    view = FakeView()
    view.source = FakeMeasurementSource({2: 250})
    service = make_service(view)
    service.set_inputs(items=[{"id": n} for n in range(4)])

    timer.fire_all()

    assert len(view.applied) == 2
    _, result = view.applied[-1]
    assert result.measured is True
    assert result.positions[2].height == 250
    assert result.container_height == 360
    assert service.phase == LayoutPhase.IDLE


def test_same_inputs_do_not_retrigger(timer):
    view = FakeView()
    service = make_service(view)
    items = [{"id": 1}]
    service.set_inputs(items=items, columns=2, gap=10)
    view.applied.clear()

    assert service.set_inputs(items=items, columns=2, gap=10) is False
    assert view.applied == []


def test_equal_but_new_item_list_retriggers(timer):
    view = FakeView()
    service = make_service(view)
    service.set_inputs(items=[{"id": 1}])

    assert service.set_inputs(items=[{"id": 1}]) is True
    assert len(view.applied) == 2


def test_superseding_trigger_drops_pending_correction(timer):
    view = FakeView()
    service = make_service(view)
    service.set_inputs(items=[{"id": n} for n in range(3)])
    service.set_inputs(columns=3)

    assert len(timer.scheduled) == 2
    view.applied.clear()
    timer.fire_all()

    # Only the newest generation re-packs.
    assert len(view.applied) == 1
    _, result = view.applied[0]
    assert result.measured is True
    assert [p.column for p in result.positions] == [0, 1, 2]


def test_zero_width_container_is_a_noop(timer):
    view = FakeView(width=0)
    service = make_service(view)

    service.set_inputs(items=[{"id": 1}, {"id": 2}])

    assert view.applied == []
    assert timer.scheduled == []
    assert service.phase == LayoutPhase.IDLE
    assert service.last_pass is None


def test_resize_recomputes_widths_and_lefts(timer):
    view = FakeView(width=400)
    service = make_service(view, gap=16)
    service.set_inputs(items=[{"id": n} for n in range(4)])
    timer.fire_all()
    _, before = view.applied[-1]

    view.width = 800
    assert service.on_resize_finished() is True
    timer.fire_all()
    _, after = view.applied[-1]

    assert before.column_width == 192
    assert after.column_width == 392
    for old, new in zip(before.positions, after.positions):
        assert new.width != old.width
        assert new.column == old.column
    assert after.positions[1].left == 408


def test_resize_without_width_change_is_ignored(timer):
    view = FakeView(width=400)
    service = make_service(view)
    service.set_inputs(items=[{"id": 1}])
    view.applied.clear()

    assert service.on_resize_finished() is False
    assert view.applied == []


def test_empty_item_list_gives_zero_height(timer):
    view = FakeView()
    service = make_service(view)

    service.request_layout()

    _, result = view.applied[0]
    assert result.positions == []
    assert result.container_height == 0


def test_items_changed_in_place_skip_correction(timer):
    view = FakeView()
    service = make_service(view)
    items = [{"id": n} for n in range(3)]
    service.set_inputs(items=items)

    items.append({"id": 3})
    timer.fire_all()

    assert len(view.applied) == 1
    assert service.last_pass.measured is False
    assert service.phase == LayoutPhase.IDLE


def test_negative_gap_is_clamped_before_comparing(timer):
    view = FakeView()
    service = make_service(view)
    service.set_inputs(items=[{"id": 1}])

    assert service.set_inputs(gap=-5) is True
    assert service.gap == 0
    assert service.set_inputs(gap=-5) is False
    assert len(view.applied) == 2


def test_zero_width_clears_previous_pass(timer):
    view = FakeView(width=400)
    service = make_service(view)
    service.set_inputs(items=[{"id": 1}])
    assert service.last_pass is not None

    view.width = 0
    service.on_resize_finished()

    assert service.last_pass is None
    assert service.phase == LayoutPhase.IDLE
