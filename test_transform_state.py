#!/usr/bin/env python3
"""Test placement geometry and the transform state machine."""

import pytest
from PIL import Image

from printplace.api.models import ArtworkImage, ArtworkTransform, Flip
from printplace.editor import geometry
from printplace.editor.context import EditingContext
from printplace.editor.state import Idle, Loading, TransformStateMachine, Transitioning
from printplace.utils.dimensions import get_print_area


def artwork(width: int, height: int, view: str = "original", cropped: bool = False) -> ArtworkImage:
    return ArtworkImage(Image.new("RGBA", (width, height), (0, 0, 0, 255)), view=view, cropped=cropped)


def new_machine(location: str = "front") -> TransformStateMachine:
    return TransformStateMachine(EditingContext(location=location))


# ============================================================================
# Geometry
# ============================================================================


def test_default_transform_tall_image_on_front():
    transform = geometry.default_transform((1000, 2000), get_print_area("front"))
    assert transform.scale == pytest.approx(0.102)
    assert transform.x == pytest.approx(199.0)
    assert transform.y == pytest.approx(160.5)
    assert transform.rotation == 0


def test_default_transform_never_upscales():
    transform = geometry.default_transform((50, 50), get_print_area("front"))
    assert transform.scale == pytest.approx(0.8)


def test_fit_transform_upscales_and_clears_rotation():
    transform = geometry.fit_transform((50, 50), get_print_area("front"))
    assert transform.scale == pytest.approx(165 / 50 * 0.95)
    assert transform.rotation == 0


def test_normalize_rotation():
    assert geometry.normalize_rotation(-90) == 270
    assert geometry.normalize_rotation(360) == 0
    assert geometry.normalize_rotation(450) == 90
    assert 0 <= geometry.normalize_rotation(-1e-14) < 360


def test_recenter_keeps_visual_center():
    old = ArtworkTransform(x=100, y=100, scale=0.1, rotation=90)
    transform = geometry.recenter_for_new_crop(old, (1000, 1000), (500, 500), get_print_area("front"))

    assert transform.scale == pytest.approx(0.264)
    assert transform.x + 500 * transform.scale / 2 == pytest.approx(150)
    assert transform.y + 500 * transform.scale / 2 == pytest.approx(150)
    assert transform.rotation == 90


def test_fit_scale_rejects_empty_image():
    with pytest.raises(ValueError):
        geometry.fit_scale((0, 10), get_print_area("front"), 0.8)


def test_transform_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        ArtworkTransform(x=0, y=0, scale=0)
    with pytest.raises(ValueError):
        ArtworkTransform(x=0, y=0, scale=float("nan"))


def test_transform_dict_round_trip_defaults_rotation():
    transform = ArtworkTransform.from_dict({"x": 1, "y": "2.5", "scale": 0.5})
    assert transform == ArtworkTransform(x=1.0, y=2.5, scale=0.5, rotation=0.0)
    assert transform.to_dict() == {"x": 1.0, "y": 2.5, "scale": 0.5, "rotation": 0.0}
    with pytest.raises(ValueError, match="missing"):
        ArtworkTransform.from_dict({"x": 1, "y": 2})


def test_position_descriptor():
    center_x, center_y = get_print_area("front").center
    assert geometry.position_descriptor(ArtworkTransform(center_x, center_y, 1), "front") == "Centered"
    assert geometry.position_descriptor(ArtworkTransform(center_x + 5, center_y - 5, 1), "front") == "Centered"
    assert geometry.position_descriptor(ArtworkTransform(100, 100, 1), "front") == "Top-Left"
    assert geometry.position_descriptor(ArtworkTransform(center_x, 400, 1), "front") == "Bottom"
    assert geometry.position_descriptor(ArtworkTransform(400, center_y, 1), "front") == "Right"


# ============================================================================
# State machine
# ============================================================================


def test_initialize_computes_default_and_records_history():
    machine = new_machine()
    assert machine.phase == "empty"

    machine.begin_load()
    assert machine.view_state == Loading("original")

    transform = machine.initialize(artwork(1000, 2000))

    assert transform.scale == pytest.approx(0.102)
    assert machine.view_state == Idle("original")
    assert machine.phase == "loaded"
    assert machine.context.transform_cache["original"] == transform
    assert len(machine.history) == 1


def test_writes_refused_while_loading():
    machine = new_machine()
    machine.begin_load()
    assert not machine.accepts_writes
    assert not machine.set_transform(ArtworkTransform(0, 0, 1))
    assert machine.transform is None


def test_set_transform_caches_and_marks_edited():
    machine = new_machine()
    machine.initialize(artwork(100, 100))
    moved = machine.transform.with_changes(x=10)

    assert machine.set_transform(moved)
    assert machine.phase == "edited"
    assert machine.context.transform_cache["original"] == moved
    assert len(machine.history) == 2

    assert machine.set_transform(moved.with_changes(x=20), commit=False)
    assert len(machine.history) == 2


def test_initialize_prefers_cached_transform():
    machine = new_machine()
    cached = ArtworkTransform(x=5, y=6, scale=0.5)
    machine.context.transform_cache["original"] = cached
    machine.begin_load()
    assert machine.initialize(artwork(100, 100), existing=ArtworkTransform(1, 1, 1)) == cached


def test_initialize_uses_existing_transform_for_uncropped_image():
    machine = new_machine()
    existing = ArtworkTransform(x=200, y=200, scale=0.3, rotation=90)
    machine.begin_load()
    assert machine.initialize(artwork(100, 100), existing=existing, original_size=(100, 100)) == existing


def test_initialize_recenters_existing_transform_after_crop():
    machine = new_machine()
    existing = ArtworkTransform(x=100, y=100, scale=0.1)
    machine.begin_load()

    transform = machine.initialize(artwork(500, 500, cropped=True), existing=existing, original_size=(1000, 1000))

    assert transform.x + 500 * transform.scale / 2 == pytest.approx(150)
    assert transform.y + 500 * transform.scale / 2 == pytest.approx(150)


def test_state_machine_recenter_applies_transform():
    machine = new_machine()
    machine.initialize(artwork(500, 500, cropped=True))
    old = ArtworkTransform(x=100, y=100, scale=0.1)

    transform = machine.recenter_for_new_crop(old, (1000, 1000), (500, 500))

    assert machine.transform == transform
    assert transform.x + 500 * transform.scale / 2 == pytest.approx(150)


def test_toggle_round_trip_restores_each_view():
    machine = new_machine()
    original = artwork(1000, 1000)
    vectorized = artwork(400, 200, view="vectorized")
    machine.initialize(original)

    t1 = machine.transform.with_changes(x=180, rotation=90)
    machine.set_transform(t1)

    after_switch = machine.toggle_view("vectorized", vectorized)
    assert machine.view == "vectorized"
    assert machine.image is vectorized
    # First visit: centered default for the new image keeping rotation
    assert after_switch == machine.default_for(vectorized, rotation=90)

    t2 = after_switch.with_changes(y=300)
    machine.set_transform(t2)

    assert machine.toggle_view("original", original) == t1
    assert machine.toggle_view("vectorized", vectorized) == t2
    assert machine.toggle_view("original", original) == t1


def test_toggle_refuses_writes_from_image_listeners():
    machine = new_machine()
    original = artwork(1000, 1000)
    vectorized = artwork(300, 300, view="vectorized")
    machine.initialize(original)
    t1 = machine.transform.with_changes(x=170)
    machine.set_transform(t1)

    attempts = []

    def on_image(image):
        attempts.append((machine.view_state, machine.set_transform(ArtworkTransform(0, 0, 9))))

    machine.add_image_listener(on_image)
    machine.toggle_view("vectorized", vectorized)

    assert attempts == [(Transitioning("original", "vectorized"), False)]
    assert machine.context.transform_cache["original"] == t1
    assert machine.view_state == Idle("vectorized")
    assert machine.transform.scale != 9


def test_toggle_does_not_touch_history():
    machine = new_machine()
    original = artwork(100, 100)
    vectorized = artwork(200, 200, view="vectorized")
    machine.initialize(original)

    machine.toggle_view("vectorized", vectorized)
    machine.toggle_view("original", original)
    machine.toggle_view("vectorized", vectorized)

    # The first visit seeds the vectorized history with its starting transform
    assert len(machine.context.history_for("original")) == 1
    assert len(machine.context.history_for("vectorized")) == 1
    assert machine.undo() is None


def test_undo_after_toggle_stays_in_active_view():
    machine = new_machine()
    original = artwork(100, 100)
    vectorized = artwork(2000, 2000, view="vectorized")
    start = machine.initialize(original)
    machine.set_transform(start.with_changes(x=start.x + 1))

    vector_default = machine.toggle_view("vectorized", vectorized)
    assert vector_default.scale == pytest.approx(0.066)

    assert machine.undo() is None
    assert machine.transform == vector_default
    assert machine.context.transform_cache["vectorized"] == vector_default
    assert machine.current_dimensions().width == pytest.approx(2000 * 0.066 / 15)

    machine.toggle_view("original", original)
    assert machine.undo() == start
    assert machine.context.transform_cache["original"] == start
    assert machine.context.transform_cache["vectorized"] == vector_default


def test_each_view_keeps_its_own_redo_branch():
    machine = new_machine()
    original = artwork(1000, 1000)
    vectorized = artwork(400, 400, view="vectorized")
    machine.initialize(original)
    machine.set_transform(machine.transform.with_changes(x=170))

    seeded = machine.toggle_view("vectorized", vectorized)
    moved = seeded.with_changes(y=250)
    machine.set_transform(moved)
    assert machine.undo() == seeded

    machine.toggle_view("original", original)
    machine.toggle_view("vectorized", vectorized)
    assert machine.redo() == moved


def test_toggle_refused_when_empty():
    machine = new_machine()
    assert machine.toggle_view("vectorized", artwork(10, 10, view="vectorized")) is None
    assert machine.view_state == Idle("original")


def test_undo_redo_through_machine():
    machine = new_machine()
    first = machine.initialize(artwork(100, 100))
    second = first.with_changes(x=1)
    machine.set_transform(second)

    assert machine.undo() == first
    assert machine.transform == first
    assert machine.context.transform_cache["original"] == first
    assert machine.undo() is None
    assert machine.redo() == second


def test_transform_listener_fires_on_changes():
    machine = new_machine()
    seen = []
    machine.add_transform_listener(seen.append)
    first = machine.initialize(artwork(100, 100))
    machine.set_transform(first.with_changes(x=3))
    assert [t.x for t in seen] == [first.x, 3]


def test_oversize_warning():
    machine = new_machine()
    machine.initialize(artwork(100, 100))
    assert not machine.is_oversize()

    # 100px × 2 = 200 canvas px = 13.3" on front
    machine.set_transform(machine.transform.with_changes(scale=2))
    assert machine.is_oversize()
    assert machine.current_dimensions().width == pytest.approx(200 / 15)


def test_flip_does_not_change_dimensions():
    machine = new_machine()
    machine.initialize(artwork(120, 80))
    before = machine.current_dimensions()

    machine.set_flip(Flip(x=-1, y=-1))

    assert machine.current_dimensions() == before
    assert len(machine.history) == 1


def test_dimensions_follow_location_density():
    machine = new_machine("left_chest")
    machine.initialize(artwork(60, 60))
    machine.set_transform(ArtworkTransform(x=290, y=165, scale=1))
    size = machine.current_dimensions()
    assert size.width == pytest.approx(4)
    assert size.height == pytest.approx(4)
    assert not machine.is_oversize()


def test_clear_returns_to_empty():
    machine = new_machine()
    machine.initialize(artwork(100, 100))
    machine.set_flip(Flip(x=-1))
    machine.clear()
    assert machine.phase == "empty"
    assert machine.flip == Flip()
    assert machine.current_dimensions() is None
    assert machine.position_descriptor() is None
