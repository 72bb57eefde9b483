import pytest

from sketchpad.elements import (
    ElementKind,
    ElementStore,
    FreehandElement,
    LineElement,
    RectangleElement,
    TextElement,
    coerce_kind,
)
from sketchpad.errors import MissingMeasurement, MissingTextOption, UnrecognizedKind

from .conftest import RecordingRenderer, anchors


@pytest.fixture
def store():
    return ElementStore(RecordingRenderer())


def test_create_line_builds_primitive(store):
    element = store.create("line", 0, 0, 10, 5)
    assert isinstance(element, LineElement)
    assert element.kind is ElementKind.LINE
    assert element.primitive == ("line", 0.0, 0.0, 10.0, 5.0)


def test_create_rectangle_primitive_uses_width_and_height(store):
    element = store.create("rectangle", 50, 50, 10, 10)
    assert isinstance(element, RectangleElement)
    assert element.primitive == ("rect", 50.0, 50.0, -40.0, -40.0)


def test_create_freehand_seeds_one_point(store):
    element = store.create("pencil", 3, 4, 99, 99)
    assert isinstance(element, FreehandElement)
    assert element.points == ((3.0, 4.0),)
    assert anchors(element) == (3.0, 4.0, 3.0, 4.0)


def test_create_text_starts_empty(store):
    element = store.create("text", 7, 8, 7, 8)
    assert isinstance(element, TextElement)
    assert element.text == ""


def test_create_without_renderer_has_no_primitive():
    element = ElementStore().create("line", 0, 0, 1, 1)
    assert element.primitive is None


@pytest.mark.parametrize("kind", ["circle", "selection", "pan", None])
def test_unknown_kind_is_rejected(store, kind):
    with pytest.raises(UnrecognizedKind) as info:
        store.create(kind, 0, 0, 1, 1)
    assert info.value.kind == kind
    assert isinstance(info.value, ValueError)


def test_coerce_kind_accepts_enum_and_value():
    assert coerce_kind(ElementKind.TEXT) is ElementKind.TEXT
    assert coerce_kind("pencil") is ElementKind.FREEHAND


def test_ids_are_unique_and_increasing(store):
    first = store.create("line", 0, 0, 1, 1)
    second = store.create("line", 0, 0, 1, 1)
    assert (first.id, second.id) == ("E0001", "E0002")


def test_append_indexes_by_id(store):
    a = store.create("line", 0, 0, 1, 1)
    b = store.create("rectangle", 0, 0, 1, 1)
    assert store.append(a) == 0
    assert store.append(b) == 1
    assert store.index_of(b.id) == 1
    assert store.get(a.id) is a
    assert a.id in store
    assert len(store) == 2
    assert list(store) == [a, b]


def test_append_duplicate_id_fails(store):
    a = store.create("line", 0, 0, 1, 1)
    store.append(a)
    with pytest.raises(ValueError):
        store.append(a)


def test_unknown_id_lookup_fails(store):
    with pytest.raises(KeyError):
        store.index_of("E9999")


def test_replace_at_keeps_position(store):
    a = store.create("line", 0, 0, 1, 1)
    store.append(a)
    moved = store.rebuild(a, 5, 5, 6, 6)
    store.replace_at(a.id, moved)
    assert store.get(a.id) == moved
    assert moved.id == a.id
    with pytest.raises(ValueError):
        store.replace_at(a.id, store.create("line", 0, 0, 1, 1))


def test_append_point_grows_stroke(store):
    stroke = store.create("pencil", 0, 0, 0, 0)
    store.append(stroke)
    store.append_point(stroke.id, (10, 20))
    assert store.get(stroke.id).points == ((0.0, 0.0), (10.0, 20.0))
    assert anchors(store.get(stroke.id)) == (0.0, 0.0, 10.0, 20.0)


def test_append_point_on_line_fails(store):
    a = store.create("line", 0, 0, 1, 1)
    store.append(a)
    with pytest.raises(UnrecognizedKind):
        store.append_point(a.id, (2, 2))


def test_rebuild_freehand_translates_samples(store):
    stroke = FreehandElement("E0001", ((0.0, 0.0), (10.0, 5.0)))
    moved = store.rebuild(stroke, 3, 4, 0, 0)
    assert moved.points == ((3.0, 4.0), (13.0, 9.0))


def test_rebuild_text_measures_box(store):
    label = store.create("text", 100, 100, 100, 100)
    rebuilt = store.rebuild(label, 100, 100, 0, 0, text="abc")
    assert anchors(rebuilt) == (100.0, 100.0, 130.0, 124.0)
    assert rebuilt.text == "abc"


def test_rebuild_text_requires_payload(store):
    label = store.create("text", 0, 0, 0, 0)
    with pytest.raises(MissingTextOption):
        store.rebuild(label, 0, 0, 0, 0)


def test_rebuild_text_requires_measurement():
    bare = ElementStore()
    label = bare.create("text", 0, 0, 0, 0)
    with pytest.raises(MissingMeasurement):
        bare.rebuild(label, 0, 0, 0, 0, text="hi")


def test_snapshot_is_not_affected_by_later_edits(store):
    a = store.create("line", 0, 0, 1, 1)
    store.append(a)
    before = store.snapshot()
    store.replace_at(a.id, store.rebuild(a, 9, 9, 10, 10))
    store.append(store.create("rectangle", 0, 0, 1, 1))
    assert before == (a,)
    assert len(store.snapshot()) == 2


def test_load_never_reissues_ids(store):
    for _ in range(3):
        store.append(store.create("line", 0, 0, 1, 1))
    first = store.snapshot()[:1]
    store.load(first)
    assert len(store) == 1
    assert store.create("line", 0, 0, 1, 1).id == "E0004"


def test_load_reseeds_past_foreign_ids(store):
    store.load((RectangleElement("E0042", 0, 0, 1, 1),))
    assert store.index_of("E0042") == 0
    assert store.create("line", 0, 0, 1, 1).id == "E0043"
