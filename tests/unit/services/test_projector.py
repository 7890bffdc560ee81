from types import SimpleNamespace

from annoview.models.workspace import DrawSettings, MaskMode
from annoview.services.class_colors import color_for_label
from annoview.services.history import (
    AddAnnotationFileAction,
    ClearAction,
    HistoryEntry,
    ImageAction,
    MaskAction,
    RemoveAnnotationFileAction,
    StateProjector,
    VisibilityAction,
    project,
)


def _entries(*actions):
    return [
        HistoryEntry(action=action, label=type(action).__name__, timestamp=index)
        for index, action in enumerate(actions)
    ]


def test_cursor_minus_one_is_empty_state(make_payload):
    entries = _entries(ImageAction(image=make_payload(), file_name="a.png"))

    state = project(entries, -1)

    assert state.image is None
    assert state.image_file_name == ""
    assert state.annotation_files == []
    assert state.class_colors == {}


def test_replay_applies_entries_up_to_cursor(make_payload, make_annotation_file):
    image = make_payload()
    mask = make_payload(value=(255, 255, 255))
    entries = _entries(
        ImageAction(image=image, file_name="a.png"),
        MaskAction(mask=mask),
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
        RemoveAnnotationFileAction(name="f1"),
    )

    state = project(entries, 2)

    assert state.image is image
    assert state.image_file_name == "a.png"
    assert state.mask is mask
    assert state.file_names() == ["f1"]
    assert state.class_colors == {"car": color_for_label("car")}

    assert project(entries, 3).file_names() == []


def test_projection_is_deterministic(make_payload, make_annotation_file):
    entries = _entries(
        ImageAction(image=make_payload(), file_name="a.png"),
        AddAnnotationFileAction.capture(make_annotation_file("f1", labels=("car", "bus"))),
        VisibilityAction(name="f1", visible=False),
    )

    assert project(entries, 2) == project(entries, 2)


def test_projection_ignores_entries_after_cursor(make_payload, make_annotation_file):
    base = _entries(
        ImageAction(image=make_payload(), file_name="a.png"),
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
    )
    extended = base + _entries(ClearAction())

    assert project(base, 1) == project(extended, 1)


def test_visibility_replay_is_idempotent(make_annotation_file):
    entries = _entries(
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
        VisibilityAction(name="f1", visible=False),
        VisibilityAction(name="f1", visible=False),
    )

    state = project(entries, 2)

    assert state.find_file("f1").visible is False


def test_visibility_for_missing_file_is_skipped(make_annotation_file):
    entries = _entries(
        VisibilityAction(name="gone", visible=False),
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
    )

    state = project(entries, 1)

    assert state.file_names() == ["f1"]
    assert state.find_file("f1").visible is True


def test_replay_copies_files_out_of_the_log(make_annotation_file):
    action = AddAnnotationFileAction.capture(make_annotation_file("f1"))
    entries = _entries(action)

    state = project(entries, 0)
    state.annotation_files[0].visible = False
    state.annotation_files[0].annotations.clear()

    assert action.annotation_file.visible is True
    assert len(action.annotation_file.annotations) == 1


def test_capture_copies_the_source_file(make_annotation_file):
    source = make_annotation_file("f1")
    action = AddAnnotationFileAction.capture(source)

    source.visible = False

    assert action.annotation_file.visible is True


def test_clear_resets_everything_including_draw_settings(make_payload, make_annotation_file):
    defaults = DrawSettings(line_width=5, mask_mode=MaskMode.OUTLINE)
    entries = _entries(
        ImageAction(image=make_payload(), file_name="a.png"),
        MaskAction(mask=make_payload()),
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
        ClearAction(),
    )

    state = project(entries, 3, defaults)

    assert state.image is None
    assert state.mask is None
    assert state.annotation_files == []
    assert state.class_colors == {}
    assert state.draw_settings == defaults
    assert state.draw_settings is not defaults


def test_new_image_wipes_previous_contents(make_payload, make_annotation_file):
    second = make_payload(value=(1, 2, 3))
    entries = _entries(
        ImageAction(image=make_payload(), file_name="a.png"),
        MaskAction(mask=make_payload()),
        AddAnnotationFileAction.capture(make_annotation_file("f1")),
        ImageAction(image=second, file_name="b.png"),
    )

    state = project(entries, 3)

    assert state.image is second
    assert state.image_file_name == "b.png"
    assert state.mask is None
    assert state.annotation_files == []


def test_unknown_action_is_skipped(make_annotation_file):
    entries = [
        HistoryEntry(action=SimpleNamespace(kind="rotate"), label="bogus", timestamp=0),
        *_entries(AddAnnotationFileAction.capture(make_annotation_file("f1"))),
    ]

    state = StateProjector().project(entries, 1)

    assert state.file_names() == ["f1"]


def test_malformed_entry_does_not_abort_replay(make_annotation_file):
    entries = _entries(
        AddAnnotationFileAction(annotation_file=None),
        AddAnnotationFileAction.capture(make_annotation_file("f2")),
    )

    state = project(entries, 1)

    assert state.file_names() == ["f2"]
