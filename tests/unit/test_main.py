import cv2
import pytest

from annoview import main as main_module
from annoview.main import main, parse_arguments


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(main_module, "setup_logger", lambda *args, **kwargs: None)


@pytest.fixture
def inputs(tmp_path, color_png_bytes, yolo_text):
    image = tmp_path / "a.png"
    image.write_bytes(color_png_bytes)
    labels = tmp_path / "labels.txt"
    labels.write_text(yolo_text)
    return image, labels


def test_parse_arguments_defaults():
    args = parse_arguments(["a.png"])

    assert args.files == ["a.png"]
    assert args.undo == 0
    assert args.output is None
    assert args.hide_labels is False


def test_renders_output_image(tmp_path, inputs):
    image, labels = inputs
    output = tmp_path / "out.png"

    code = main([str(image), str(labels), "--output", str(output), "--hide-labels"])

    assert code == 0
    rendered = cv2.imread(str(output))
    assert rendered.shape == (48, 64, 3)


def test_prints_history_with_cursor_marker(capsys, inputs):
    image, labels = inputs

    code = main([str(image), str(labels), "--history", "--undo", "1"])

    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["*   0  Load image a.png", "    1  Add annotations labels.txt"]


def test_annotations_without_image_fail(inputs):
    _, labels = inputs

    assert main([str(labels)]) == 1


def test_invalid_settings_file_fails(tmp_path, inputs):
    image, _ = inputs
    settings = tmp_path / "display.yaml"
    settings.write_text("line_width: 0\n")

    assert main([str(image), "--settings", str(settings)]) == 1


def test_missing_input_is_internal_error(tmp_path):
    assert main([str(tmp_path / "nope.png")]) == 2


def test_nothing_to_render_after_undoing_everything(tmp_path, inputs):
    image, _ = inputs

    code = main([str(image), "--undo", "5", "--output", str(tmp_path / "out.png")])

    assert code == 1
