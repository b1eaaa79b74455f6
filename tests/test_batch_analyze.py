"""
Tests for the batch analysis CLI (scripts/batch_analyze.py).
"""

import base64
import importlib.util
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from pareido.errors import GeminiError

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "batch_analyze.py"


@pytest.fixture(scope="module")
def batch():
    spec = importlib.util.spec_from_file_location("batch_analyze", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def image_folder(tmp_path, png_bytes):
    folder = tmp_path / "photos"
    folder.mkdir()
    (folder / "b.png").write_bytes(png_bytes)
    (folder / "a.JPG").write_bytes(png_bytes)
    (folder / "notes.txt").write_text("not an image")
    return folder


REPLY = {"name": "Drawer Dragon", "creativityScore": 40, "materials": {"synthetic": 5}}


def test_find_images_filters_and_sorts(batch, image_folder):
    assert [p.name for p in batch.find_images(image_folder)] == ["a.JPG", "b.png"]


def test_main_prints_one_line_per_image(batch, image_folder, capsys):
    with patch("pareido.gemini.generate_json", return_value=REPLY):
        code = batch.main([str(image_folder)])

    assert code == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [line["file"] for line in lines] == ["a.JPG", "b.png"]
    assert lines[0]["materials"]["synthetic"] == 10


def test_main_writes_card_art(batch, image_folder, tmp_path):
    art = base64.b64encode(b"card").decode()
    out = tmp_path / "out"
    with patch("pareido.gemini.generate_json", return_value=REPLY), \
         patch("pareido.gemini.generate_image", return_value=art):
        code = batch.main([str(image_folder), "--output", str(out)])

    assert code == 0
    assert (out / "generated_image_1.jpg").read_bytes() == b"card"
    assert (out / "generated_image_2.jpg").exists()


def test_main_uses_prompt_file(batch, image_folder, tmp_path):
    prompt_file = tmp_path / "prompt.txt"
    prompt_file.write_text("Describe the spirit in this object.")
    with patch("pareido.gemini.generate_json", return_value=REPLY) as generate:
        batch.main([str(image_folder), "--prompt-file", str(prompt_file), "--model", "gemini-test"])

    parts = generate.call_args[0][0]
    assert parts[0] == {"text": "Describe the spirit in this object."}
    assert generate.call_args[1]["model"] == "gemini-test"


def test_main_continues_after_failure(batch, image_folder, capsys):
    with patch("pareido.gemini.generate_json", side_effect=[GeminiError("boom"), REPLY]):
        code = batch.main([str(image_folder)])

    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["file"] == "b.png"


def test_main_fails_when_every_image_fails(batch, image_folder):
    with patch("pareido.gemini.generate_json", side_effect=GeminiError("boom")):
        assert batch.main([str(image_folder)]) == 1
