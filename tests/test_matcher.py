import cv2
import numpy as np
import pytest

from screenbot.core.errors import InvalidTemplateSize, TemplateLoadError
from screenbot.vision import matcher as matcher_mod
from screenbot.vision.coords import Rect
from screenbot.vision.matcher import Template, TemplateMatcher

from conftest import noise


def test_exact_copy_scores_maximum_at_its_offset(scene):
    frame, path, (ox, oy, w, h) = scene
    m = TemplateMatcher()
    result = m.score(frame, m.load(path))
    assert result.location == Rect(ox, oy, w, h)
    assert result.score == pytest.approx(1.0, abs=1e-4)
    assert m.accepts(result)


def test_score_is_invariant_to_uniform_brightness(scene):
    frame, path, (ox, oy, _, _) = scene
    m = TemplateMatcher()
    template = m.load(path)
    brighter = (frame.astype(np.float32) * 0.5 + 60).astype(np.uint8)
    result = m.score(brighter, template)
    assert (result.location.x, result.location.y) == (ox, oy)
    assert result.score > 0.95


def test_unrelated_template_is_below_threshold():
    m = TemplateMatcher()
    template = Template(path="other.png", image=noise((16, 16), seed=99))
    result = m.score(noise((60, 80), seed=2), template)
    assert result.score < 0.8
    assert not m.accepts(result)


@pytest.mark.parametrize("shape", [(10, 41), (31, 10)])
def test_oversized_template_fails_before_correlation(monkeypatch, shape):
    calls = []
    monkeypatch.setattr(matcher_mod.cv2, "matchTemplate", lambda *a, **k: calls.append(a))
    template = Template(path="big.png", image=noise(shape, seed=3))
    with pytest.raises(InvalidTemplateSize) as info:
        TemplateMatcher().score(noise((30, 40), seed=4), template)
    assert info.value.frame_size == (40, 30)
    assert calls == []


def test_template_as_large_as_frame_is_allowed():
    frame = noise((20, 30), seed=5)
    result = TemplateMatcher().score(frame, Template(path="same.png", image=frame.copy()))
    assert result.location == Rect(0, 0, 30, 20)


def test_load_missing_file(tmp_path):
    with pytest.raises(TemplateLoadError) as info:
        TemplateMatcher().load(tmp_path / "missing.png")
    assert info.value.path.endswith("missing.png")


def test_load_undecodable_file(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    with pytest.raises(TemplateLoadError):
        TemplateMatcher().load(bad)


def test_load_converts_color_to_gray(tmp_path):
    color = np.zeros((4, 6, 3), dtype=np.uint8)
    color[:, :, 2] = 255
    path = tmp_path / "red.png"
    cv2.imwrite(str(path), color)
    template = TemplateMatcher().load(path)
    assert template.image.ndim == 2
    assert (template.width, template.height) == (6, 4)


def test_threshold_is_inclusive():
    m = TemplateMatcher(threshold=0.8)
    assert m.accepts(matcher_mod.MatchResult(Rect(0, 0, 1, 1), 0.8))
    assert not m.accepts(matcher_mod.MatchResult(Rect(0, 0, 1, 1), 0.79))
