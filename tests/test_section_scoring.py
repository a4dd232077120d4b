import pytest

from scrollspy.design.geometry import SectionBounds
from scrollspy.design.scoring import (
    ScoringContext,
    calculate_section_scores,
    score_section,
    scroll_progress,
    trigger_line_offset,
)


def _bounds(*heights, start=0.0):
    out, top = [], start
    for i, h in enumerate(heights):
        out.append(SectionBounds(id=f"s{i}", top=top, bottom=top + h, height=h))
        top += h
    return out


def _ctx(position, viewport=500, content=1500, offset=40, threshold=0.6, policy="fixed"):
    return ScoringContext(
        position=position,
        viewport_size=viewport,
        content_size=content,
        effective_offset=offset,
        threshold=threshold,
        trigger_policy=policy,
    )


def test_mid_document_scores():
    scores = calculate_section_scores(_bounds(500, 500, 500), _ctx(600))
    s0, s1, s2 = scores
    assert s0.score == 0.0
    assert not s0.in_viewport
    # fully visible band + trigger bonus - index penalty
    assert s1.score == pytest.approx(1000 + 0.8 * 500 + 200 - 0.1)
    assert s1.visibility_ratio == pytest.approx(0.8)
    assert s1.progress == pytest.approx(0.6)
    # partial band: 100px of a 500px viewport
    assert s2.score == pytest.approx(0.2 * 800 - 0.2)
    assert s2.in_viewport


def test_output_follows_input_order():
    bounds = list(reversed(_bounds(500, 500, 500)))
    scores = calculate_section_scores(bounds, _ctx(0))
    assert [s.id for s in scores] == ["s2", "s1", "s0"]


def test_index_map_controls_penalty():
    (score,) = calculate_section_scores(_bounds(500), _ctx(1000), index_map={"s0": 3})
    assert score.score == pytest.approx(-0.3)


def test_trigger_bonus_requires_viewport():
    # offset beyond the viewport floor puts the trigger line in an off-screen section
    off_screen = SectionBounds(id="far", top=1150, bottom=1400, height=250)
    score = score_section(off_screen, 0, _ctx(600, content=2000, offset=600))
    assert not score.in_viewport
    assert score.score == 0.0


def test_zero_height_section():
    flat = SectionBounds(id="flat", top=100, bottom=100, height=0)
    score = score_section(flat, 0, _ctx(0))
    assert score.visibility_ratio == 0.0
    assert score.progress == 0.0


def test_scroll_progress_is_clamped():
    assert scroll_progress(0, 500, 1500) == 0.0
    assert scroll_progress(500, 500, 1500) == 0.5
    assert scroll_progress(2000, 500, 1500) == 1.0
    assert scroll_progress(0, 500, 400) == 0.0


def test_progressive_trigger_line_reaches_viewport_floor():
    assert trigger_line_offset(0, 500, 1500, 40, "progressive") == 40
    assert trigger_line_offset(1000, 500, 1500, 40, "progressive") == 500
    assert trigger_line_offset(1000, 500, 1500, 40, "fixed") == 40
    assert _ctx(1000, policy="progressive").trigger_line == 1500
