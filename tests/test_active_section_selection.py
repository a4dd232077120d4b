from scrollspy.design.geometry import SectionBounds
from scrollspy.design.scoring import ScoringContext, SectionScore, calculate_section_scores
from scrollspy.design.selection import determine_active_section, edge_override, edge_state

IDS = ("a", "b", "c")
_DUMMY = SectionBounds(id="x", top=0, bottom=1, height=1)


def _score(sid, value, in_viewport=True):
    return SectionScore(sid, value, 0.5, in_viewport, 0.5, _DUMMY)


def _scored(position, heights, viewport=500, offset=40):
    bounds, top = [], 0.0
    for sid, h in zip(IDS, heights):
        bounds.append(SectionBounds(id=sid, top=top, bottom=top + h, height=h))
        top += h
    ctx = ScoringContext(position, viewport, top, offset, 0.6)
    return calculate_section_scores(bounds, ctx), top


def _pick(scores, current, hysteresis=150, position=500, viewport=500, content=2000):
    return determine_active_section(
        scores, IDS, current, hysteresis, position, viewport, content
    )


def test_incumbent_holds_within_hysteresis():
    scores = [_score("a", 1000), _score("b", 1150), _score("c", 0, False)]
    assert _pick(scores, "a") == "a"


def test_challenger_wins_beyond_hysteresis():
    scores = [_score("a", 1000), _score("b", 1150.5), _score("c", 0, False)]
    assert _pick(scores, "a") == "b"


def test_incumbent_out_of_view_is_replaced():
    scores = [_score("a", 0, False), _score("b", 300), _score("c", 200)]
    assert _pick(scores, "a", hysteresis=1000) == "b"


def test_no_incumbent_takes_best():
    scores = [_score("a", 10), _score("b", 20), _score("c", 5)]
    assert _pick(scores, None) == "b"


def test_ties_go_to_the_earliest_section():
    scores = [_score("a", 500), _score("b", 500), _score("c", 0, False)]
    assert _pick(scores, None) == "a"


def test_all_off_screen_falls_back_to_all_candidates():
    scores = [_score("a", 0, False), _score("b", 3, False), _score("c", 1, False)]
    assert _pick(scores, None) == "b"


def test_empty_scores_give_none():
    assert _pick([], "a") is None


def test_mid_document_switch():
    scores, content = _scored(600, (500, 500, 500))
    assert _pick(scores, "a", position=600, content=content) == "b"


def test_bottom_edge_forces_last_section():
    scores, content = _scored(1000, (500, 500, 500))
    assert _pick(scores, "b", hysteresis=1000, position=1000, content=content) == "c"


def test_bottom_edge_yields_when_neighbour_visible():
    scores, content = _scored(500, (500, 300, 200))
    assert edge_override(scores, IDS, 500, 500, content) is None
    assert _pick(scores, None, position=500, content=content) == "b"


def test_top_edge_forces_first_section():
    scores, content = _scored(0, (500, 500, 500))
    assert _pick(scores, "b", hysteresis=1000, position=0, content=content) == "a"


def test_edge_requires_scored_section():
    scores, content = _scored(1000, (500, 500, 500))
    without_last = [s for s in scores if s.id != "c"]
    assert edge_override(without_last, IDS, 1000, 500, content) is None


def test_edge_state():
    assert edge_state(0, 500, 1500) == (True, False)
    assert edge_state(996, 500, 1500) == (False, True)
    assert edge_state(500, 500, 1500) == (False, False)
    # not enough travel for edge handling
    assert edge_state(8, 500, 508) == (False, False)


def test_overscrolled_position_still_hits_bottom_edge():
    scores, content = _scored(1450, (500, 500, 500))
    assert _pick(scores, "a", position=1450, content=content) == "c"


def test_small_lead_does_not_steal_active():
    scores = [_score("a", 1000), _score("b", 1100), _score("c", 0, False)]
    assert _pick(scores, "a", hysteresis=150) == "a"
