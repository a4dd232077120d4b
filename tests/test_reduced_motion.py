import sys

import scrollspy.design
from scrollspy.design import reduced_motion as rm


def test_default_state_false():
    assert rm.is_reduced_motion() is False
    assert rm.resolve_behavior("auto") == "smooth"
    assert rm.resolve_behavior(None) == "smooth"


def test_auto_becomes_instant_when_reduced():
    rm.set_reduced_motion(True)
    assert rm.resolve_behavior("auto") == "instant"
    # explicit choices are respected
    assert rm.resolve_behavior("smooth") == "smooth"


def test_context_manager_restores_state():
    rm.set_reduced_motion(False)
    with rm.temporarily_reduced_motion(True):
        assert rm.is_reduced_motion() is True
    assert rm.is_reduced_motion() is False


def test_context_manager_exception_safety():
    rm.set_reduced_motion(False)
    try:
        with rm.temporarily_reduced_motion(True):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert rm.is_reduced_motion() is False


def test_env_var_bootstrap(monkeypatch):
    monkeypatch.setenv("SCROLLSPY_PREFER_REDUCED_MOTION", "yes")
    monkeypatch.setattr(scrollspy.design, "reduced_motion", rm)
    monkeypatch.delitem(sys.modules, "scrollspy.design.reduced_motion")
    import scrollspy.design.reduced_motion as fresh

    assert fresh is not rm
    assert fresh.is_reduced_motion() is True
    assert fresh.resolve_behavior("auto") == "instant"
