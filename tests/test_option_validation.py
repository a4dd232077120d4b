import logging

import pytest

from scrollspy.app.config_store import SpyOptions
from scrollspy.design.validation import (
    sanitize_behavior,
    sanitize_hysteresis,
    sanitize_ids,
    sanitize_offset,
    sanitize_selector,
    sanitize_threshold,
    sanitize_throttle,
    sanitize_trigger_policy,
)


@pytest.fixture
def warnings(caplog):
    caplog.set_level(logging.WARNING, logger="scrollspy")
    return caplog


def test_threshold_clamped_with_warning(warnings):
    assert sanitize_threshold(2) == 1.0
    assert "Threshold 2 clamped to [0, 1]." in warnings.text


def test_invalid_numbers_use_defaults(warnings):
    assert sanitize_threshold(float("nan")) == 0.6
    assert sanitize_hysteresis("lots") == 150.0
    assert len(warnings.records) == 2


def test_none_means_default_without_warning(warnings):
    assert sanitize_threshold(None) == 0.6
    assert sanitize_throttle(None) == 10.0
    assert warnings.records == []


def test_ranges():
    assert sanitize_hysteresis(-5) == 0.0
    assert sanitize_throttle(5000) == 1000.0
    assert sanitize_threshold(0.25) == 0.25


def test_offsets():
    assert sanitize_offset(50) == 50
    assert sanitize_offset(20000) == 10000.0
    assert sanitize_offset(-20000) == -10000.0
    assert sanitize_offset(" 10% ") == "10%"
    assert sanitize_offset("900%") == "500%"
    assert sanitize_offset("abc") == "8%"
    assert sanitize_offset(True) == "8%"
    assert sanitize_offset(None) == "8%"


def test_ids_are_trimmed_and_deduplicated(warnings):
    assert sanitize_ids(["a", " b ", "", "a", 3]) == ("a", "b")
    assert 'Duplicate id "a" detected. Skipping.' in warnings.text
    assert sanitize_ids("abc") == ()
    assert sanitize_ids(None) == ()


def test_selector_behavior_policy(warnings):
    assert sanitize_selector("  sec-.* ") == "sec-.*"
    assert sanitize_selector(5) == ""
    assert sanitize_selector("   ") == ""
    assert "Empty selector provided." in warnings.text
    assert sanitize_behavior("fast") == "auto"
    assert sanitize_behavior("instant") == "instant"
    assert sanitize_trigger_policy("weird") == "fixed"
    assert sanitize_trigger_policy("progressive") == "progressive"


def test_options_sanitized():
    opts = SpyOptions(threshold=3, hysteresis=-1, offset="-900%").sanitized()
    assert opts.threshold == 1.0
    assert opts.hysteresis == 0.0
    assert opts.offset == "-500%"
