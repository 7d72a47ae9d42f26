"""Tests for food name normalization."""

from macro_tracker.services.normalize import normalize_name


def test_normalize_trims_lowercases_and_collapses() -> None:
    assert normalize_name("  Greek\t  Yogurt \n") == "greek yogurt"


def test_normalize_empty_string() -> None:
    assert normalize_name("") == ""
    assert normalize_name("   ") == ""


def test_normalize_is_idempotent() -> None:
    once = normalize_name(" Peanut   BUTTER ")
    assert normalize_name(once) == once
