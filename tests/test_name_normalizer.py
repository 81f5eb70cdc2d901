"""Tests for name normalization."""

from shopping_planner.name_normalizer import name_sort_key, normalize_name


def test_normalize_name():
    """Identity keys ignore case and surrounding whitespace."""
    assert normalize_name("  Whole Milk ") == "whole milk"
    assert normalize_name("MILK") == normalize_name("milk")


def test_normalize_keeps_inner_spacing():
    """Inner whitespace is significant."""
    assert normalize_name("Oat  Milk") != normalize_name("Oat Milk")


def test_sort_ignores_case():
    """Lowercase names don't sort after uppercase ones."""
    names = ["banana", "Apple", "cherry"]
    assert sorted(names, key=name_sort_key) == ["Apple", "banana", "cherry"]


def test_sort_ignores_accents():
    """Accented letters sort with their base letter."""
    names = ["Zucchini", "Éclair", "Fig"]
    assert sorted(names, key=name_sort_key) == ["Éclair", "Fig", "Zucchini"]


def test_case_breaks_ties():
    """A lowercase name sorts before the same name capitalized."""
    assert sorted(["Milk", "milk"], key=name_sort_key) == ["milk", "Milk"]
