"""Tests for small helper utilities."""

from utils.helpers import clean_text, field_label, field_placeholder, file_stem


def test_clean_text_collapses_whitespace():
    assert clean_text("  婦人   靴 \n") == "婦人 靴"


def test_clean_text_none():
    assert clean_text(None) == ""


def test_file_stem_replaces_unsafe_chars():
    assert file_stem("a/b: c") == "a_b_c"


def test_file_stem_default():
    assert file_stem("   ") == "market"


def test_field_labels():
    assert field_label("company") == "会社名"
    assert field_placeholder("market") == "例: 婦人靴"
    assert field_label("other") == "other"
