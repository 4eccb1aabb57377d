"""
Tests for blob text decoding in plugins/storage/text_decoding.py.
"""

import pytest

from ..text_decoding import EncodingSelector, decode_blob_text


@pytest.mark.parametrize("name", ["ascii", "ASCII", "Ascii"])
def test_ascii_selector_any_case(name):
    assert EncodingSelector.parse(name) is EncodingSelector.ASCII
    assert decode_blob_text(b"hi", name) == "hi"


@pytest.mark.parametrize("name", [None, "utf8", "utf-8", "latin-1", ""])
def test_other_selectors_use_utf8(name):
    assert EncodingSelector.parse(name) is EncodingSelector.UTF8


def test_utf8_decodes_multibyte():
    assert decode_blob_text("héllo".encode("utf-8"), None) == "héllo"


def test_invalid_utf8_bytes_become_replacement_character():
    assert decode_blob_text(b"ok\xff", "utf8") == "ok�"


def test_non_ascii_bytes_become_question_marks():
    assert decode_blob_text(b"ok\xe9", "ascii") == "ok?"
    assert decode_blob_text("héllo".encode("utf-8"), "ASCII") == "h??llo"
