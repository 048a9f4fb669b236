"""
Module: tests/unit/test_window.py

What:
    Exercise :class:`mboxiter.core.window.DecodeWindow` directly against small
    byte sources: chunked decoding, carried-over partial characters, capacity
    limits, compaction, and decode error reporting.

Why:
    Every message the cursor hands out is sliced from this window. An error
    offset pointing at the wrong byte, or a partial character lost between two
    chunks, would corrupt or misreport every later message.

How:
    Write raw bytes to temporary files, open them with
    :func:`mboxiter.core.source.open_source`, and drive ``refill`` with chunk
    sizes chosen to split multi-byte sequences.

Invariants & Safety Rules:
    - ``len(window.text)`` never exceeds the capacity.
    - Error offsets are absolute byte positions in the file.
"""

import contextlib

import pytest

from mboxiter.core.source import open_source
from mboxiter.core.window import DecodeResult, DecodeWindow


def _refill(path, window):
    with contextlib.closing(open_source(path)) as source:
        return window.refill(source)


def test_refill_decodes_whole_small_file(make_mbox):
    path = make_mbox("ăîș € 😀\n")
    window = DecodeWindow("utf-8", 100)
    result = _refill(path, window)
    assert result.ok
    assert window.text == "ăîș € 😀\n"
    assert window.exhausted
    assert result.bytes_consumed == path.stat().st_size
    assert result.chars_decoded == len("ăîș € 😀\n")


@pytest.mark.parametrize("chunk", [1, 2, 3, 4, 5])
def test_chunk_size_does_not_change_decoded_text(make_mbox, chunk):
    text = "€😀ăa" * 10
    path = make_mbox(text)
    window = DecodeWindow("utf-8", 1000, chunk_bytes=chunk)
    assert _refill(path, window).ok
    assert window.text == text
    assert window.remainder == b""


def test_partial_character_is_kept_as_remainder():
    """
    What:
        Feed the first two bytes of a three byte character, then the last one.

    Why:
        The undecoded tail must be visible state, carried into the next decode
        call and never dropped or emitted twice.
    """
    window = DecodeWindow("utf-8", 10)
    assert window._decode(b"a\xe2\x82", final=False) is None
    assert window.text == "a"
    assert window.remainder == b"\xe2\x82"
    assert window._decode(b"\xac", final=False) is None
    assert window.text == "a€"
    assert window.remainder == b""


def test_refill_stops_at_capacity_and_resumes_after_compact(make_mbox):
    path = make_mbox("a€b")
    window = DecodeWindow("utf-8", 2, chunk_bytes=2)
    with contextlib.closing(open_source(path)) as source:
        first = window.refill(source)
        assert first.ok
        assert window.text == "a€"
        assert window.byte_offset == 4
        assert not window.exhausted
        assert window.room == 0
        window.compact(2)
        assert window.text == ""
        second = window.refill(source)
    assert second.ok
    assert window.text == "b"
    assert window.exhausted


def test_refill_on_exhausted_window_is_a_no_op(make_mbox):
    path = make_mbox("abc")
    window = DecodeWindow("utf-8", 10)
    with contextlib.closing(open_source(path)) as source:
        window.refill(source)
        again = window.refill(source)
    assert again.ok
    assert (again.chars_decoded, again.bytes_consumed) == (0, 0)
    assert window.text == "abc"


def test_empty_file_is_exhausted_immediately(make_mbox):
    window = DecodeWindow("utf-8", 10)
    result = _refill(make_mbox(b""), window)
    assert result.ok
    assert window.exhausted
    assert window.text == ""


def test_malformed_input_reports_absolute_offset(make_mbox):
    """
    What:
        Place an invalid UTF-8 start byte after valid text and decode in two
        byte chunks.

    Why:
        The offset must point at the offending byte in the file, not at an
        index inside the chunk that happened to contain it.

    How:
        The first chunk decodes cleanly, so the text before the error stays in
        the window while ``byte_offset`` stays at the failing chunk.
    """
    path = make_mbox(b"ab\xffcd")
    window = DecodeWindow("utf-8", 100, chunk_bytes=2)
    result = _refill(path, window)
    assert result.result is DecodeResult.MALFORMED_INPUT
    assert not result.ok
    assert result.error_offset == 2
    assert result.chars_decoded == 2
    assert window.text == "ab"
    assert window.byte_offset == 2


def test_truncated_final_sequence_is_malformed(make_mbox):
    path = make_mbox(b"ab\xe2\x82")
    window = DecodeWindow("utf-8", 100, chunk_bytes=1)
    result = _refill(path, window)
    assert result.result is DecodeResult.MALFORMED_INPUT
    assert result.error_offset == 2
    assert window.text == "ab"


def test_unmappable_byte_is_reported_separately(make_mbox):
    # 0x81 is undefined in cp1252.
    path = make_mbox(b"ok\x81")
    window = DecodeWindow("cp1252", 100)
    result = _refill(path, window)
    assert result.result is DecodeResult.UNMAPPABLE_CHARACTER
    assert result.error_offset == 2
    assert "undefined" in result.reason


def test_utf16_without_byte_order_mark_is_malformed(make_mbox):
    path = make_mbox("ab".encode("utf-16-le"))
    window = DecodeWindow("utf-16", 100)
    result = _refill(path, window)
    assert result.result is DecodeResult.MALFORMED_INPUT
    assert result.error_offset == 0


def test_compact_validates_offset():
    window = DecodeWindow("utf-8", 10)
    window._decode(b"abcdef", final=False)
    window.compact(0)
    assert window.text == "abcdef"
    window.compact(2)
    assert window.text == "cdef"
    with pytest.raises(ValueError):
        window.compact(5)


def test_window_rejects_non_positive_sizes():
    with pytest.raises(ValueError):
        DecodeWindow("utf-8", 0)
    with pytest.raises(ValueError):
        DecodeWindow("utf-8", 10, chunk_bytes=0)


def test_charset_name_is_canonical():
    assert DecodeWindow("UTF8", 10).charset == "utf-8"
    assert DecodeWindow("latin-1", 10).charset == "iso8859-1"


@pytest.mark.parametrize("charset", ["utf-16", "utf-8-sig"])
def test_encode_never_repeats_the_byte_order_mark(charset):
    """
    What:
        Encode several pieces of text through one window.

    Why:
        The mark belongs to the start of the file only; every later encode
        must produce the same bytes the file holds for that text.
    """
    window = DecodeWindow(charset, 10)
    raw = "one\ntwo\n".encode(charset)
    first, second = window.encode("one\n"), window.encode("two\n")
    assert raw.endswith(first + second)
    assert len(raw) - len(first + second) == (2 if charset == "utf-16" else 3)
    assert window.encode("two\n") == second


def test_encode_resets_stateful_charsets():
    window = DecodeWindow("iso-2022-jp", 10)
    encoded = window.encode("日本\n")
    assert encoded.decode("iso-2022-jp") == "日本\n"
    assert window.encode("日本\n") == encoded
