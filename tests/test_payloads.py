"""Tests for data URI and inline payload helpers."""

import base64

import pytest

from scriptreel.services.payloads import (
    decode_data_uri,
    file_to_data_uri,
    first_inline_payload,
    parse_mime,
    split_data_uri,
    write_data_uri,
)

from .conftest import PNG_BYTES, empty_response, inline_response


def test_split_data_uri():
    assert split_data_uri("data:image/jpeg;base64,QUJD") == ("image/jpeg", "QUJD")


def test_split_rejects_plain_urls():
    with pytest.raises(ValueError):
        split_data_uri("https://example.com/a.png")


def test_first_inline_payload_skips_text_parts():
    assert first_inline_payload(inline_response()) == (PNG_BYTES, "image/png")
    assert first_inline_payload(empty_response()) is None
    assert first_inline_payload(None) is None


def test_base64_string_payloads_are_decoded():
    encoded = base64.b64encode(b"pcm").decode()

    assert first_inline_payload(inline_response(encoded, "audio/L16")) == (b"pcm", "audio/L16")


def test_parse_mime_parameters():
    assert parse_mime("audio/L16;codec=pcm;rate=24000") == (
        "audio/l16", {"codec": "pcm", "rate": "24000"}
    )
    assert parse_mime(None) == (None, {})


def test_file_round_trip(tmp_path):
    source = tmp_path / "face.png"
    source.write_bytes(PNG_BYTES)

    uri = file_to_data_uri(source)
    target = write_data_uri(uri, tmp_path / "out" / "copy.png")

    assert decode_data_uri(uri)[0] == "image/png"
    assert target.read_bytes() == PNG_BYTES
