"""
Tests for address classification and normalization.

can_handle() must reject each failing condition on its own (scheme, host,
suffix, route prefix), and normalize() must only ever touch the route
prefix of the path.
"""

import pytest

from hitomi_metadata.address import can_handle, normalize


# --- can_handle: accepted addresses ---

@pytest.mark.parametrize("address", [
    "https://hitomi.la/galleries/1083230.html",
    "http://hitomi.la/galleries/1083230.html",
    "https://hitomi.la/reader/1083230.html",
    "HTTPS://HITOMI.LA/GALLERIES/1083230.HTML",
    "https://hitomi.la/Reader/1083230.Html#3",
    "https://hitomi.la/galleries/1083230.html?page=2",
    "https://hitomi.la:443/galleries/1083230.html",
])
def test_accepts_gallery_and_reader_addresses(address):
    assert can_handle(address) is True


# --- can_handle: each condition fails on its own ---

def test_rejects_wrong_scheme():
    assert can_handle("ftp://hitomi.la/galleries/1083230.html") is False
    assert can_handle("file:///galleries/1083230.html") is False


def test_rejects_wrong_host():
    assert can_handle("https://example.com/galleries/1083230.html") is False
    assert can_handle("https://aa.hitomi.la/galleries/1083230.html") is False
    assert can_handle("https://hitomi.la.evil.com/galleries/1083230.html") is False


def test_rejects_wrong_suffix():
    assert can_handle("https://hitomi.la/galleries/1083230.htm") is False
    assert can_handle("https://hitomi.la/galleries/1083230") is False


def test_rejects_wrong_route_prefix():
    assert can_handle("https://hitomi.la/tag/female%3Aglasses-all.html") is False
    assert can_handle("https://hitomi.la/index-japanese.html") is False
    assert can_handle("https://hitomi.la/gallery/1083230.html") is False


@pytest.mark.parametrize("address", [
    "",
    "not a url",
    "https://",
    "https://[::1/galleries/1.html",
    "https://hitomi..la/galleries/1.html",
    None,
    42,
])
def test_malformed_input_returns_false(address):
    assert can_handle(address) is False


# --- normalize ---

def test_normalize_rewrites_reader_to_gallery():
    assert normalize("https://hitomi.la/reader/12345.html") == "https://hitomi.la/galleries/12345.html"


def test_normalize_keeps_gallery_address():
    address = "https://hitomi.la/galleries/12345.html"
    assert normalize(address) == address


@pytest.mark.parametrize("address", [
    "https://hitomi.la/reader/12345.html",
    "HTTP://Hitomi.La/READER/12345.html",
    "https://hitomi.la/galleries/12345.html#7",
    "https://hitomi.la/reader/12345.html?x=/reader/#/reader/",
])
def test_normalize_is_idempotent(address):
    assert can_handle(address)
    once = normalize(address)
    assert normalize(once) == once


def test_normalize_only_changes_the_path():
    address = "HTTPS://Hitomi.La:443/reader/12345.html?next=/reader/1.html#/reader/"
    result = normalize(address)

    assert result == "HTTPS://Hitomi.La:443/galleries/12345.html?next=/reader/1.html#/reader/"
    # scheme/authority prefix and query+fragment suffix are byte-identical
    assert result.startswith("HTTPS://Hitomi.La:443/")
    assert result.endswith("?next=/reader/1.html#/reader/")


# --- normalize sees the same address as can_handle ---

@pytest.mark.parametrize("address", [
    " https://hitomi.la/reader/12345.html",
    "https://hitomi.la/reader/12345.html\n",
    "\thttps://hitomi.la/reader/12345.html ",
    "https://hitomi.la/re\tader/12345.html",
])
def test_normalize_trims_what_can_handle_trims(address):
    assert can_handle(address)
    assert normalize(address) == "https://hitomi.la/galleries/12345.html"


@pytest.mark.parametrize("address", [
    "https://hitomi.la/%72eader/12345.html",
    "https://hitomi.la/%52%45ADER/12345.html",
    "https://hitomi.la/reader%2F12345.html",
])
def test_normalize_decodes_percent_encoded_reader_route(address):
    assert can_handle(address)
    assert normalize(address) == "https://hitomi.la/galleries/12345.html"


def test_normalize_keeps_encoding_after_the_route():
    address = "https://hitomi.la/%72eader/%E3%81%82-12345.html?q=%72eader"
    assert normalize(address) == "https://hitomi.la/galleries/%E3%81%82-12345.html?q=%72eader"


def test_normalize_only_rewrites_the_leading_route():
    address = "https://hitomi.la/galleries/reader/1.html"
    assert normalize(address) == address
