import pytest

from linkaudit.app.url_parts import Param, decompose
from linkaudit.config import DEMO_LINKS
from linkaudit.errors import InvalidUrl


def test_decompose_normalizes_scheme_host_and_path():
    parsed = decompose("  HTTPS://Example.COM  ")
    assert parsed.scheme == "https"
    assert parsed.host == "example.com"
    assert parsed.path == "/"
    assert parsed.path_segments == ()
    assert parsed.href == "https://example.com/"


def test_query_params_keep_order_and_duplicates():
    parsed = decompose("https://a.com/x?b=1&a=2&b=3&empty=")
    assert parsed.query_params == (Param("b", "1"), Param("a", "2"), Param("b", "3"), Param("empty", ""))


def test_path_segments_skip_empty_parts():
    parsed = decompose("https://a.com/one//two/")
    assert parsed.path_segments == ("one", "two")


def test_port_and_origin():
    parsed = decompose("http://Example.com:8080/a?q=1#frag")
    assert parsed.port == 8080
    assert parsed.origin == "http://example.com:8080"
    assert parsed.href == "http://example.com:8080/a?q=1#frag"
    assert parsed.host_labels == ("example", "com")


@pytest.mark.parametrize("raw", [
    "",
    "not a url",
    "example.com/path",
    "mailto:someone@example.com",
    "http://",
    "https://example.com:99999/",
])
def test_invalid_urls_raise(raw):
    with pytest.raises(InvalidUrl):
        decompose(raw)


def test_invalid_url_is_a_value_error():
    with pytest.raises(ValueError):
        decompose("nope")


@pytest.mark.parametrize("url", DEMO_LINKS)
def test_href_round_trips(url):
    href = decompose(url).href
    assert decompose(href).href == href


def test_href_percent_encodes_spaces_and_non_ascii():
    parsed = decompose("https://example.com/a b/café?q=grüne welle#top")
    assert parsed.href == "https://example.com/a%20b/caf%C3%A9?q=gr%C3%BCne%20welle#top"
    assert parsed.path_segments == ("a%20b", "caf%C3%A9")
    assert parsed.query_params == (Param("q", "grüne welle"),)


def test_existing_escapes_are_not_encoded_twice():
    assert decompose("https://t.co/xyz123?ref_src=twsrc%5Etfw").href == "https://t.co/xyz123?ref_src=twsrc%5Etfw"
