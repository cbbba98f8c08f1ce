import pytest

from barrage.template import ConfigurationError, build_template, parse_headers


def test_parse_headers_trims_and_replaces():
    headers = parse_headers(["Accept: text/html", "X-Token:abc", "accept: application/json"])
    assert headers["Accept"] == "application/json"
    assert headers["x-token"] == "abc"
    assert len(headers) == 2


def test_header_value_may_contain_colons():
    headers = parse_headers(["Referer: http://example.com:8080/x"])
    assert headers["Referer"] == "http://example.com:8080/x"


def test_malformed_header_is_rejected():
    with pytest.raises(ConfigurationError, match="Malformed header"):
        parse_headers(["Accept: */*", "NoColonHere"])


@pytest.mark.parametrize("header", [": empty-name", "Bad Name: x", "X-A: line\r\nbreak"])
def test_invalid_header_is_rejected(header):
    with pytest.raises(ConfigurationError):
        parse_headers([header])


def test_build_template():
    t = build_template("post", "http://localhost:8080/api?x=1", ["Content-Type: application/json"], b"{}")
    assert t.method == "POST"
    assert t.url.host == "localhost"
    assert t.url.port == 8080
    assert t.headers["content-type"] == "application/json"
    assert t.body == b"{}"


@pytest.mark.parametrize("url", ["example.com/path", "ftp://example.com/", "http://"])
def test_build_template_rejects_bad_url(url):
    with pytest.raises(ConfigurationError):
        build_template("GET", url)


def test_build_template_rejects_bad_method():
    with pytest.raises(ConfigurationError):
        build_template("GE T", "http://localhost/")
