import pytest

from optimuspii.utils.domains import canonicalize_domain, decode_hostname, host_matches, registrable_label


@pytest.mark.parametrize(
    "value,expected",
    [
        ("WWW.Example.COM", "example.com"),
        ("https://www.example.com:8443/path?q=1", "example.com"),
        ("example.com.", "example.com"),
        ("  ", ""),
    ],
)
def test_canonicalize_domain(value, expected):
    assert canonicalize_domain(value) == expected


def test_registrable_label_uses_public_suffix():
    assert registrable_label("www.paypal.co.uk") == "paypal"
    assert registrable_label("login.apple.com") == "apple"
    assert registrable_label("localhost") == "localhost"
    assert registrable_label("") == ""


def test_decode_hostname():
    assert decode_hostname("xn--pple-43d.com") == "аpple.com"
    assert decode_hostname("example.com") == "example.com"
    assert decode_hostname("") == ""


def test_host_matches_label_boundaries():
    assert host_matches("google.com", ["google.com"])
    assert host_matches("mail.google.com", ["GOOGLE.com."])
    assert not host_matches("notgoogle.com", ["google.com"])
    assert not host_matches("", ["google.com"])
    assert not host_matches("google.com", ["", None])
