import pytest

from edgeconf.backends import Backend, parse_backends
from edgeconf.errors import (
    BackendConfigError,
    BackendConfigErrorKind,
    InvalidBackendDefinition,
)


def _error(table):
    with pytest.raises(InvalidBackendDefinition) as info:
        parse_backends(table)
    return info.value


def test_simple_backends_are_read():
    backends = parse_backends(
        {
            "dog": {"url": "http://localhost:7878/dog-mocks"},
            "shark.server": {
                "url": "http://localhost:7878/shark-mocks",
                "override_host": "somehost.com",
            },
            "detective": {"url": "http://www.elementary.org/"},
        }
    )
    assert set(backends) == {"dog", "shark.server", "detective"}
    assert backends["dog"].uri == "http://localhost:7878/dog-mocks"
    assert backends["dog"].override_host is None
    assert backends["shark.server"].uri == "http://localhost:7878/shark-mocks"
    assert backends["shark.server"].override_host == "somehost.com"


def test_empty_table_gives_no_backends():
    assert parse_backends({}) == {}


def test_backend_configs_must_use_tables():
    err = _error({"shark": "https://a.com"})
    assert err.name == "shark"
    assert err.err.kind is BackendConfigErrorKind.INVALID_ENTRY_TYPE


def test_unrecognized_keys_are_rejected():
    err = _error({"shark": {"url": "https://a.com", "shrimp": True}})
    assert err.err.kind is BackendConfigErrorKind.UNRECOGNIZED_KEY
    assert err.err.detail == "shrimp"


def test_first_unrecognized_key_in_order_is_reported():
    err = _error({"shark": {"url": "https://a.com", "zeta": 1, "alpha": 2}})
    assert err.err.detail == "alpha"


def test_url_is_required():
    err = _error({"shark": {}})
    assert err.err.kind is BackendConfigErrorKind.MISSING_URL
    assert str(err) == "invalid configuration for 'shark': missing 'url' field"


def test_url_must_be_a_string():
    err = _error({"shark": {"url": 3}})
    assert err.err.kind is BackendConfigErrorKind.INVALID_URL_ENTRY


def test_url_must_be_valid():
    err = _error({"shark": {"url": "http:://[:::1]"}})
    assert err.err.kind is BackendConfigErrorKind.INVALID_URL
    assert str(err.err).startswith("invalid url: ")


@pytest.mark.parametrize("url", ["", "http://exa mple.com/", "http://a.com:port/"])
def test_other_invalid_urls(url):
    with pytest.raises(BackendConfigError) as info:
        Backend.from_table({"url": url})
    assert info.value.kind is BackendConfigErrorKind.INVALID_URL


def test_override_host_must_be_a_string():
    err = _error({"shark": {"url": "http://a.com", "override_host": 3}})
    assert err.err.kind is BackendConfigErrorKind.INVALID_OVERRIDE_HOST_ENTRY


@pytest.mark.parametrize("host", ["", "   "])
def test_override_host_must_not_be_empty(host):
    err = _error({"shark": {"url": "http://a.com", "override_host": host}})
    assert err.err.kind is BackendConfigErrorKind.EMPTY_OVERRIDE_HOST


def test_override_host_must_be_a_valid_header_value():
    err = _error({"shark": {"url": "http://a.com", "override_host": "somehost.com\n"}})
    assert err.err.kind is BackendConfigErrorKind.INVALID_OVERRIDE_HOST


def test_from_table_does_not_mutate_input():
    table = {"url": "http://a.com", "override_host": "otherhost.com"}
    backend = Backend.from_table(table)
    assert backend == Backend("http://a.com", "otherhost.com")
    assert table == {"url": "http://a.com", "override_host": "otherhost.com"}


def test_error_chain_keeps_cause():
    err = _error({"shark": {"url": 3}})
    assert err.__cause__ is err.err