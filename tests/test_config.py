import pytest

from tests.models import Pair, Point
from xmlmarshal import MarshalSettings, Marshaller

ENV_VARS = [
    "XMLMARSHAL_FORMATTED_OUTPUT",
    "XMLMARSHAL_ENCODING",
    "XMLMARSHAL_INDENT",
    "XMLMARSHAL_NEWLINE",
    "XMLMARSHAL_NAMESPACE_PREFIX",
    "XMLMARSHAL_SHORT_EMPTY_ELEMENTS",
    "XMLMARSHAL_CACHE_CONTEXTS",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = MarshalSettings()
    assert settings.formatted_output is True
    assert settings.encoding == "UTF-8"
    assert settings.indent == "    "
    assert settings.newline == "\n"
    assert settings.namespace_prefix == "ns0"
    assert settings.short_empty_elements is False
    assert settings.cache_contexts is False


def test_frozen():
    settings = MarshalSettings()
    with pytest.raises(Exception):
        settings.indent = "  "  # type: ignore[misc]


def test_env_overrides_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XMLMARSHAL_FORMATTED_OUTPUT", "false")
    monkeypatch.setenv("XMLMARSHAL_NAMESPACE_PREFIX", "t")
    monkeypatch.setenv("XMLMARSHAL_CACHE_CONTEXTS", "true")
    settings = MarshalSettings()
    assert settings.formatted_output is False
    assert settings.namespace_prefix == "t"
    assert settings.cache_contexts is True


def test_kwargs_override_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XMLMARSHAL_ENCODING", "ISO-8859-1")
    assert MarshalSettings(encoding="UTF-8").encoding == "UTF-8"


def test_empty_namespace_prefix_is_rejected():
    with pytest.raises(Exception):
        MarshalSettings(namespace_prefix="")


def test_encoding_is_declared():
    xml = Marshaller(settings=MarshalSettings(encoding="ISO-8859-1")).marshal_to_string(Point(1, 2))
    assert xml.startswith('<?xml version="1.0" encoding="ISO-8859-1"?>')


def test_env_settings_reach_the_marshaller(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XMLMARSHAL_NAMESPACE_PREFIX", "p")
    monkeypatch.setenv("XMLMARSHAL_FORMATTED_OUTPUT", "false")
    xml = Marshaller().marshal_to_string(Pair("a", "b"), "urn:test", "pair")
    assert xml.endswith(
        '<p:pair xmlns:p="urn:test"><first>a</first><second>b</second></p:pair>'
    )
