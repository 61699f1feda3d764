import pytest
import yaml

from ricochet.framework.config_loader import ConfigLoader, ConfigurationError
from ricochet.framework.registry import SuiteRegistry
from ricochet.framework.request_context import StepFailure


def failing(r):
    raise StepFailure("nope")


def test_register_returns_stored_suite():
    registry = SuiteRegistry()
    suite = registry.register("users")

    assert registry.get("users") is suite
    assert "users" in registry
    assert len(registry) == 1


def test_same_name_registered_twice_keeps_the_second():
    registry = SuiteRegistry()
    first = registry.register("users")
    second = registry.register("users")

    assert first is not second
    assert registry.get("users") is second
    assert list(registry) == [second]
    assert registry.names() == ["users"]


def test_redefined_suite_moves_to_end_of_run_order():
    registry = SuiteRegistry()
    registry.register("a")
    registry.register("b")
    registry.register("a")

    assert registry.names() == ["b", "a"]


def test_unknown_suite_raises_key_error():
    with pytest.raises(KeyError, match="Unknown suite: ghost"):
        SuiteRegistry().get("ghost")


def test_failed_suite_does_not_stop_the_next_one():
    calls = []
    registry = SuiteRegistry()
    registry.register("broken").add_test("fail", failing)
    registry.register("healthy").add_test("ok", lambda r: calls.append("healthy"))

    assert registry.run_all() is False
    assert calls == ["healthy"]
    assert registry.get("broken").failed is True
    assert registry.get("healthy").failed is False


def test_run_all_selected_names_in_given_order():
    calls = []
    registry = SuiteRegistry()
    for name in ["a", "b", "c"]:
        registry.register(name).add_test(name, lambda r, n=name: calls.append(n))

    assert registry.run_all(["c", "a"]) is True
    assert calls == ["c", "a"]


def test_run_all_rejects_unknown_names_before_running():
    calls = []
    registry = SuiteRegistry()
    registry.register("a").add_test("a", lambda r: calls.append("a"))

    with pytest.raises(KeyError):
        registry.run_all(["a", "missing"])
    assert calls == []


def test_config_supplies_base_url_and_timeout(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"api": {"base_url": "http://configured.example.com", "timeout": 7}}),
        encoding="utf-8",
    )
    registry = SuiteRegistry(ConfigLoader(config_path))

    suite = registry.register("configured")
    assert suite.base_url.host == "configured.example.com"
    assert suite.timeout == 7.0

    override = registry.register("override", timeout=1.5)
    assert override.timeout == 1.5


def test_invalid_configured_base_url_is_fatal(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"api": {"base_url": "not-a-url"}}), encoding="utf-8")
    registry = SuiteRegistry(ConfigLoader(config_path))

    with pytest.raises(ConfigurationError):
        registry.register("broken")
    assert "broken" not in registry
