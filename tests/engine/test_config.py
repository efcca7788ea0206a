"""Configuration loading tests."""

from __future__ import annotations

import textwrap

import pytest

from linkresolver.engine.config import DEFAULTS, ConfigurationError, EngineConfig, LivenessOptions, load_config


def test_defaults_without_a_file():
    config = load_config(None)

    assert config.limit("top_candidates") == 30
    assert config.limit("min_live_links") == 3
    assert config.limit("narrow_pool_size") == 100
    assert config.limit("widen_pool_size") == 50
    assert config.limit("widen_top_candidates") == 20
    assert config.limit("terminal_fallback_limit") == 15
    assert config.liveness_options() == LivenessOptions(timeout_ms=5000, max_concurrent=10, retries=1)
    assert config.max_batch_urls() == 100


def test_missing_file_falls_back_to_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config.raw == DEFAULTS


def test_yaml_overrides_merge_with_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text(
        textwrap.dedent(
            """
            top_candidates: 12
            liveness:
              timeout_ms: 1500
            """
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.limit("top_candidates") == 12
    assert config.limit("widen_pool_size") == 50
    options = config.liveness_options()
    assert options.timeout_ms == 1500
    assert options.max_concurrent == 10
    assert options.timeout_seconds == 1.5


def test_loading_does_not_mutate_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("liveness:\n  retries: 4\n", encoding="utf-8")

    load_config(path)

    assert DEFAULTS["liveness"]["retries"] == 1


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path)


@pytest.mark.parametrize("value", [-1, "many", None])
def test_invalid_limits_are_rejected(engine_config, value):
    engine_config.raw["top_candidates"] = value
    with pytest.raises(ConfigurationError):
        engine_config.limit("top_candidates")


def test_invalid_liveness_section_is_rejected(engine_config):
    engine_config.raw["liveness"]["max_concurrent"] = "lots"
    with pytest.raises(ConfigurationError):
        engine_config.liveness_options()

    engine_config.raw["liveness"]["max_concurrent"] = 0
    with pytest.raises(ConfigurationError):
        engine_config.liveness_options()


def test_limits_missing_from_the_mapping_use_defaults():
    config = EngineConfig({})
    assert config.limit("widen_top_candidates") == 20
    assert config.max_batch_urls() == 100
    assert config.liveness_options().retries == 1


@pytest.mark.parametrize("value", [0, -5, "many", None])
def test_invalid_batch_sizes_are_rejected(engine_config, value):
    engine_config.raw["batch"]["max_urls"] = value
    with pytest.raises(ConfigurationError):
        engine_config.max_batch_urls()
