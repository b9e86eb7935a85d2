# Unit tests for ConfigLoader and the model registry

import json
import os

import pytest

from inference.config import ConfigLoader, ModelInfo, ModelRegistry


def test_load_yaml_with_env_substitution(tmp_path, monkeypatch):
    monkeypatch.setenv("PP_OPENAI_KEY", "sk-test")
    monkeypatch.delenv("PP_UNSET", raising=False)
    path = tmp_path / "pipeline_runtime.yaml"
    path.write_text(
        "api_keys:\n"
        "  openai: ${PP_OPENAI_KEY}\n"
        "routing:\n"
        "  default_model: ${PP_UNSET:-gpt-4o-mini}\n"
        "  note: ${PP_UNSET}\n",
        encoding="utf-8",
    )

    config = ConfigLoader.load(path)

    assert config["api_keys"]["openai"] == "sk-test"
    assert config["routing"]["default_model"] == "gpt-4o-mini"
    assert config["routing"]["note"] == "${PP_UNSET}"


def test_load_json_and_errors(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"routing": {"default_provider": "openai"}}), encoding="utf-8")
    assert ConfigLoader.load(path) == {"routing": {"default_provider": "openai"}}

    with pytest.raises(FileNotFoundError):
        ConfigLoader.load(tmp_path / "missing.yaml")

    bad = tmp_path / "config.toml"
    bad.write_text("x = 1", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigLoader.load(bad)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigLoader.load(listing)


def test_find_file_upwards(tmp_path):
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    target = tmp_path / "pipeline_runtime.yml"
    target.write_text("routing: {}\n", encoding="utf-8")

    found = ConfigLoader.find_file_upwards(
        ["pipeline_runtime.yaml", "pipeline_runtime.yml"], start_path=str(nested),
    )
    assert found == str(target)
    assert ConfigLoader.find_file_upwards("nope.yaml", start_path=str(nested)) is None


@pytest.mark.parametrize("line, expected", [
    ("OPENAI_API_KEY=sk-abc", ("OPENAI_API_KEY", "sk-abc")),
    ("export LOG_LEVEL=DEBUG", ("LOG_LEVEL", "DEBUG")),
    ('GREETING="hello # not a comment"', ("GREETING", "hello # not a comment")),
    ("MODEL=gpt-4o # default", ("MODEL", "gpt-4o")),
    ("# comment", None),
    ("", None),
    ("NOT_AN_ASSIGNMENT", None),
    ("=value", None),
])
def test_parse_env_line(line, expected):
    assert ConfigLoader.parse_env_line(line) == expected


def test_load_env_file_respects_existing_values(tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("PP_ALPHA=from-file\nPP_BETA=from-file\n", encoding="utf-8")
    monkeypatch.setenv("PP_ALPHA", "from-env")
    monkeypatch.delenv("PP_BETA", raising=False)

    assert ConfigLoader.load_env_file(str(env)) == str(env)

    assert os.environ["PP_ALPHA"] == "from-env"
    assert os.environ["PP_BETA"] == "from-file"

    ConfigLoader.load_env_file(str(env), override=True)
    assert os.environ["PP_ALPHA"] == "from-file"
    os.environ.pop("PP_BETA", None)


def test_model_registry():
    registry = ModelRegistry()
    assert registry.get_model("gpt-4o-mini").supports_multimodal
    assert registry.get_model("gpt-3.5-turbo").supports_multimodal is False
    assert registry.get_model("llama3").provider == "ollama"
    assert registry.get_model("unknown-model") is None
    assert registry.get_model("") is None
    assert registry.get_model("llama3").supports_json_mode is False

    registry.register_model(ModelInfo("Local", "ollama", "qwen2"))
    assert registry.get_model("qwen2").name == "Local"
    assert registry.get_model("qwen2").supports_json_mode
