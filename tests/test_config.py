from pathlib import Path

import pytest

from scaffold.errors import ConfigError
from scaffold.run.config import GeneratorConfig, load_config


def test_defaults():
    config = load_config(env={})
    assert config == GeneratorConfig()
    assert config.models_import == "models"
    assert config.base_url == "{{base_url}}"


def test_yaml_file_then_env_then_overrides(tmp_path):
    path = tmp_path / "scaffold.yaml"
    path.write_text(
        "scaffold:\n"
        "  output_dir: out\n"
        "  model_package: app.models\n"
        "  generate_accessors: false\n"
        "  base_url: http://localhost:8080\n",
        encoding="utf-8",
    )
    env = {"SCAFFOLD_BASE_URL": "http://staging", "SCAFFOLD_WIRE_NAME_ANNOTATIONS": "no"}

    config = load_config(path, overrides={"test_package": "it", "output_dir": None}, env=env)

    assert config.output_dir == Path("out")
    assert config.model_package == "app.models"
    assert config.model_dir == Path("app/models")
    assert config.models_import == "app.models"
    assert config.generate_accessors is False
    assert config.wire_name_annotations is False
    assert config.base_url == "http://staging"
    assert config.test_package == "it"


def test_top_level_yaml_without_section(tmp_path):
    path = tmp_path / "scaffold.yaml"
    path.write_text("model_import_package: shop.models\n", encoding="utf-8")
    assert load_config(path, env={}).models_import == "shop.models"


def test_unknown_key_is_rejected(tmp_path):
    path = tmp_path / "scaffold.yaml"
    path.write_text("use_lombok: true\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_bad_values_are_rejected():
    with pytest.raises(ConfigError):
        load_config(env={"SCAFFOLD_GENERATE_ACCESSORS": "maybe"})
    with pytest.raises(ConfigError):
        load_config(overrides={"model_package": "not-a-package"}, env={})


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml", env={})
