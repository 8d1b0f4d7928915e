from pathlib import Path

import pytest

from plan_commenter.config import CommenterConfig, ConfigError, build_config


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "commenter.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults():
    config = build_config()

    assert config == CommenterConfig()
    assert config.tf_plan_lookup_name == "tfplan.json"
    assert config.expand_comment is False


def test_yaml_file_and_overrides_are_layered(tmp_path):
    path = write_config(
        tmp_path,
        "tf-plan-lookup-depth: 3\nexpand_comment: true\ncomment-header: From file\n",
    )

    config = build_config(path, {"comment_header": "From flags", "quiet": None})

    assert config.tf_plan_lookup_depth == 3
    assert config.expand_comment is True
    assert config.comment_header == "From flags"
    assert config.quiet is False


def test_string_booleans_are_accepted(tmp_path):
    config = CommenterConfig().merged({"create-multiple-comments": "True"})

    assert config.create_multiple_comments is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"unknown_option": 1},
        {"expand_comment": "sometimes"},
        {"tf_plan_lookup_depth": "deep"},
        {"tf_plan_lookup_depth": -1},
        {"comment_header": 12},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(ConfigError):
        CommenterConfig().merged(overrides)


def test_invalid_yaml_raises(tmp_path):
    path = write_config(tmp_path, "key: [unterminated\n")

    with pytest.raises(ConfigError):
        build_config(path)


def test_non_mapping_yaml_raises(tmp_path):
    path = write_config(tmp_path, "- a\n- b\n")

    with pytest.raises(ConfigError):
        build_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        build_config(tmp_path / "missing.yaml")
