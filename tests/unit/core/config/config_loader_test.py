# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import BaseModel

from restory.core.config.config_loader import ConfigLoader
from restory.core.exceptions import ConfigurationError

# -----------------------------------------------------------------------------
# Test Models
# -----------------------------------------------------------------------------


class SampleConfig(BaseModel):
    val: str | None = None
    number: int = 0
    flag: bool = False


# -----------------------------------------------------------------------------
# ConfigLoader Tests
# -----------------------------------------------------------------------------


def test_load_toml_exists(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('val = "test"\nnumber = 42\n')
    assert ConfigLoader.load_toml(config_file) == {"val": "test", "number": 42}


def test_load_toml_not_exists(tmp_path):
    assert ConfigLoader.load_toml(tmp_path / "missing.toml") == {}


def test_load_toml_invalid(tmp_path):
    config_file = tmp_path / "bad.toml"
    config_file.write_text("invalid toml content")
    assert ConfigLoader.load_toml(config_file) == {}


def test_load_env_lowercases_keys():
    with patch.dict(
        "os.environ",
        {"APP_VAL": "env_val", "APP_KEEP_PATCH_FILES": "1", "OTHER": "ignore"},
        clear=True,
    ):
        data = ConfigLoader.load_env("APP_")
    assert data == {"val": "env_val", "keep_patch_files": "1"}


def _run_config(sources: dict, custom: bool = False):
    with (
        patch.object(ConfigLoader, "load_toml") as mock_load_toml,
        patch.object(ConfigLoader, "load_env") as mock_load_env,
        patch("pathlib.Path.exists", return_value=True),
    ):
        mock_load_env.return_value = sources.get("env", {})
        mock_load_toml.side_effect = lambda p: sources.get(str(p), {})

        return ConfigLoader.get_full_config(
            SampleConfig,
            sources.get("args", {}),
            Path("local.toml"),
            "APP_",
            Path("global.toml"),
            Path("custom.toml") if custom else None,
        )


def test_precedence_order():
    """Args > Custom > Local > Env > Global."""
    all_sources = {
        "args": {"val": "args"},
        "custom.toml": {"val": "custom"},
        "local.toml": {"val": "local"},
        "env": {"val": "env"},
        "global.toml": {"val": "global"},
    }

    config, _, _ = _run_config(all_sources, custom=True)
    assert config.val == "args"

    del all_sources["args"]
    config, _, _ = _run_config(all_sources, custom=True)
    assert config.val == "custom"

    config, _, _ = _run_config(all_sources, custom=False)
    assert config.val == "local"

    del all_sources["local.toml"]
    config, _, _ = _run_config(all_sources)
    assert config.val == "env"

    del all_sources["env"]
    config, sources, used_defaults = _run_config(all_sources)
    assert config.val == "global"
    assert sources == ["Global Config"]
    assert used_defaults is True


def test_fields_merge_across_sources():
    config, sources, used_defaults = _run_config(
        {"args": {"val": "a"}, "env": {"number": "7"}, "global.toml": {"flag": True}}
    )
    assert (config.val, config.number, config.flag) == ("a", 7, True)
    assert sources == ["Input Args", "Environment Variables", "Global Config"]
    assert used_defaults is False


def test_missing_custom_config(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigLoader.get_full_config(
            SampleConfig,
            {},
            tmp_path / "local.toml",
            "APP_",
            tmp_path / "global.toml",
            tmp_path / "custom.toml",
        )


def test_validation_error():
    with pytest.raises(ConfigurationError):
        _run_config({"args": {"number": "not-a-number"}})
