"""Tests for voucherdesk.toml loading."""

from pathlib import Path

import pytest

from voucherdesk.config import CONFIG_FILENAME, ConfigError, find_config, load_config


def test_defaults_without_file(tmp_path: Path) -> None:
    config = load_config(None, base_dir=tmp_path)
    assert config.threshold == 5
    assert config.amount_pence == 290
    assert config.data_dir == tmp_path.resolve() / ".voucherdesk"


def test_values_from_file(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        '[desk]\nthreshold = 6\namount_pence = 300\nschool_name = "Oakfield Café"\ndata_dir = "state"\n',
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.threshold == 6
    assert config.amount_pence == 300
    assert config.school_name == "Oakfield Café"
    assert config.data_dir == tmp_path.resolve() / "state"


@pytest.mark.parametrize(
    "body",
    [
        "[desk]\nthreshold = 0\n",
        "[desk]\namount_pence = -5\n",
        "[desk]\nthreshold = true\n",
        "[desk]\nschool_name = \"\"\n",
        "[desk\nthreshold = 5\n",
    ],
)
def test_invalid_config(tmp_path: Path, body: str) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_find_config_walks_up(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("[desk]\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()
