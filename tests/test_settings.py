from __future__ import annotations

import logging
import textwrap
from decimal import Decimal

import pytest

from supermarket_sim.exceptions import SettingsError
from supermarket_sim.settings import Settings


def write(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def test_defaults():
    s = Settings.load(env={})
    assert s.receipt_dir == "receipts"
    assert s.layout_path is None
    assert s.pricing.senior_age == 60
    assert s.pricing.adult_age == 18
    assert s.pricing.food_discount_rate == Decimal("0.20")


def test_yaml_file(tmp_path):
    path = write(
        tmp_path,
        """
        receipt_dir: out/receipts
        log_level: INFO
        pricing:
          senior_age: 65
          food_discount_rate: 0.25
        """,
    )
    s = Settings.load(path, env={})

    assert s.receipt_dir == "out/receipts"
    assert s.log_level == "INFO"
    assert s.pricing.senior_age == 65
    assert s.pricing.food_discount_rate == Decimal("0.25")
    assert s.pricing.beverage_discount_rate == Decimal("0.10")


def test_env_overrides_file(tmp_path):
    path = write(tmp_path, "receipt_dir: from-file\npricing:\n  senior_age: 65\n")
    env = {"SM_RECEIPT_DIR": "from-env", "SM_SENIOR_AGE": "70", "SM_LOG_LEVEL": "debug"}
    s = Settings.load(path, env=env)

    assert s.receipt_dir == "from-env"
    assert s.pricing.senior_age == 70
    assert s.log_level == "DEBUG"


def test_settings_file_from_env(tmp_path):
    path = write(tmp_path, "receipt_dir: via-env-file\n")
    s = Settings.load(env={"SM_SETTINGS_FILE": str(path)})
    assert s.receipt_dir == "via-env-file"


def test_invalid_env_values_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        s = Settings.load(env={"SM_ADULT_AGE": "eighteen", "SM_BEVERAGE_DISCOUNT": "1.5"})

    assert s.pricing.adult_age == 18
    assert s.pricing.beverage_discount_rate == Decimal("0.10")
    assert any("SM_ADULT_AGE" in r.getMessage() for r in caplog.records)


def test_missing_file_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        s = Settings.load(tmp_path / "nope.yaml", env={})
    assert s.receipt_dir == "receipts"
    assert any("not found" in r.getMessage() for r in caplog.records)


def test_unknown_keys_warn(tmp_path, caplog):
    path = write(tmp_path, "receipt_dir: x\ncolour: blue\n")
    with caplog.at_level(logging.WARNING):
        s = Settings.load(path, env={})
    assert s.receipt_dir == "x"
    assert any("colour" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "text",
    [
        "receipt_dir: [unclosed\n",
        "- just\n- a list\n",
        "pricing: 5\n",
        "pricing:\n  food_discount_rate: 2\n",
        "pricing:\n  loyalty_points: 3\n",
    ],
)
def test_bad_files_raise(tmp_path, text):
    path = write(tmp_path, text)
    with pytest.raises(SettingsError):
        Settings.load(path, env={})


def test_as_dict_round_trips_through_from_dict():
    saved = Settings(receipt_dir="r", log_level="INFO")
    again = Settings.from_dict(saved.as_dict())
    assert again == saved
