from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import yaml

from .checkout.pricing import PricingPolicy
from .exceptions import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILE_ENV = "SM_SETTINGS_FILE"


def _as_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e


def _rate(value: Any) -> Decimal:
    rate = _as_decimal(value)
    if not Decimal("0") <= rate <= Decimal("1"):
        raise ValueError(f"Discount rate must be between 0 and 1, got {value!r}")
    return rate


@dataclass
class Settings:
    """Runtime settings for a simulator session.

    Sources, lowest priority first:
    - dataclass defaults
    - a YAML file (explicit path, or env SM_SETTINGS_FILE)
    - environment variables with the SM_ prefix
    """

    receipt_dir: str = "receipts"
    layout_path: Optional[str] = None
    catalog_path: Optional[str] = None
    log_level: str = "WARNING"
    pricing: PricingPolicy = field(default_factory=PricingPolicy)

    # ------------------------ Loading & Overrides ------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        allowed = {f.name for f in dataclasses.fields(cls)} - {"pricing"}
        unknown = set(data) - allowed - {"pricing"}
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
        filtered = {k: v for k, v in data.items() if k in allowed}
        pricing_raw = data.get("pricing") or {}
        if not isinstance(pricing_raw, dict):
            raise SettingsError("'pricing' must be a mapping")
        try:
            pricing = _pricing_from(PricingPolicy(), pricing_raw)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Invalid pricing settings: {e}") from e
        return cls(pricing=pricing, **filtered)

    @staticmethod
    def env_overrides(env: Optional[Mapping[str, str]] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Collect SM_* overrides as (top-level, pricing) dictionaries."""
        env = os.environ if env is None else env
        top: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            "SM_RECEIPT_DIR": ("receipt_dir", str),
            "SM_LAYOUT_PATH": ("layout_path", str),
            "SM_CATALOG_PATH": ("catalog_path", str),
            "SM_LOG_LEVEL": ("log_level", lambda v: v.strip().upper()),
        }
        pricing: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            "SM_SENIOR_AGE": ("senior_age", int),
            "SM_ADULT_AGE": ("adult_age", int),
            "SM_FOOD_DISCOUNT": ("food_discount_rate", _rate),
            "SM_BEVERAGE_DISCOUNT": ("beverage_discount_rate", _rate),
        }
        out_top: Dict[str, Any] = {}
        out_pricing: Dict[str, Any] = {}
        for mapping, out in ((top, out_top), (pricing, out_pricing)):
            for var, (name, conv) in mapping.items():
                if var not in env:
                    continue
                try:
                    out[name] = conv(env[var])
                except ValueError as e:
                    logger.warning("Ignoring invalid %s=%r: %s", var, env[var], e)
        return out_top, out_pricing

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        data: Dict[str, Any] = {}
        file_path = Path(path) if path is not None else (Path(env[SETTINGS_FILE_ENV]) if env.get(SETTINGS_FILE_ENV) else None)
        if file_path is not None:
            if file_path.exists():
                try:
                    with file_path.open("r", encoding="utf-8") as f:
                        data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise SettingsError(f"Could not parse settings file {file_path}: {e}") from e
                if not isinstance(data, dict):
                    raise SettingsError(f"Settings file {file_path} must contain a mapping")
                logger.info("Loaded settings from %s", file_path)
            else:
                logger.warning("Settings file not found: %s; using defaults", file_path)

        settings = cls.from_dict(data)
        top, pricing = cls.env_overrides(env)
        for name, value in top.items():
            setattr(settings, name, value)
        if pricing:
            settings.pricing = dataclasses.replace(settings.pricing, **pricing)
        logger.debug("Settings resolved: %s", settings)
        return settings

    def as_dict(self) -> Dict[str, Any]:
        return {
            "receipt_dir": self.receipt_dir,
            "layout_path": self.layout_path,
            "catalog_path": self.catalog_path,
            "log_level": self.log_level,
            "pricing": {
                "senior_age": self.pricing.senior_age,
                "adult_age": self.pricing.adult_age,
                "food_discount_rate": str(self.pricing.food_discount_rate),
                "beverage_discount_rate": str(self.pricing.beverage_discount_rate),
            },
        }


def _pricing_from(base: PricingPolicy, raw: Mapping[str, Any]) -> PricingPolicy:
    converters: Dict[str, Callable[[Any], Any]] = {
        "senior_age": int,
        "adult_age": int,
        "food_discount_rate": _rate,
        "beverage_discount_rate": _rate,
        "restricted_prefix": lambda v: str(v).strip().upper(),
    }
    values = {}
    for key, value in raw.items():
        if key not in converters:
            raise ValueError(f"unknown pricing key {key!r}")
        values[key] = converters[key](value)
    return dataclasses.replace(base, **values)


__all__ = ["SETTINGS_FILE_ENV", "Settings"]
