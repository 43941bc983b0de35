"""
Validateurs des règles saisonnières et de la configuration dynamique.

Appliqués à l'écriture (création / mise à jour depuis l'administration) :
le moteur, lui, ne valide rien à la lecture.
"""

import logging
import re
from datetime import date
from typing import Any, Dict

from .config import ITEM_TYPES

logger = logging.getLogger(__name__)

MM_DD_REGEX = re.compile(r"^\d{2}-\d{2}$")

MIN_RULE_MULTIPLIER = 0.1
MAX_RULE_MULTIPLIER = 3.0


class RuleValidationError(ValueError):
    """Donnée de règle ou de configuration refusée à l'écriture."""


def is_valid_mm_dd(value: Any) -> bool:
    """
    Vérifie le format `MM-DD` et que le jour existe.

    Le 29 février est accepté (année bissextile de référence).
    """
    if not isinstance(value, str) or not MM_DD_REGEX.match(value):
        return False

    month, day = (int(part) for part in value.split("-"))
    try:
        date(2000, month, day)
    except ValueError:
        return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_multiplier(value: Any) -> None:
    if not _is_number(value):
        raise RuleValidationError("Price multiplier must be a number")
    if value < MIN_RULE_MULTIPLIER or value > MAX_RULE_MULTIPLIER:
        raise RuleValidationError(
            f"Price multiplier must be between {MIN_RULE_MULTIPLIER:g} and {MAX_RULE_MULTIPLIER:g}"
        )


def _validate_applicable_to(value: Any) -> None:
    if not isinstance(value, list) or not value:
        raise RuleValidationError("applicableTo must be a non-empty list")
    unknown = [item for item in value if item not in ITEM_TYPES]
    if unknown:
        raise RuleValidationError(f"Unknown item types in applicableTo: {unknown}")


def validate_rule_payload(data: Dict[str, Any]) -> None:
    """
    Valide un payload de création de règle (format API, camelCase).

    Raises:
        RuleValidationError: si un champ est absent ou invalide
    """
    if not data.get("name") or not data.get("startDate") or not data.get("endDate"):
        raise RuleValidationError("Name, start date, and end date are required")

    if not is_valid_mm_dd(data["startDate"]) or not is_valid_mm_dd(data["endDate"]):
        raise RuleValidationError("Dates must be in MM-DD format")

    if "priceMultiplier" not in data:
        raise RuleValidationError("Price multiplier is required")
    _validate_multiplier(data["priceMultiplier"])

    if data.get("applicableTo") is not None:
        _validate_applicable_to(data["applicableTo"])


def validate_rule_updates(updates: Dict[str, Any]) -> None:
    """Valide une mise à jour partielle : seuls les champs présents sont vérifiés."""
    if "name" in updates and not updates["name"]:
        raise RuleValidationError("Name cannot be empty")

    if "startDate" in updates and not is_valid_mm_dd(updates["startDate"]):
        raise RuleValidationError("Start date must be in MM-DD format")

    if "endDate" in updates and not is_valid_mm_dd(updates["endDate"]):
        raise RuleValidationError("End date must be in MM-DD format")

    if "priceMultiplier" in updates:
        _validate_multiplier(updates["priceMultiplier"])

    if "applicableTo" in updates:
        _validate_applicable_to(updates["applicableTo"])


def validate_dynamic_config_payload(data: Dict[str, Any]) -> None:
    """
    Valide une configuration dynamique (format API, camelCase).

    - seuils d'occupation entre 0 et 100,
    - plage de multiplicateurs : 0.1 <= min <= max <= 3
      (côté absent : 0.5 pour le min, 2 pour le max).
    """
    for key, label in (
        ("minOccupancyThreshold", "Min occupancy threshold"),
        ("maxOccupancyThreshold", "Max occupancy threshold"),
    ):
        value = data.get(key)
        if value is not None and not _is_number(value):
            raise RuleValidationError(f"{label} must be a number")
        if value is not None and (value < 0 or value > 100):
            raise RuleValidationError(f"{label} must be between 0 and 100")

    if data.get("minPriceMultiplier") is not None or data.get("maxPriceMultiplier") is not None:
        low = data.get("minPriceMultiplier")
        high = data.get("maxPriceMultiplier")
        for value in (low, high):
            if value is not None and not _is_number(value):
                raise RuleValidationError("Price multipliers must be numbers")
        low = 0.5 if low is None else low
        high = 2.0 if high is None else high
        if low < MIN_RULE_MULTIPLIER or high > MAX_RULE_MULTIPLIER or low > high:
            raise RuleValidationError("Invalid price multiplier range")

    for key in ("earlyBirdDiscount", "lastMinutePremium"):
        value = data.get(key)
        if value is not None and not _is_number(value):
            raise RuleValidationError(f"{key} must be a number")
        if value is not None and abs(value) >= 1:
            logger.warning(f"{key}={value} looks like a percentage, expected a fraction")
