"""
Tests unitaires pour validators.py
"""

import pytest

from resort_pricing.validators import (
    RuleValidationError,
    is_valid_mm_dd,
    validate_dynamic_config_payload,
    validate_rule_payload,
    validate_rule_updates,
)


class TestIsValidMmDd:
    @pytest.mark.parametrize("value", ["01-01", "12-31", "02-29", "07-15"])
    def test_valid(self, value):
        assert is_valid_mm_dd(value) is True

    @pytest.mark.parametrize("value", ["1-1", "13-01", "02-30", "00-10", "07/15", "", None, 715])
    def test_invalid(self, value):
        assert is_valid_mm_dd(value) is False


class TestValidateRulePayload:
    """Tests pour validate_rule_payload."""

    @pytest.fixture
    def payload(self):
        return {
            "name": "Summer Peak",
            "startDate": "07-01",
            "endDate": "08-31",
            "priceMultiplier": 1.4,
            "applicableTo": ["chalets", "pool"],
        }

    def test_valid_payload(self, payload):
        validate_rule_payload(payload)

    @pytest.mark.parametrize("missing", ["name", "startDate", "endDate"])
    def test_required_fields(self, payload, missing):
        del payload[missing]
        with pytest.raises(RuleValidationError, match="required"):
            validate_rule_payload(payload)

    def test_date_format(self, payload):
        payload["startDate"] = "7-1"
        with pytest.raises(RuleValidationError, match="MM-DD"):
            validate_rule_payload(payload)

    @pytest.mark.parametrize("multiplier", [0.05, 3.5, "1.2", True])
    def test_multiplier_range(self, payload, multiplier):
        payload["priceMultiplier"] = multiplier
        with pytest.raises(RuleValidationError):
            validate_rule_payload(payload)

    def test_unknown_item_type(self, payload):
        payload["applicableTo"] = ["spa"]
        with pytest.raises(RuleValidationError, match="spa"):
            validate_rule_payload(payload)


class TestValidateRuleUpdates:
    def test_only_present_fields_checked(self):
        validate_rule_updates({"priority": 3})
        validate_rule_updates({"isActive": False})

    def test_invalid_end_date(self):
        with pytest.raises(RuleValidationError, match="End date"):
            validate_rule_updates({"endDate": "31-12"})

    def test_invalid_multiplier(self):
        with pytest.raises(RuleValidationError):
            validate_rule_updates({"priceMultiplier": 0})


class TestValidateDynamicConfigPayload:
    def test_valid(self):
        validate_dynamic_config_payload(
            {
                "enabled": True,
                "minOccupancyThreshold": 30,
                "maxOccupancyThreshold": 80,
                "minPriceMultiplier": 0.85,
                "maxPriceMultiplier": 1.25,
            }
        )

    def test_threshold_out_of_range(self):
        with pytest.raises(RuleValidationError, match="Max occupancy"):
            validate_dynamic_config_payload({"maxOccupancyThreshold": 120})

    def test_inverted_multiplier_range(self):
        with pytest.raises(RuleValidationError, match="multiplier range"):
            validate_dynamic_config_payload({"minPriceMultiplier": 1.5, "maxPriceMultiplier": 1.2})

    def test_missing_side_uses_default(self):
        # min absent -> 0.5, max 1.2 : valide
        validate_dynamic_config_payload({"maxPriceMultiplier": 1.2})
        # max absent -> 2, min 2.5 : invalide
        with pytest.raises(RuleValidationError):
            validate_dynamic_config_payload({"minPriceMultiplier": 2.5})

    @pytest.mark.parametrize(
        "payload",
        [
            {"minOccupancyThreshold": "50"},
            {"maxOccupancyThreshold": True},
            {"minPriceMultiplier": "0.8"},
            {"maxPriceMultiplier": [1.2]},
            {"earlyBirdDiscount": "0.1"},
        ],
    )
    def test_non_numeric_values(self, payload):
        with pytest.raises(RuleValidationError, match="must be"):
            validate_dynamic_config_payload(payload)
