"""
Sous-package `models` : modèle de données du moteur de pricing.

- `pricing_rule.py` : règles saisonnières (format base et format API),
- `price_result.py` : résultat d'un calcul de prix et son détail.
"""

from .price_result import (
    RULE_TYPE_DYNAMIC,
    RULE_TYPE_EARLY_BIRD,
    RULE_TYPE_LAST_MINUTE,
    RULE_TYPE_SEASONAL,
    RULE_TYPE_WEEKEND,
    AppliedRule,
    PriceBreakdown,
    PriceCalculationResult,
)
from .pricing_rule import RULE_UPDATE_COLUMNS, SeasonalPricingRule

__all__ = [
    "AppliedRule",
    "PriceBreakdown",
    "PriceCalculationResult",
    "RULE_TYPE_DYNAMIC",
    "RULE_TYPE_EARLY_BIRD",
    "RULE_TYPE_LAST_MINUTE",
    "RULE_TYPE_SEASONAL",
    "RULE_TYPE_WEEKEND",
    "RULE_UPDATE_COLUMNS",
    "SeasonalPricingRule",
]
