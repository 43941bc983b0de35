"""
Résultat d'un calcul de prix.

Ces objets sont dérivés (jamais persistés) et purement descriptifs : la liste
des règles appliquées sert à l'affichage et à l'audit, pas au recalcul.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

# Types de règles appliquées
RULE_TYPE_SEASONAL = "seasonal"
RULE_TYPE_DYNAMIC = "dynamic"
RULE_TYPE_WEEKEND = "weekend"
RULE_TYPE_EARLY_BIRD = "early_bird"
RULE_TYPE_LAST_MINUTE = "last_minute"


@dataclass
class AppliedRule:
    name: str
    multiplier: float
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "multiplier": self.multiplier, "type": self.type}


@dataclass
class PriceBreakdown:
    """Détail des ajustements, chaque composante arrondie à 2 décimales."""

    base_price: float
    seasonal_adjustment: float = 0.0
    dynamic_adjustment: float = 0.0
    weekend_adjustment: float = 0.0
    total_adjustments: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "basePrice": self.base_price,
            "seasonalAdjustment": self.seasonal_adjustment,
            "dynamicAdjustment": self.dynamic_adjustment,
            "weekendAdjustment": self.weekend_adjustment,
            "totalAdjustments": self.total_adjustments,
        }


@dataclass
class PriceCalculationResult:
    base_price: float
    final_price: float
    breakdown: PriceBreakdown
    applied_rules: List[AppliedRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Format JSON renvoyé à l'API (camelCase)."""
        return {
            "basePrice": self.base_price,
            "finalPrice": self.final_price,
            "appliedRules": [rule.to_dict() for rule in self.applied_rules],
            "breakdown": self.breakdown.to_dict(),
        }
