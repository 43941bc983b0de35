"""
Règle de pricing saisonnière.

Une règle couvre une plage de dates récurrente chaque année (format `MM-DD`)
et applique un multiplicateur au prix de base. L'ajustement est additif :
`prix_base * (multiplicateur - 1)`, les règles qui matchent s'additionnent.

Le format de la base (snake_case, table `seasonal_pricing_rules`) et le format
JSON exposé à l'API (camelCase) sont gérés ici.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class SeasonalPricingRule:
    """Règle saisonnière telle que stockée dans `seasonal_pricing_rules`."""

    id: Optional[str]
    name: str
    start_date: str  # MM-DD
    end_date: str  # MM-DD
    price_multiplier: float  # ex: 1.5 pour +50 %
    applicable_to: List[str] = field(default_factory=lambda: ["chalets"])
    specific_items: Optional[List[str]] = None
    # Ordre d'évaluation / d'affichage uniquement, toutes les règles qui matchent s'appliquent
    priority: int = 0
    is_active: bool = True

    def applies_to_item(self, item_type: str, item_id: str) -> bool:
        """
        Vérifie le type d'unité puis la liste blanche d'items (si présente).

        Une liste blanche vide n'autorise aucun item.
        """
        if item_type not in (self.applicable_to or []):
            return False
        if self.specific_items is not None and item_id not in self.specific_items:
            return False
        return True

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SeasonalPricingRule":
        """
        Construit une règle depuis une ligne Supabase.

        Un `price_multiplier` NULL donne une règle neutre (1.0).
        """
        multiplier = row.get("price_multiplier")
        if multiplier is None:
            logger.warning(f"Rule {row.get('id')} has no price_multiplier, treated as 1.0")
            multiplier = 1.0

        return cls(
            id=row.get("id"),
            name=row.get("name", ""),
            start_date=row.get("start_date", ""),
            end_date=row.get("end_date", ""),
            price_multiplier=float(multiplier),
            applicable_to=list(row.get("applicable_to") or []),
            specific_items=row.get("specific_items"),
            priority=int(row.get("priority") or 0),
            is_active=bool(row.get("is_active", True)),
        )

    def to_row(self) -> Dict[str, Any]:
        """Format d'insertion dans `seasonal_pricing_rules` (sans l'id)."""
        return {
            "name": self.name,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "price_multiplier": self.price_multiplier,
            "applicable_to": self.applicable_to,
            "specific_items": self.specific_items,
            "priority": self.priority,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeasonalPricingRule":
        """Construit une règle depuis un payload API (camelCase)."""
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            start_date=data.get("startDate", ""),
            end_date=data.get("endDate", ""),
            price_multiplier=float(data.get("priceMultiplier", 1.0)),
            applicable_to=list(data.get("applicableTo") or ["chalets"]),
            specific_items=data.get("specificItems"),
            priority=int(data.get("priority") or 0),
            is_active=bool(data.get("isActive", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "priceMultiplier": self.price_multiplier,
            "applicableTo": self.applicable_to,
            "specificItems": self.specific_items,
            "priority": self.priority,
            "isActive": self.is_active,
        }


# Correspondance payload API -> colonnes, pour les mises à jour partielles
RULE_UPDATE_COLUMNS: Dict[str, str] = {
    "name": "name",
    "startDate": "start_date",
    "endDate": "end_date",
    "priceMultiplier": "price_multiplier",
    "applicableTo": "applicable_to",
    "specificItems": "specific_items",
    "priority": "priority",
    "isActive": "is_active",
}
