"""
Analyses tarifaires pour l'administration.

Ce module fournit :
- un résumé de l'historique des prix calculés (`price_history`) :
  volumes, valeur totale avant / après ajustements, usage des règles,
- une mise en tableau du calendrier tarifaire (un jour par ligne).
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
import pandas as pd  # type: ignore

from .models import PriceCalculationResult
from .seasonal_pricing import round_price

RECENT_HISTORY_LIMIT = 50


def _column_sum(df: pd.DataFrame, column: str) -> float:
    if column not in df.columns:
        return 0.0
    return float(pd.to_numeric(df[column], errors="coerce").fillna(0).sum())


def summarize_price_history(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Résume les lignes de `price_history` (plus récentes d'abord).

    Colonnes utilisées :
    - base_price
    - final_price
    - applied_rules (liste de {name, multiplier, type})
    """
    df = pd.DataFrame(records)

    if df.empty:
        total_base = 0.0
        total_final = 0.0
        rule_usage: Dict[str, int] = {}
    else:
        total_base = _column_sum(df, "base_price")
        total_final = _column_sum(df, "final_price")

        rules = df["applied_rules"] if "applied_rules" in df.columns else pd.Series(dtype=object)
        names = (
            rules.dropna()
            .explode()
            .dropna()
            .map(lambda rule: rule.get("name") if isinstance(rule, dict) else None)
            .dropna()
        )
        rule_usage = {str(name): int(count) for name, count in names.value_counts().items()}

    total_adjustment = total_final - total_base
    average_adjustment_percent = (
        (total_adjustment / total_base) * 100 if total_base > 0 else 0.0
    )

    return {
        "summary": {
            "totalBookings": int(len(df)),
            "totalBaseValue": total_base,
            "totalFinalValue": total_final,
            "totalAdjustment": total_adjustment,
            "averageAdjustmentPercent": round_price(average_adjustment_percent),
        },
        "ruleUsage": rule_usage,
        "recentHistory": records[:RECENT_HISTORY_LIMIT],
    }


def calendar_to_dataframe(calendar: Dict[str, PriceCalculationResult]) -> pd.DataFrame:
    """
    Met un calendrier tarifaire sous forme de dataframe indexé par date.

    Colonnes : base_price, final_price, seasonal_adjustment, dynamic_adjustment,
    weekend_adjustment, total_adjustments, applied_rules (noms séparés par ', ').
    """
    rows = []
    for day, result in calendar.items():
        rows.append(
            {
                "date": day,
                "base_price": result.base_price,
                "final_price": result.final_price,
                "seasonal_adjustment": result.breakdown.seasonal_adjustment,
                "dynamic_adjustment": result.breakdown.dynamic_adjustment,
                "weekend_adjustment": result.breakdown.weekend_adjustment,
                "total_adjustments": result.breakdown.total_adjustments,
                "applied_rules": ", ".join(rule.name for rule in result.applied_rules),
            }
        )

    columns = [
        "date",
        "base_price",
        "final_price",
        "seasonal_adjustment",
        "dynamic_adjustment",
        "weekend_adjustment",
        "total_adjustments",
        "applied_rules",
    ]
    return pd.DataFrame(rows, columns=columns).set_index("date")


def summarize_calendar(calendar: Dict[str, PriceCalculationResult]) -> Dict[str, Any]:
    """Prix min / max / moyen sur la période du calendrier."""
    if not calendar:
        return {"days": 0, "minPrice": None, "maxPrice": None, "averagePrice": None}

    prices = calendar_to_dataframe(calendar)["final_price"].to_numpy(dtype=float)
    return {
        "days": int(prices.size),
        "minPrice": float(np.min(prices)),
        "maxPrice": float(np.max(prices)),
        "averagePrice": round_price(float(np.mean(prices))),
    }
