"""
Accès aux données nécessaires au moteur de pricing du resort.

Ce module fournit une couche d'abstraction entre le moteur et la base
Supabase/PostgreSQL :
- règles saisonnières (`seasonal_pricing_rules`),
- configurations de pricing (`system_settings`, clés `dynamic_pricing`
  et `weekend_pricing`),
- occupation des chalets (`chalets`, `chalet_bookings`) et de la piscine
  (`pool_daily_capacity`),
- historique des prix calculés (`price_history`).

IMPORTANT :
- Le client Supabase est injecté dans les stores. `get_supabase_client()`
  construit un client partagé depuis les variables d'environnement
  (`SUPABASE_URL` et `SUPABASE_SERVICE_ROLE_KEY`) pour le serveur.
- Les erreurs d'accès aux données sont propagées (`PricingDataAccessError`),
  aucun retry n'est fait ici.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from supabase import Client, create_client  # type: ignore

from ..config import (
    DYNAMIC_PRICING_KEY,
    WEEKEND_PRICING_KEY,
    DynamicPricingConfig,
    Settings,
    WeekendPricingConfig,
)
from ..models import RULE_UPDATE_COLUMNS, SeasonalPricingRule

logger = logging.getLogger(__name__)

RULES_TABLE = "seasonal_pricing_rules"
SETTINGS_TABLE = "system_settings"

# Statuts de réservation comptés dans l'occupation
OCCUPYING_BOOKING_STATUSES = ["confirmed", "checked_in"]


class PricingDataAccessError(RuntimeError):
    """Erreur remontée par Supabase lors d'une lecture ou d'une écriture."""


_supabase_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Retourne un client Supabase initialisé pour le resort.

    Le client est créé une seule fois puis réutilisé.
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    settings = settings or Settings.from_env()
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError(
            "Les variables d'environnement SUPABASE_URL et SUPABASE_SERVICE_ROLE_KEY/SUPABASE_KEY "
            "doivent être configurées pour utiliser le moteur de pricing."
        )

    _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase_client


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _response_data(response: Any) -> Any:
    """
    Extrait `data` d'une réponse Supabase.

    `maybe_single()` peut renvoyer None (aucune ligne) selon la version du client.
    """
    if response is None:
        return None
    if not hasattr(response, "data"):
        raise PricingDataAccessError("Réponse Supabase invalide: pas d'attribut 'data'")
    return response.data


class SupabaseRuleStore:
    """
    Règles saisonnières et configurations de pricing stockées dans Supabase.

    Implémente le port `RuleStore` consommé par le moteur, ainsi que les
    opérations CRUD utilisées par l'administration.
    """

    def __init__(self, client: Client):
        self.client = client

    # ------------------------------------------------------------------
    # Règles saisonnières
    # ------------------------------------------------------------------

    def list_seasonal_rules(self) -> List[SeasonalPricingRule]:
        """Toutes les règles, triées par priorité décroissante."""
        try:
            response = (
                self.client.table(RULES_TABLE)
                .select("*")
                .order("priority", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch seasonal pricing rules: {e}")
            raise PricingDataAccessError("Failed to fetch seasonal pricing rules") from e

        rows = _response_data(response) or []
        return [SeasonalPricingRule.from_row(row) for row in rows]

    def list_active_seasonal_rules(self) -> List[SeasonalPricingRule]:
        return [rule for rule in self.list_seasonal_rules() if rule.is_active]

    def create_seasonal_rule(self, rule: SeasonalPricingRule) -> SeasonalPricingRule:
        """Insère une règle et renvoie la ligne créée (avec son id)."""
        try:
            response = (
                self.client.table(RULES_TABLE)
                .insert(rule.to_row())
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to create seasonal pricing rule: {e}")
            raise PricingDataAccessError("Failed to create seasonal pricing rule") from e

        rows = _response_data(response) or []
        if not rows:
            raise PricingDataAccessError("Failed to create seasonal pricing rule")

        created = SeasonalPricingRule.from_row(rows[0])
        logger.info(f"Seasonal pricing rule created: {created.name} ({created.id})")
        return created

    def update_seasonal_rule(self, rule_id: str, updates: Dict[str, Any]) -> None:
        """
        Mise à jour partielle d'une règle.

        `updates` est au format API (camelCase) ; seules les clés présentes
        sont écrites, les clés inconnues sont ignorées.
        """
        update_data = {
            column: updates[key]
            for key, column in RULE_UPDATE_COLUMNS.items()
            if key in updates
        }
        if not update_data:
            logger.debug(f"No updatable field for seasonal pricing rule {rule_id}")
            return

        try:
            (
                self.client.table(RULES_TABLE)
                .update(update_data)
                .eq("id", rule_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update seasonal pricing rule {rule_id}: {e}")
            raise PricingDataAccessError("Failed to update seasonal pricing rule") from e

        logger.info(f"Seasonal pricing rule updated: {rule_id}")

    def delete_seasonal_rule(self, rule_id: str) -> None:
        try:
            self.client.table(RULES_TABLE).delete().eq("id", rule_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete seasonal pricing rule {rule_id}: {e}")
            raise PricingDataAccessError("Failed to delete seasonal pricing rule") from e

        logger.info(f"Seasonal pricing rule deleted: {rule_id}")

    # ------------------------------------------------------------------
    # Configurations (`system_settings`)
    # ------------------------------------------------------------------

    def _get_setting(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table(SETTINGS_TABLE)
                .select("value")
                .eq("key", key)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch setting '{key}': {e}")
            raise PricingDataAccessError(f"Failed to fetch setting '{key}'") from e

        data = _response_data(response)
        if not data:
            return None
        return data.get("value")

    def get_dynamic_pricing_config(self) -> Optional[DynamicPricingConfig]:
        value = self._get_setting(DYNAMIC_PRICING_KEY)
        if not value:
            return None
        return DynamicPricingConfig.from_dict(value)

    def update_dynamic_pricing_config(self, config: DynamicPricingConfig) -> None:
        """Upsert de la configuration dynamique sur la clé `dynamic_pricing`."""
        record = {
            "key": DYNAMIC_PRICING_KEY,
            "value": config.to_dict(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            (
                self.client.table(SETTINGS_TABLE)
                .upsert(record, on_conflict="key")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update dynamic pricing config: {e}")
            raise PricingDataAccessError("Failed to update dynamic pricing config") from e

        logger.info("Dynamic pricing configuration updated")

    def get_weekend_pricing_config(self) -> Optional[WeekendPricingConfig]:
        value = self._get_setting(WEEKEND_PRICING_KEY)
        if not value:
            return None
        return WeekendPricingConfig.from_dict(value)

    # ------------------------------------------------------------------
    # Historique des prix
    # ------------------------------------------------------------------

    def get_price_history(self, days: int = 30, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Lignes de `price_history` des `days` derniers jours, plus récentes d'abord.
        """
        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=days)).isoformat()
        try:
            response = (
                self.client.table("price_history")
                .select("*")
                .gte("recorded_at", since)
                .order("recorded_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch pricing analytics: {e}")
            raise PricingDataAccessError("Failed to fetch pricing analytics") from e

        return _response_data(response) or []


class SupabaseOccupancySource:
    """
    Taux d'occupation calculé depuis les tables de réservation.

    - chalets : chalets réservés (séjour contenant la date, statut confirmé
      ou en cours) / chalets actifs,
    - piscine : compteur journalier `pool_daily_capacity`,
    - restaurant : pas de mesure d'occupation (None).
    """

    def __init__(self, client: Client):
        self.client = client

    def get_occupancy_percentage(self, item_type: str, day: date) -> Optional[float]:
        date_str = day.isoformat()

        try:
            if item_type == "chalets":
                return self._get_chalet_occupancy(date_str)
            if item_type == "pool":
                return self._get_pool_occupancy(date_str)
        except PricingDataAccessError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch occupancy for {item_type} on {date_str}: {e}")
            raise PricingDataAccessError(f"Failed to fetch occupancy for {item_type}") from e

        return None

    def _get_chalet_occupancy(self, date_str: str) -> Optional[float]:
        total_response = (
            self.client.table("chalets")
            .select("*", count="exact", head=True)
            .eq("status", "active")
            .execute()
        )
        total_chalets = total_response.count or 0
        if total_chalets <= 0:
            return None

        booked_response = (
            self.client.table("chalet_bookings")
            .select("*", count="exact", head=True)
            .lte("check_in_date", date_str)
            .gt("check_out_date", date_str)
            .in_("status", OCCUPYING_BOOKING_STATUSES)
            .execute()
        )
        booked_chalets = booked_response.count or 0

        return (booked_chalets / total_chalets) * 100

    def _get_pool_occupancy(self, date_str: str) -> Optional[float]:
        response = (
            self.client.table("pool_daily_capacity")
            .select("current_count, max_capacity")
            .eq("date", date_str)
            .maybe_single()
            .execute()
        )
        data = _response_data(response)
        if not data:
            return None

        max_capacity = _safe_float(data.get("max_capacity"))
        current_count = _safe_float(data.get("current_count")) or 0.0
        if not max_capacity or max_capacity <= 0:
            return None

        return (current_count / max_capacity) * 100
