"""
Serveur Python persistant pour le moteur de pricing du resort.

Ce script initialise le moteur au démarrage et attend les requêtes via stdin.
Il est conçu pour être robuste : si une requête plante, le serveur loggue l'erreur
mais ne s'arrête pas.

Communication :
- Entrée : JSON ligne par ligne sur stdin, {"action": "...", ...paramètres}
- Sortie : JSON ligne par ligne sur stdout
- Logs : stderr

Actions :
- calculate           : itemType, itemId, basePrice, checkInDate[, checkOutDate]
- calendar            : itemType, itemId, basePrice, startDate, endDate
- listRules
- createRule          : rule (camelCase)
- updateRule          : ruleId, updates (camelCase)
- deleteRule          : ruleId
- getDynamicConfig
- updateDynamicConfig : config (camelCase)
- analytics           : days (défaut 30)
"""

import json
import logging
import math
import os
import sys
import traceback
from typing import Any, Callable, Dict, Optional

from .analytics import summarize_calendar, summarize_price_history
from .config import (
    ITEM_TYPES,
    DynamicPricingConfig,
    Settings,
    get_default_dynamic_pricing_config,
)
from .interfaces.data_access import (
    SupabaseOccupancySource,
    SupabaseRuleStore,
    get_supabase_client,
)
from .models import SeasonalPricingRule
from .seasonal_pricing import SeasonalPricingEngine
from .validators import (
    validate_dynamic_config_payload,
    validate_rule_payload,
    validate_rule_updates,
)

logger = logging.getLogger(__name__)


class PricingRequestHandler:
    """
    Traduit les requêtes JSON en appels au moteur et au stockage des règles.
    """

    def __init__(self, engine: SeasonalPricingEngine, rule_store: SupabaseRuleStore):
        self.engine = engine
        self.rule_store = rule_store
        self._actions: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "calculate": self.calculate,
            "calendar": self.calendar,
            "listRules": self.list_rules,
            "createRule": self.create_rule,
            "updateRule": self.update_rule,
            "deleteRule": self.delete_rule,
            "getDynamicConfig": self.get_dynamic_config,
            "updateDynamicConfig": self.update_dynamic_config,
            "analytics": self.analytics,
        }

    def process_request(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Traite une requête JSON unique.

        Format attendu :
        {
            "action": "calculate",
            "itemType": "chalets",
            "itemId": "uuid",
            "basePrice": 200.0,
            "checkInDate": "2024-07-12"
        }

        Retourne :
        {
            "status": "success",
            "data": {...}
        }
        """
        action = data.get("action")
        if not action:
            raise ValueError("action est requise")

        handler = self._actions.get(action)
        if handler is None:
            raise ValueError(f"Action inconnue: {action}")

        return {"status": "success", "data": handler(data)}

    @staticmethod
    def _require(data: Dict[str, Any], *fields: str) -> None:
        missing = [field for field in fields if data.get(field) in (None, "")]
        if missing:
            raise ValueError(f"Paramètres requis manquants: {', '.join(missing)}")

    @staticmethod
    def _item_type(data: Dict[str, Any]) -> str:
        item_type = data["itemType"]
        if item_type not in ITEM_TYPES:
            raise ValueError(f"itemType invalide: {item_type}")
        return item_type

    @staticmethod
    def _base_price(data: Dict[str, Any]) -> float:
        """Prix de base fini et positif (0 accepté)."""
        try:
            base_price = float(data["basePrice"])
        except (TypeError, ValueError):
            raise ValueError(f"basePrice invalide: {data['basePrice']!r}")
        if not math.isfinite(base_price) or base_price < 0:
            raise ValueError(f"basePrice invalide: {data['basePrice']!r}")
        return base_price

    def calculate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require(data, "itemType", "itemId", "basePrice", "checkInDate")

        result = self.engine.calculate_price(
            item_type=self._item_type(data),
            item_id=str(data["itemId"]),
            base_price=self._base_price(data),
            check_in_date=data["checkInDate"],
            check_out_date=data.get("checkOutDate") or None,
        )
        return result.to_dict()

    def calendar(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require(data, "itemType", "itemId", "basePrice", "startDate", "endDate")

        calendar = self.engine.get_pricing_calendar(
            item_type=self._item_type(data),
            item_id=str(data["itemId"]),
            base_price=self._base_price(data),
            start_date=data["startDate"],
            end_date=data["endDate"],
        )
        return {
            "calendar": {day: result.to_dict() for day, result in calendar.items()},
            "summary": summarize_calendar(calendar),
        }

    def list_rules(self, data: Dict[str, Any]) -> Any:
        return [rule.to_dict() for rule in self.rule_store.list_seasonal_rules()]

    def create_rule(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = data.get("rule") or {}
        validate_rule_payload(payload)

        created = self.rule_store.create_seasonal_rule(SeasonalPricingRule.from_dict(payload))
        return created.to_dict()

    def update_rule(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require(data, "ruleId")
        updates = data.get("updates") or {}
        validate_rule_updates(updates)

        self.rule_store.update_seasonal_rule(str(data["ruleId"]), updates)
        return {"message": "Rule updated successfully"}

    def delete_rule(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require(data, "ruleId")

        self.rule_store.delete_seasonal_rule(str(data["ruleId"]))
        return {"message": "Rule deleted successfully"}

    def get_dynamic_config(self, data: Dict[str, Any]) -> Dict[str, Any]:
        config = self.rule_store.get_dynamic_pricing_config() or get_default_dynamic_pricing_config()
        return config.to_dict()

    def update_dynamic_config(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = data.get("config") or {}
        validate_dynamic_config_payload(payload)

        self.rule_store.update_dynamic_pricing_config(DynamicPricingConfig.from_dict(payload))
        return {"message": "Configuration updated successfully"}

    def analytics(self, data: Dict[str, Any]) -> Dict[str, Any]:
        days = int(data.get("days") or 30)
        return summarize_price_history(self.rule_store.get_price_history(days=days))


def build_handler(settings: Optional[Settings] = None) -> PricingRequestHandler:
    """Construit le moteur et ses dépendances Supabase."""
    settings = settings or Settings.from_env()
    client = get_supabase_client(settings)
    rule_store = SupabaseRuleStore(client)
    engine = SeasonalPricingEngine(
        rule_store=rule_store,
        occupancy_source=SupabaseOccupancySource(client),
        settings=settings,
    )
    return PricingRequestHandler(engine, rule_store)


def handle_line(handler: PricingRequestHandler, line: str) -> Dict[str, Any]:
    """
    Traite une ligne brute et renvoie la réponse (succès ou erreur).

    Les exceptions ne remontent jamais : elles deviennent un JSON d'erreur
    pour que l'appelant puisse rejeter sa Promise proprement.
    """
    try:
        request_data = json.loads(line)
        if not isinstance(request_data, dict):
            raise ValueError("La requête doit être un objet JSON")
        return handler.process_request(request_data)
    except Exception as e:
        logger.error(f"Erreur traitement requête: {e}")
        logger.debug(f"Traceback: {traceback.format_exc()}")
        return {
            "error": str(e),
            "status": "error",
            "type": type(e).__name__,
        }


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Service Python Pricing Engine démarré (PID: {os.getpid()})")

    handler = build_handler(settings)

    # Boucle infinie de lecture sur stdin
    while True:
        try:
            line = sys.stdin.readline()
            if not line:
                break  # Fin du flux (le process parent a fermé stdin)

            line = line.strip()
            if not line:
                continue

            response_data = handle_line(handler, line)
            sys.stdout.write(json.dumps(response_data) + "\n")
            sys.stdout.flush()

        except KeyboardInterrupt:
            break
        except Exception as global_error:
            logger.critical(f"Erreur critique boucle principale: {global_error}")
            logger.critical(f"Traceback: {traceback.format_exc()}")


if __name__ == "__main__":
    main()
