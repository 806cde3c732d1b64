"""
Pricing Catalog
===============
Per-token model pricing loaded from a YAML document.
"""

from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from pydantic import ValidationError

from usage_billing.config import get_settings
from usage_billing.exceptions import PricingNotFoundError
from usage_billing.schemas.usage import ModelPricing

logger = structlog.get_logger()


class PricingCatalog:
    """
    Pricing source keyed by model identifier.

    Expects a ``models`` mapping of model id to ``input_token_price`` and
    ``output_token_price`` (currency major unit per token).
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or get_settings().pricing_config_path
        self._models: dict[str, ModelPricing] = {}
        self._load_pricing()

    def _load_pricing(self) -> None:
        """Load pricing configuration from YAML file."""
        config_file = Path(self.config_path)

        if not config_file.exists():
            logger.warning("Pricing config not found, catalog is empty", path=self.config_path)
            self._models = {}
            return

        with open(config_file) as f:
            data = yaml.safe_load(f) or {}

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, dict):
            logger.warning("Pricing config has no models mapping", path=self.config_path)
            models = {}

        self._models = self._parse_models(models)
        logger.info("Loaded pricing configuration", path=self.config_path, models=len(self._models))

    @staticmethod
    def _parse_models(models: dict[str, Any]) -> dict[str, ModelPricing]:
        parsed = {}
        for model_id, pricing in models.items():
            if not isinstance(pricing, dict):
                logger.warning("Skipping malformed pricing entry", model=model_id)
                continue
            try:
                parsed[str(model_id)] = ModelPricing(
                    model_id=str(model_id),
                    input_token_price=Decimal(str(pricing.get("input_token_price", 0))),
                    output_token_price=Decimal(str(pricing.get("output_token_price", 0))),
                )
            except (InvalidOperation, ValidationError) as e:
                logger.warning("Skipping malformed pricing entry", model=model_id, error=str(e))
        return parsed

    def reload(self) -> None:
        """Reload pricing configuration from file."""
        self._load_pricing()

    def get_model_pricing(self, model_id: str) -> ModelPricing:
        """
        Get per-token pricing for a model.

        Raises:
            PricingNotFoundError: If the model is not in the catalog
        """
        try:
            return self._models[model_id]
        except KeyError:
            raise PricingNotFoundError(model_id) from None

    def list_models(self) -> list[ModelPricing]:
        """Get all models and their pricing, sorted by model id."""
        return [self._models[model_id] for model_id in sorted(self._models)]

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __len__(self) -> int:
        return len(self._models)


@lru_cache
def get_pricing_catalog() -> PricingCatalog:
    """Get cached pricing catalog instance."""
    return PricingCatalog()
