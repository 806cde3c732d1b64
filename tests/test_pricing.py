"""
Pricing Catalog Tests
=====================
Tests for loading model pricing from YAML.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from usage_billing.core.pricing import PricingCatalog
from usage_billing.exceptions import PricingNotFoundError

REPO_PRICING = Path(__file__).resolve().parent.parent / "config" / "pricing.yaml"


class TestPricingCatalog:
    """Tests for the pricing catalog."""

    @pytest.fixture
    def config_path(self, tmp_path: Path) -> Path:
        path = tmp_path / "pricing.yaml"
        path.write_text(
            "models:\n"
            "  gemini-2.5-flash-lite:\n"
            "    input_token_price: 0.0000001\n"
            "    output_token_price: 0.0000004\n"
            "  gpt-4o:\n"
            "    input_token_price: 0.0000025\n"
            "    output_token_price: 0.00001\n"
            "  broken: 12\n"
        )
        return path

    @pytest.fixture
    def catalog(self, config_path: Path) -> PricingCatalog:
        return PricingCatalog(str(config_path))

    def test_get_model_pricing(self, catalog: PricingCatalog):
        """Test loading exact decimal prices for a model."""
        pricing = catalog.get_model_pricing("gemini-2.5-flash-lite")

        assert pricing.model_id == "gemini-2.5-flash-lite"
        assert pricing.input_token_price == Decimal("0.0000001")
        assert pricing.output_token_price == Decimal("0.0000004")

    def test_unknown_model_raises(self, catalog: PricingCatalog):
        """Test that unknown models are reported, not defaulted."""
        with pytest.raises(PricingNotFoundError) as exc_info:
            catalog.get_model_pricing("unknown-model")

        assert exc_info.value.model_id == "unknown-model"
        assert isinstance(exc_info.value, LookupError)

    def test_malformed_entries_skipped(self, catalog: PricingCatalog):
        """Test that non-mapping entries are ignored."""
        assert "broken" not in catalog
        assert len(catalog) == 2

    def test_list_models_sorted(self, catalog: PricingCatalog):
        """Test listing all models in id order."""
        models = catalog.list_models()

        assert [m.model_id for m in models] == ["gemini-2.5-flash-lite", "gpt-4o"]

    def test_missing_file_gives_empty_catalog(self, tmp_path: Path):
        """Test that a missing config yields an empty catalog."""
        catalog = PricingCatalog(str(tmp_path / "missing.yaml"))

        assert len(catalog) == 0
        assert catalog.list_models() == []

    def test_empty_file_gives_empty_catalog(self, tmp_path: Path):
        """Test that an empty config yields an empty catalog."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert len(PricingCatalog(str(path))) == 0

    def test_reload(self, catalog: PricingCatalog, config_path: Path):
        """Test that reload picks up changed prices."""
        config_path.write_text(
            "models:\n"
            "  gpt-4o:\n"
            "    input_token_price: 0.000005\n"
            "    output_token_price: 0.00002\n"
        )
        catalog.reload()

        assert "gemini-2.5-flash-lite" not in catalog
        assert catalog.get_model_pricing("gpt-4o").input_token_price == Decimal("0.000005")

    def test_shipped_config_loads(self):
        """Test that the bundled pricing file parses."""
        catalog = PricingCatalog(str(REPO_PRICING))

        assert "gemini-2.5-flash-lite" in catalog
        assert all(m.input_token_price > 0 for m in catalog.list_models())

    @pytest.mark.parametrize(
        "bad_entry",
        [
            "{input_token_price: , output_token_price: 0.000001}",
            "{input_token_price: cheap, output_token_price: 0.000001}",
            "{input_token_price: -0.000001, output_token_price: 0.000001}",
        ],
    )
    def test_bad_price_skips_only_that_entry(self, tmp_path: Path, bad_entry: str):
        """Test that one unparseable price does not sink the whole catalog."""
        path = tmp_path / "pricing.yaml"
        path.write_text(
            "models:\n"
            f"  bad: {bad_entry}\n"
            "  good:\n"
            "    input_token_price: 0.000002\n"
            "    output_token_price: 0.000008\n"
        )

        catalog = PricingCatalog(str(path))

        assert "bad" not in catalog
        assert catalog.get_model_pricing("good").output_token_price == Decimal("0.000008")

    @pytest.mark.parametrize("document", ["- gpt-4o\n- gemini\n", "models: [gpt-4o]\n", "42\n"])
    def test_non_mapping_document_gives_empty_catalog(self, tmp_path: Path, document: str):
        """Test that a document without a models mapping loads as empty."""
        path = tmp_path / "pricing.yaml"
        path.write_text(document)

        assert len(PricingCatalog(str(path))) == 0
