"""Unit tests for the matching strategies.

Candidates are built directly with explicit scores, so these tests do not
depend on the fuzzy scorer.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from market_compare.schemas.enums import ComparisonStrategy, MatchType
from market_compare.services.comparison.exceptions import UnknownStrategyError
from market_compare.services.comparison.strategies import (
    BestBrandStrategy,
    CheapestStrategy,
    MatchStrategy,
    build_result,
    resolve_strategy,
)
from tests.factories.comparison import make_candidate, make_entry, make_item


pytestmark = pytest.mark.unit


class TestBuildResult:
    """Tests for build_result."""

    def test_missing(self) -> None:
        """No choice gives a missing result with a zero line total."""
        result = build_result(make_item("Arroz"), None)

        assert result.match_type == MatchType.MISSING
        assert result.matched_entry is None
        assert result.is_substitution is False
        assert result.line_total == Decimal(0)

    def test_identity_is_exact(self) -> None:
        """The identity match is reported as exact."""
        entry = make_entry("Arroz", "5.00")
        result = build_result(
            make_item("Arroz", quantity=3),
            make_candidate(entry, is_identity=True),
        )

        assert result.match_type == MatchType.EXACT
        assert result.is_substitution is False
        assert result.matched_entry == entry
        assert result.line_total == Decimal("15.00")

    def test_other_entry_is_substitution(self) -> None:
        """Any non-identity entry is a strategy substitution."""
        result = build_result(
            make_item("Arroz"),
            make_candidate(make_entry("Arroz Tio João", "5.00")),
        )

        assert result.match_type == MatchType.STRATEGY_SUBSTITUTED
        assert result.is_substitution is True


class TestCheapestStrategy:
    """Tests for CheapestStrategy."""

    def test_picks_lowest_price(self) -> None:
        """The cheapest admissible candidate wins."""
        candidates = [
            make_candidate(make_entry("Arroz Prato Fino", "7.00")),
            make_candidate(make_entry("Arroz Tio João", "5.00"), 0.1),
        ]

        result = CheapestStrategy().select(make_item("Arroz"), candidates)

        assert result.matched_entry is not None
        assert result.matched_entry.name == "Arroz Tio João"

    def test_cheaper_substitute_beats_identity(self) -> None:
        """A pricier identity match is passed over."""
        item = make_item("Feijão Preto", product_id="p-feijao")
        identity = make_candidate(
            make_entry("Feijão Preto Kicaldo", "9.00", product_id="p-feijao"),
            is_identity=True,
        )
        cheaper = make_candidate(make_entry("Feijão Preto Camil", "7.00"), 0.05)

        result = CheapestStrategy().select(item, [identity, cheaper])

        assert result.match_type == MatchType.STRATEGY_SUBSTITUTED
        assert result.line_total == Decimal("7.00")

    def test_identity_wins_when_cheapest(self) -> None:
        """The identity match is kept when it is also the cheapest."""
        item = make_item("Feijão Preto", product_id="p-feijao")
        identity = make_candidate(
            make_entry("Feijão Preto Kicaldo", "6.00", product_id="p-feijao"),
            is_identity=True,
        )
        pricier = make_candidate(make_entry("Feijão Preto Camil", "7.00"), 0.05)

        result = CheapestStrategy().select(item, [identity, pricier])

        assert result.match_type == MatchType.EXACT

    def test_equal_prices_prefer_best_score(self) -> None:
        """On a price tie the first (best scored) candidate wins."""
        best = make_candidate(make_entry("Arroz Tipo 1", "5.00"), 0.0)
        worse = make_candidate(make_entry("Arroz Parboilizado", "5.00"), 0.3)

        result = CheapestStrategy().select(make_item("Arroz"), [best, worse])

        assert result.matched_entry == best.entry

    def test_no_candidates_is_missing(self) -> None:
        """An empty candidate set yields a missing result."""
        result = CheapestStrategy().select(make_item("Arroz"), [])

        assert result.match_type == MatchType.MISSING


class TestBestBrandStrategy:
    """Tests for BestBrandStrategy."""

    def test_relevant_band(self) -> None:
        """Only candidates within the tolerance of the best score are kept."""
        close = make_candidate(make_entry("A", "1.00"), 0.05)
        edge = make_candidate(make_entry("B", "1.00"), 0.15)
        far = make_candidate(make_entry("C", "1.00"), 0.3)

        band = BestBrandStrategy(tolerance=0.10).relevant_band([close, edge, far])

        assert band == [close, edge]

    def test_prefers_requested_brand(self) -> None:
        """The requested brand wins over pricier relevant entries."""
        item = make_item("Arroz", brand="camil")
        candidates = [
            make_candidate(make_entry("Arroz Prato Fino", "7.00", brand="Prato Fino")),
            make_candidate(make_entry("Arroz Camil", "4.00", brand="Camil Alimentos")),
        ]

        result = BestBrandStrategy().select(item, candidates)

        assert result.matched_entry is not None
        assert result.matched_entry.name == "Arroz Camil"
        assert result.match_type == MatchType.STRATEGY_SUBSTITUTED

    def test_falls_back_to_most_expensive(self) -> None:
        """Without the requested brand the priciest relevant entry wins."""
        item = make_item("Arroz", brand="Camil")
        candidates = [
            make_candidate(make_entry("Arroz Tio João", "5.00", brand="Tio João")),
            make_candidate(make_entry("Arroz Prato Fino", "7.00", brand="Prato Fino")),
        ]

        result = BestBrandStrategy().select(item, candidates)

        assert result.matched_entry is not None
        assert result.matched_entry.name == "Arroz Prato Fino"
        assert result.match_type == MatchType.STRATEGY_SUBSTITUTED

    def test_brand_outside_band_is_ignored(self) -> None:
        """A brand match scoring outside the band is not considered."""
        item = make_item("Arroz", brand="Camil")
        best = make_candidate(make_entry("Arroz Tio João", "5.00"), 0.0)
        branded = make_candidate(
            make_entry("Arroz Integral Camil", "8.00", brand="Camil"), 0.3
        )

        result = BestBrandStrategy().select(item, [best, branded])

        assert result.matched_entry == best.entry

    def test_identity_with_brand_is_exact(self) -> None:
        """A brand match that is the requested product stays exact."""
        item = make_item("Arroz", brand="Camil", product_id="p-camil")
        identity = make_candidate(
            make_entry("Arroz Camil 5kg", "25.00", brand="Camil", product_id="p-camil"),
            is_identity=True,
        )

        result = BestBrandStrategy().select(item, [identity])

        assert result.match_type == MatchType.EXACT

    def test_no_candidates_is_missing(self) -> None:
        """An empty candidate set yields a missing result."""
        result = BestBrandStrategy().select(make_item("Arroz"), [])

        assert result.match_type == MatchType.MISSING


class TestResolveStrategy:
    """Tests for resolve_strategy."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("cheapest", CheapestStrategy),
            (ComparisonStrategy.CHEAPEST, CheapestStrategy),
            ("best_brands", BestBrandStrategy),
        ],
    )
    def test_known_strategies(self, name: str, expected: type) -> None:
        """Known names resolve to their strategy."""
        strategy = resolve_strategy(name)

        assert isinstance(strategy, expected)
        assert isinstance(strategy, MatchStrategy)

    def test_tolerance_is_passed_through(self) -> None:
        """The configured band reaches the best-brands strategy."""
        strategy = resolve_strategy("best_brands", brand_tolerance_band=0.2)

        assert isinstance(strategy, BestBrandStrategy)
        assert strategy.tolerance == 0.2

    def test_unknown_strategy(self) -> None:
        """Unknown names raise before any matching happens."""
        with pytest.raises(UnknownStrategyError, match="fastest") as exc_info:
            resolve_strategy("fastest")

        assert exc_info.value.strategy == "fastest"
