"""Tests for source routing."""

import pytest

from claim_verifier.domain.models.claim import ClaimClassification, ClaimType
from claim_verifier.domain.services.source_router import route_sources


def _classified(claim_type: ClaimType) -> ClaimClassification:
    return ClaimClassification(type=claim_type)


def test_financial_claims_use_market_data_and_news():
    plan = route_sources(_classified(ClaimType.FINANCIAL), financial_enabled=True, news_enabled=True)
    assert plan.fetch_financial and plan.fetch_news


def test_financial_without_market_key_still_searches_news():
    plan = route_sources(_classified(ClaimType.FINANCIAL), financial_enabled=False, news_enabled=True)
    assert not plan.fetch_financial
    assert plan.fetch_news


def test_news_claims_never_use_market_data():
    plan = route_sources(_classified(ClaimType.NEWS), financial_enabled=True, news_enabled=True)
    assert not plan.fetch_financial
    assert plan.fetch_news


@pytest.mark.parametrize("financial_enabled,news_enabled", [(True, True), (False, False)])
def test_general_claims_use_no_fetchers(financial_enabled, news_enabled):
    plan = route_sources(_classified(ClaimType.GENERAL), financial_enabled, news_enabled)
    assert plan.is_empty


def test_missing_keys_disable_everything():
    plan = route_sources(_classified(ClaimType.FINANCIAL), financial_enabled=False, news_enabled=False)
    assert plan.is_empty
