from __future__ import annotations

import logging

import pytest

from gtoicm.core.errors import ConfigError
from gtoicm.core.models import PayoutStructure
from gtoicm.core.payouts import (
    COMMON_PAYOUTS,
    as_payout_structure,
    available_presets,
    payout_preset,
    resolve_payouts,
)


def test_percentages_scale_by_prize_pool(sng_payouts: PayoutStructure) -> None:
    resolved = resolve_payouts(sng_payouts, 3)
    assert resolved.amounts == pytest.approx((500.0, 300.0, 200.0))
    assert resolved.total_prize_pool == 1000.0


def test_absolute_payouts_define_the_pool() -> None:
    resolved = resolve_payouts(PayoutStructure.absolute([600, 400]), 2)
    assert resolved.amounts == (600.0, 400.0)
    assert resolved.total_prize_pool == 1000.0


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (5, (500.0, 300.0, 200.0, 0.0, 0.0)),
        (2, (500.0, 300.0)),
        (1, (500.0,)),
        (0, ()),
    ],
)
def test_amounts_are_padded_or_truncated_to_field_size(
    sng_payouts: PayoutStructure, count: int, expected: tuple[float, ...]
) -> None:
    resolved = resolve_payouts(sng_payouts, count)
    assert resolved.amounts == pytest.approx(expected)
    assert resolved.total_prize_pool == 1000.0


@pytest.mark.parametrize("pool", [None, 0.0, -50.0])
def test_percentages_require_positive_pool(pool: float | None) -> None:
    structure = PayoutStructure(places=(50.0, 50.0), is_percentage=True, total_prize_pool=pool)
    with pytest.raises(ConfigError, match="prize pool required for percentage payouts"):
        resolve_payouts(structure, 2)


def test_negative_places_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_payouts(PayoutStructure.absolute([100, -10]), 2)


def test_percentages_over_one_hundred_only_warn(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="gtoicm.core.payouts"):
        resolved = resolve_payouts(PayoutStructure.percentages([70, 40], 100), 2)
    assert resolved.amounts == pytest.approx((70.0, 40.0))
    assert any("above 100" in record.getMessage() for record in caplog.records)


def test_lowest_is_last_resolved_place(sng_payouts: PayoutStructure) -> None:
    assert resolve_payouts(sng_payouts, 3).lowest == pytest.approx(200.0)
    assert resolve_payouts(sng_payouts, 4).lowest == 0.0
    assert resolve_payouts(sng_payouts, 0).lowest == 0.0


def test_presets_resolve_by_case_insensitive_name() -> None:
    structure = payout_preset("SNG_9_MAX", 900)
    assert structure.is_percentage
    assert structure.places == (50.0, 30.0, 20.0)
    assert resolve_payouts(structure, 3).amounts == pytest.approx((450.0, 270.0, 180.0))
    assert "mtt_final_table_9" in available_presets()


def test_every_preset_sums_to_one_hundred() -> None:
    for name, places in COMMON_PAYOUTS.items():
        assert sum(places) == pytest.approx(100.0), name


def test_unknown_preset_is_a_config_error() -> None:
    with pytest.raises(ConfigError, match="unknown payout preset"):
        payout_preset("sng_1000_max", 100)


def test_plain_sequences_are_absolute_amounts(sng_payouts: PayoutStructure) -> None:
    assert as_payout_structure(sng_payouts) is sng_payouts
    structure = as_payout_structure([3, 2, 1])
    assert structure == PayoutStructure(places=(3.0, 2.0, 1.0), is_percentage=False)
