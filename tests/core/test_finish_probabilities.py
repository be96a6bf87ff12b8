from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from gtoicm.core.config import EngineConfig
from gtoicm.core.errors import DomainError
from gtoicm.core.finish import FinishProbabilityEngine, finish_probabilities
from gtoicm.core.models import Player

TOLERANCE = 1e-9


def _players(*stacks: float) -> list[Player]:
    return [Player(id=f"p{idx + 1}", chips=chips) for idx, chips in enumerate(stacks)]


def test_three_player_vectors_match_hand_computed_values(three_players: list[Player]) -> None:
    engine = FinishProbabilityEngine(three_players)
    # P(p1 2nd) = .3 * 5/7 + .2 * 5/8
    assert engine.vector("p1") == pytest.approx((0.5, 0.3 * 5 / 7 + 0.2 * 5 / 8, 1 - 0.5 - (0.3 * 5 / 7 + 0.125)))
    assert engine.vector("p2") == pytest.approx((0.3, 0.375, 0.325))
    assert engine.vector("p3") == pytest.approx((0.2, 0.2 + 0.3 * 2 / 7, 0.8 - 0.2 - 0.3 * 2 / 7))


def test_first_place_is_chip_share() -> None:
    players = _players(100, 250, 400, 50)
    for player in players:
        assert finish_probabilities(player, players)[0] == pytest.approx(player.chips / 800)


@pytest.mark.parametrize(
    "stacks",
    [
        (1000, 1000),
        (5000, 3000, 2000),
        (12, 7, 7, 3, 1),
        (15000, 10000, 8000, 15000),
        (900, 100, 4000, 2500, 1200, 800),
    ],
)
def test_rows_and_columns_sum_to_one(stacks: tuple[float, ...]) -> None:
    matrix = FinishProbabilityEngine(_players(*stacks)).matrix()
    assert matrix.shape == (len(stacks), len(stacks))
    assert np.all(matrix >= 0.0)
    for row in matrix:
        assert math.isclose(math.fsum(row), 1.0, abs_tol=TOLERANCE)
    for col in matrix.T:
        assert math.isclose(math.fsum(col), 1.0, abs_tol=TOLERANCE)


def test_equal_stacks_are_uniform_over_places() -> None:
    engine = FinishProbabilityEngine(_players(10, 10, 10, 10))
    for pid in ("p1", "p2", "p3", "p4"):
        assert engine.vector(pid) == pytest.approx((0.25,) * 4)


def test_player_order_does_not_change_results() -> None:
    forward = _players(300, 200, 500, 100)
    reverse = list(reversed(forward))
    for player in forward:
        assert finish_probabilities(player, forward) == finish_probabilities(player, reverse)


def test_player_ids_may_contain_separator_characters() -> None:
    players = [Player(id="a,b", chips=300), Player(id="a", chips=200), Player(id="b-1", chips=500)]
    engine = FinishProbabilityEngine(players)
    for player in players:
        assert math.isclose(sum(engine.vector(player.id)), 1.0, abs_tol=TOLERANCE)


def test_memo_is_private_to_each_engine() -> None:
    first = FinishProbabilityEngine(_players(500, 300, 200))
    first.vector("p1")
    assert first.memo_size > 0

    second = FinishProbabilityEngine(_players(200, 300, 500))
    assert second.memo_size == 0
    assert second.vector("p1") != first.vector("p1")
    assert second.vector("p1")[0] == pytest.approx(0.2)


def test_single_player_takes_first() -> None:
    assert finish_probabilities("solo", [Player(id="solo", chips=42)]) == (1.0,)


def test_zero_total_chips() -> None:
    assert finish_probabilities("a", [Player(id="a", chips=0)]) == (1.0,)
    players = [Player(id="a", chips=0), Player(id="b", chips=0)]
    assert finish_probabilities("a", players) == (0.0, 0.0)


def test_zero_chip_stack_inside_engine_is_flagged(caplog: pytest.LogCaptureFixture) -> None:
    players = [Player(id="a", chips=100), Player(id="b", chips=0), Player(id="c", chips=0)]
    engine = FinishProbabilityEngine(players)
    with caplog.at_level(logging.WARNING, logger="gtoicm.core.finish"):
        vector = engine.vector("b")
    assert vector == (0.0, 0.0, 0.0)
    assert engine.warnings
    assert engine.warnings[0].deviation == pytest.approx(1.0)
    assert "finish vector for 'b'" in caplog.text


def test_empty_field_is_rejected() -> None:
    with pytest.raises(DomainError, match="no active players"):
        FinishProbabilityEngine([])


def test_negative_chips_are_rejected() -> None:
    with pytest.raises(DomainError):
        FinishProbabilityEngine([Player(id="a", chips=10), Player(id="b", chips=-1)])


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(DomainError, match="duplicate"):
        FinishProbabilityEngine([Player(id="a", chips=10), Player(id="a", chips=20)])


def test_unknown_player_is_rejected(three_players: list[Player]) -> None:
    with pytest.raises(DomainError, match="not part of this calculation"):
        FinishProbabilityEngine(three_players).vector("p9")


def test_field_size_budget() -> None:
    config = EngineConfig(max_players=3)
    with pytest.raises(DomainError, match="computation budget"):
        FinishProbabilityEngine(_players(1, 2, 3, 4), config=config)


def test_ten_handed_final_table_stays_consistent() -> None:
    stacks = (4200, 3900, 3100, 2500, 2200, 1800, 1500, 900, 600, 300)
    engine = FinishProbabilityEngine(_players(*stacks))
    matrix = engine.matrix()
    assert engine.warnings == []
    assert np.allclose(matrix.sum(axis=1), 1.0, atol=TOLERANCE)
    assert np.allclose(matrix.sum(axis=0), 1.0, atol=TOLERANCE)
    # Bigger stacks are more likely to win and less likely to finish last.
    assert list(matrix[:, 0]) == sorted(matrix[:, 0], reverse=True)
    assert list(matrix[:, -1]) == sorted(matrix[:, -1])
