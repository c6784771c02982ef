import random

import pytest

from tetromino_rl.game import (
    BagSequencer,
    PiecePreview,
    RandomSequencer,
    SequencingPolicy,
    TetrominoType,
    make_sequencer,
)
from tests.helpers import extended_game


def test_bag_deals_every_type_once_per_seven():
    bag = BagSequencer(random.Random(7))
    for _ in range(5):
        draws = [bag.draw() for _ in range(7)]
        assert sorted(draws) == sorted(TetrominoType)
        assert bag.remaining == 0


def test_bag_remaining_counts_down_and_reset_empties():
    bag = BagSequencer(random.Random(1))
    bag.draw()
    assert bag.remaining == 6
    bag.draw()
    assert bag.remaining == 5
    bag.reset()
    assert bag.remaining == 0


def test_random_sequencer_draws_valid_types():
    seq = RandomSequencer(random.Random(3))
    draws = {seq.draw() for _ in range(300)}
    assert draws <= set(TetrominoType)
    assert len(draws) == 7


def test_make_sequencer_policy():
    rng = random.Random(0)
    assert isinstance(make_sequencer(SequencingPolicy.BAG, rng), BagSequencer)
    assert isinstance(make_sequencer("random", rng), RandomSequencer)


@pytest.mark.parametrize("lookahead", [1, 2])
def test_preview_pops_front_and_refills(lookahead):
    preview = PiecePreview(BagSequencer(random.Random(5)), lookahead)
    upcoming = preview.peek()
    assert len(upcoming) == lookahead
    assert preview.pop() == upcoming[0]
    assert preview.peek()[:lookahead - 1] == upcoming[1:]
    assert len(preview.peek()) == lookahead


def test_preview_rejects_zero_lookahead():
    with pytest.raises(ValueError):
        PiecePreview(RandomSequencer(random.Random()), 0)


def test_engine_spawns_in_bag_order():
    game = extended_game(seed=11)
    kinds = [game.current_piece.kind]
    for _ in range(6):
        game.hard_drop()
        kinds.append(game.current_piece.kind)
    assert sorted(kinds) == sorted(TetrominoType)
    assert len(game.preview.peek()) == 2
