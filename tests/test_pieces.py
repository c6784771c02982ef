import numpy as np
import pytest

from tetromino_rl.game import ActivePiece, TetrominoType, rotate_cw, shape_of
from tetromino_rl.game.pieces import BASE_SHAPES


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_return_original(kind):
    shape = shape_of(kind)
    rotated = shape
    for _ in range(4):
        rotated = rotate_cw(rotated)
    assert np.array_equal(rotated, shape)


def test_rotate_cw_transposes_and_reverses():
    shape = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.int8)
    out = rotate_cw(shape)
    assert out.shape == (3, 2)
    assert out.tolist() == [[4, 1], [5, 2], [6, 3]]
    for i in range(3):
        for j in range(2):
            assert out[i, j] == shape[2 - 1 - j, i]


def test_rotation_leaves_template_untouched():
    template = BASE_SHAPES[TetrominoType.T].copy()
    piece = ActivePiece.spawn(TetrominoType.T, 10)
    piece.rotated()
    piece.shape[0, 0] = 1
    assert np.array_equal(BASE_SHAPES[TetrominoType.T], template)


def test_templates_are_read_only():
    with pytest.raises(ValueError):
        BASE_SHAPES[TetrominoType.I][0, 0] = 0
    copy = shape_of(TetrominoType.I)
    copy[0, 0] = 0
    assert BASE_SHAPES[TetrominoType.I][0, 0] == 1


def test_spawn_is_centered_at_top():
    assert ActivePiece.spawn(TetrominoType.I, 10).x == 3
    assert ActivePiece.spawn(TetrominoType.O, 10).x == 4
    assert ActivePiece.spawn(TetrominoType.T, 12).x == 5
    assert ActivePiece.spawn(TetrominoType.T, 12).y == 0


def test_cells_follow_anchor_and_offset():
    piece = ActivePiece(TetrominoType.S, shape_of(TetrominoType.S), 2, 5)
    assert piece.cells() == [(3, 5), (4, 5), (2, 6), (3, 6)]
    assert piece.cells(1, -1) == [(4, 4), (5, 4), (3, 5), (4, 5)]
