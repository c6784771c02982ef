from tetromino_rl.game import ActivePiece, BlockDropGame, GameConfig, TetrominoType, shape_of

FILL = int(TetrominoType.J)


def fill_rows(game: BlockDropGame, rows, skip_cols=()):
    """Fill whole rows of the board except for the given columns."""
    for y in rows:
        for x in range(game.grid.width):
            if x not in skip_cols:
                game.grid.grid[y, x] = FILL


def place(game: BlockDropGame, kind: TetrominoType, x: int, y: int = 0, vertical: bool = False) -> ActivePiece:
    """Replace the falling piece with a chosen one."""
    piece = ActivePiece(kind, shape_of(kind), x, y)
    if vertical:
        piece = piece.rotated()
    game.current_piece = piece
    return piece


def basic_game(seed: int = 0) -> BlockDropGame:
    return BlockDropGame(GameConfig.basic(random_seed=seed))


def extended_game(seed: int = 0) -> BlockDropGame:
    return BlockDropGame(GameConfig.extended(random_seed=seed))
