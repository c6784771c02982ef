"""Game module for Tetromino RL.

Exports the core game engine and supporting classes:
- GameGrid: Board representation, collision, locking and line clearing
- ActivePiece / TetrominoType: Piece geometry and rotation
- ScoringRules: Basic and extended scoring plus the level/gravity curve
- PiecePreview: Random or 7-bag sequencing with a lookahead queue
- PollingScheduler: Cancellable gravity timers
- BlockDropGame: Main state machine
"""

from .grid import GameGrid
from .pieces import COLORS, ActivePiece, TetrominoType, rotate_cw, shape_of
from .rules import ClearAward, ScoringRules, ScoringVariant
from .sequencer import BagSequencer, PiecePreview, RandomSequencer, SequencingPolicy, make_sequencer
from .timing import ManualClock, PollingScheduler, TimerHandle
from .core import Action, BlockDropGame, GameConfig, GameSnapshot, LockResult, RunStatus

__all__ = [
    "GameGrid",
    "COLORS",
    "ActivePiece",
    "TetrominoType",
    "rotate_cw",
    "shape_of",
    "ClearAward",
    "ScoringRules",
    "ScoringVariant",
    "BagSequencer",
    "PiecePreview",
    "RandomSequencer",
    "SequencingPolicy",
    "make_sequencer",
    "ManualClock",
    "PollingScheduler",
    "TimerHandle",
    "Action",
    "BlockDropGame",
    "GameConfig",
    "GameSnapshot",
    "LockResult",
    "RunStatus",
]
