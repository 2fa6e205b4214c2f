import random
from collections import Counter
from typing import Callable, Dict, Optional

from shellgame.models import GameSettings, Side
from shellgame.views import (
    MemoryHandsView, MemoryHealthView, MemoryMessageView, MemoryRingView, MemoryScoreView,
)
from .controller import GameController
from .random_side import ByteSource, random_byte
from .scheduler import ManualScheduler


STRATEGIES = ('left', 'right', 'random', 'peek')


def _strategy_picker(strategy: str, rng: random.Random) -> Callable[[GameController], Side]:
    if strategy == 'left':
        return lambda c: Side.LEFT
    if strategy == 'right':
        return lambda c: Side.RIGHT
    if strategy == 'random':
        return lambda c: rng.choice((Side.LEFT, Side.RIGHT))
    if strategy == 'peek':
        return lambda c: c.session.ring_side
    raise ValueError(f"unknown strategy: {strategy}")


def build_headless_controller(
    settings: Optional[GameSettings] = None,
    byte_source: ByteSource = random_byte,
    session_id: str = 'headless',
) -> GameController:
    return GameController(
        hands=MemoryHandsView(),
        ring=MemoryRingView(),
        health=MemoryHealthView(),
        message=MemoryMessageView(),
        score=MemoryScoreView(),
        scheduler=ManualScheduler(),
        settings=settings,
        byte_source=byte_source,
        session_id=session_id,
    )


def play_game(controller: GameController, pick: Callable[[GameController], Side]) -> str:
    """Run one play-through to completion on the controller's virtual clock.

    Guesses go through the hands view, the same path a real click takes.
    """
    scheduler = controller.scheduler
    controller.start()
    while scheduler.pending:
        scheduler.run_next()
        if controller.session.ring_hidden:
            controller.hands.click(pick(controller))
    return controller.session.outcome or 'stopped'


def simulate_games(
    count: int,
    strategy: str = 'random',
    settings: Optional[GameSettings] = None,
    seed: Optional[int] = None,
) -> Dict[str, int]:
    rng = random.Random(seed)
    pick = _strategy_picker(strategy, rng)
    # One controller per game so health does not carry over
    results: Counter = Counter()
    levels = 0
    for i in range(count):
        controller = build_headless_controller(settings=settings, session_id=f"sim-{i}")
        results[play_game(controller, pick)] += 1
        levels += controller.session.level
    return {
        'games': count,
        'won': results.get('won', 0),
        'lost': results.get('lost', 0),
        'average_level': round(levels / count, 2) if count else 0,
    }
