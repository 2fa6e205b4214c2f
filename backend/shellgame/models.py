from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Side(Enum):
    LEFT = 'left'
    RIGHT = 'right'
    MIDDLE = 'middle'


class GameState(Enum):
    STOPPED = 'stopped'
    RUNNING = 'running'


class Phase(Enum):
    REVEALED_IDLE = 'revealed_idle'  # ring visible, no guess possible
    HIDING = 'hiding'
    AWAITING_GUESS = 'awaiting_guess'


# Player-facing messages
CLICK_TO_PLAY = 'Click Start To Play'
GIVE_UP = 'Giving up...'
YOU_LOST = 'Opps.. Wrong guess :('
YOU_WON = 'Congrats!!! You won!!!'
GAME_OVER = 'Game Over :<'
GOOD_JOB = 'Good Job!!!'


@dataclass(frozen=True)
class GameSettings:
    """Game shape and choreography delays (milliseconds)."""
    max_level: int = 10
    start_health: int = 3
    hide_delay_ms: int = 2000
    message_delay_ms: int = 1000
    win_reveal_delay_ms: int = 1000
    win_hold_ms: int = 3000
    game_over_delay_ms: int = 3000
    give_up_delay_ms: int = 1000
    stop_delay_ms: int = 1000
    reset_health_on_start: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'GameSettings':
        defaults = cls()
        return cls(
            max_level=int(config.get('MAX_LEVEL', defaults.max_level)),
            start_health=int(config.get('START_HEALTH', defaults.start_health)),
            hide_delay_ms=int(config.get('HIDE_DELAY_MS', defaults.hide_delay_ms)),
            message_delay_ms=int(config.get('MESSAGE_DELAY_MS', defaults.message_delay_ms)),
            win_reveal_delay_ms=int(config.get('WIN_REVEAL_DELAY_MS', defaults.win_reveal_delay_ms)),
            win_hold_ms=int(config.get('WIN_HOLD_MS', defaults.win_hold_ms)),
            game_over_delay_ms=int(config.get('GAME_OVER_DELAY_MS', defaults.game_over_delay_ms)),
            give_up_delay_ms=int(config.get('GIVE_UP_DELAY_MS', defaults.give_up_delay_ms)),
            stop_delay_ms=int(config.get('STOP_DELAY_MS', defaults.stop_delay_ms)),
            reset_health_on_start=bool(config.get('RESET_HEALTH_ON_START', defaults.reset_health_on_start)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_level': self.max_level,
            'start_health': self.start_health,
            'reset_health_on_start': self.reset_health_on_start,
            'delays_ms': {
                'hide': self.hide_delay_ms,
                'message': self.message_delay_ms,
                'win_reveal': self.win_reveal_delay_ms,
                'win_hold': self.win_hold_ms,
                'game_over': self.game_over_delay_ms,
                'give_up': self.give_up_delay_ms,
                'stop': self.stop_delay_ms,
            },
        }


class GameSession:
    """The single live play-through owned by one controller.

    ``epoch`` is bumped on every start/stop/give-up; delayed steps that were
    scheduled under an older epoch are dropped when they fire.
    """

    def __init__(self, max_level: int = 10, health: int = 3):
        self.state = GameState.STOPPED
        self.phase = Phase.REVEALED_IDLE
        self.level = 0
        self.max_level = max_level
        self.health = health
        self.ring_side = Side.MIDDLE
        self.epoch = 0
        self.outcome: Optional[str] = None  # won, lost, gave_up
        self.rounds_played = 0

    @property
    def ring_hidden(self) -> bool:
        return self.phase is Phase.AWAITING_GUESS

    @property
    def is_running(self) -> bool:
        return self.state is GameState.RUNNING

    def bump_epoch(self) -> int:
        self.epoch += 1
        return self.epoch

    def to_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'phase': self.phase.value,
            'level': self.level,
            'max_level': self.max_level,
            'health': self.health,
            # The side is only revealed while the ring is visible
            'ring_side': None if self.ring_hidden else self.ring_side.value,
            'ring_hidden': self.ring_hidden,
            'outcome': self.outcome,
            'rounds_played': self.rounds_played,
        }
