"""Round sequencing for the ring shell game.

One ``GameController`` owns one ``GameSession``. Every multi-step sequence
(hide, win, lose, give up, stop) is a chain of single-shot delayed steps on
the injected scheduler. Each step captures the session epoch when it is
scheduled and is dropped if a start/stop/give-up bumped the epoch before it
fired. Input events and delayed steps share one re-entrant lock so the
session only ever sees one logical timeline.
"""

import functools
import logging
import threading
from typing import Callable, Optional, Union

from shellgame.models import (
    CLICK_TO_PLAY, GAME_OVER, GIVE_UP, GOOD_JOB, YOU_LOST, YOU_WON,
    GameSession, GameSettings, GameState, Phase, Side,
)
from shellgame.views import HandsView, HealthView, MessageView, RingView, ScoreView
from .random_side import ByteSource, pick_ring_side, random_byte
from .scheduler import Scheduler


logger = logging.getLogger(__name__)


def _serialized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameController:

    def __init__(
        self,
        hands: HandsView,
        ring: RingView,
        health: HealthView,
        message: MessageView,
        score: ScoreView,
        scheduler: Scheduler,
        settings: Optional[GameSettings] = None,
        byte_source: ByteSource = random_byte,
        session_id: str = '',
        on_stopped: Optional[Callable[['GameController'], None]] = None,
    ):
        self.hands = hands
        self.ring = ring
        self.health = health
        self.message = message
        self.score = score
        self.scheduler = scheduler
        self.settings = settings or GameSettings()
        self.session_id = session_id
        self._byte_source = byte_source
        # Called whenever the session enters STOPPED, whatever ended it
        self.on_stopped = on_stopped
        self._lock = threading.RLock()

        self.health.reset(self.settings.start_health)
        self.session = GameSession(max_level=self.settings.max_level, health=self.settings.start_health)
        self.message.show_passive(CLICK_TO_PLAY)

    # ---- scheduling ----

    def _later(self, delay_ms: int, step: Callable[[], None], label: str) -> None:
        epoch = self.session.epoch

        def _fire():
            with self._lock:
                if self.session.epoch != epoch:
                    logger.info(
                        f"[timer-abort] session={self.session_id} step={label} epoch={epoch} current={self.session.epoch}"
                    )
                    return
                logger.debug(f"[timer-fire] session={self.session_id} step={label} epoch={epoch}")
                step()

        self.scheduler.call_later(delay_ms, _fire, label)

    # ---- input ----

    def _handle_left(self) -> None:
        self.guess(Side.LEFT)

    def _handle_right(self) -> None:
        self.guess(Side.RIGHT)

    # ---- operations ----

    def get_state(self) -> GameState:
        return self.session.state

    def snapshot(self) -> dict:
        with self._lock:
            return self.session.to_dict()

    @_serialized
    def start(self) -> None:
        s = self.session
        s.bump_epoch()
        s.level = 0
        s.state = GameState.RUNNING
        s.phase = Phase.REVEALED_IDLE
        s.outcome = None
        s.rounds_played = 0
        if self.settings.reset_health_on_start:
            self.health.reset(self.settings.start_health)
            s.health = self.settings.start_health
        self.message.hide()
        self.hands.on_right_clicked(self._handle_right)
        self.hands.on_left_clicked(self._handle_left)
        logger.info(f"[start] session={self.session_id} epoch={s.epoch} health={s.health}")
        self.next_level()

    @_serialized
    def give_up(self) -> None:
        s = self.session
        if not s.is_running:
            logger.info(f"[give-up-ignored] session={self.session_id} not running")
            return
        # Nothing from the abandoned round may fire, and no guess is honoured meanwhile
        s.bump_epoch()
        s.phase = Phase.REVEALED_IDLE
        if s.outcome is None:
            s.outcome = 'gave_up'
        self.message.show_danger(GIVE_UP)
        logger.info(f"[give-up] session={self.session_id} level={s.level}")
        self._later(self.settings.give_up_delay_ms, self.stop, 'give_up')

    @_serialized
    def guess(self, side: Union[Side, str]) -> bool:
        """Resolve a guess. Returns False when no hidden window is open."""
        side = Side(side)
        if side is Side.MIDDLE:
            raise ValueError('guess side must be left or right')
        s = self.session
        if not s.is_running or not s.ring_hidden:
            logger.info(f"[guess-ignored] session={self.session_id} side={side.value} phase={s.phase.value}")
            return False
        # Close the window before resolving so a second click cannot count
        s.phase = Phase.REVEALED_IDLE
        s.rounds_played += 1
        correct = side is s.ring_side
        logger.info(
            f"[guess] session={self.session_id} level={s.level} side={side.value} ring={s.ring_side.value} correct={correct}"
        )
        if correct:
            self.win_level()
        else:
            self.lose_level()
        return True

    @_serialized
    def win_level(self) -> None:
        s = self.session
        if s.level == s.max_level:
            def _reveal():
                s.outcome = 'won'
                self.message.show_good(YOU_WON)
                self.ring.set_visible(True)
                self.hands.open(True)
                self.score.show_score(s.max_level, s.max_level)
                logger.info(f"[won] session={self.session_id} health={s.health}")
                self._later(self.settings.win_hold_ms, self.stop, 'win_hold')

            self._later(self.settings.win_reveal_delay_ms, _reveal, 'win_reveal')
        else:
            self.message.show_good(GOOD_JOB)
            self.next_level()
            self._later(self.settings.message_delay_ms, self.message.hide, 'hide_message')

    @_serialized
    def lose_level(self) -> None:
        s = self.session
        if s.health > 1:
            self._reduce_health()
            self.message.show_danger(YOU_LOST)

            def _retry():
                self.hide_ring()
                self.message.hide()

            self._later(self.settings.message_delay_ms, _retry, 'retry')
        else:
            self._reduce_health()
            s.outcome = 'lost'
            self.message.show_danger(GAME_OVER)
            logger.info(f"[game-over] session={self.session_id} level={s.level}")
            self._later(self.settings.game_over_delay_ms, self.stop, 'game_over')

    def _reduce_health(self) -> None:
        s = self.session
        if s.health <= 0:
            return
        s.health -= 1
        self.health.reduce_one()

    @_serialized
    def next_level(self) -> None:
        s = self.session
        self.score.show_score(s.level, s.max_level)
        s.level += 1
        self.hide_ring()

    @_serialized
    def hide_ring(self) -> None:
        s = self.session
        self.ring.set_visible(True)
        self.hands.open(True)
        s.phase = Phase.HIDING
        logger.debug(f"[round-hide] session={self.session_id} level={s.level}")

        def _conceal():
            s.ring_side = pick_ring_side(self._byte_source)
            self.ring.set_visible(False)
            self.ring.set_side(s.ring_side)
            self.hands.open(False)
            s.phase = Phase.AWAITING_GUESS

        self._later(self.settings.hide_delay_ms, _conceal, 'conceal')

    @_serialized
    def stop(self) -> None:
        s = self.session
        s.state = GameState.STOPPED
        s.bump_epoch()
        s.phase = Phase.REVEALED_IDLE
        self.ring.set_visible(True)
        self.hands.open(True)
        logger.info(f"[stop] session={self.session_id} level={s.level} health={s.health} outcome={s.outcome}")
        if self.on_stopped is not None:
            self.on_stopped(self)

        def _settle():
            s.ring_side = Side.MIDDLE
            self.ring.set_side(Side.MIDDLE)
            self.message.show_passive(CLICK_TO_PLAY)
            self.hands.remove_right_clicked(self._handle_right)
            self.hands.remove_left_clicked(self._handle_left)

        self._later(self.settings.stop_delay_ms, _settle, 'stop_settle')

    @_serialized
    def close(self) -> None:
        """Drop every pending step and detach from the hands; used when the
        owning connection goes away."""
        self.session.bump_epoch()
        self.session.state = GameState.STOPPED
        self.session.phase = Phase.REVEALED_IDLE
        self.hands.remove_right_clicked(self._handle_right)
        self.hands.remove_left_clicked(self._handle_left)
