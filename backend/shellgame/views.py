"""Presentation collaborators consumed by the game controller.

The controller only talks to these narrow interfaces; concrete rendering
lives in adapters (see ``shellgame.socket_views``). The ``Memory*`` classes
keep everything in process and back the tests and headless simulation.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from shellgame.models import Side

ClickCallback = Callable[[], None]


class HandsView(ABC):
    def __init__(self):
        self._left_cb: Optional[ClickCallback] = None
        self._right_cb: Optional[ClickCallback] = None

    @abstractmethod
    def open(self, state: bool) -> None: ...

    @abstractmethod
    def is_open(self) -> bool: ...

    def on_left_clicked(self, callback: ClickCallback) -> None:
        self._left_cb = callback

    def on_right_clicked(self, callback: ClickCallback) -> None:
        self._right_cb = callback

    def remove_left_clicked(self, callback: ClickCallback) -> None:
        if self._left_cb == callback:
            self._left_cb = None

    def remove_right_clicked(self, callback: ClickCallback) -> None:
        if self._right_cb == callback:
            self._right_cb = None

    def has_listeners(self) -> bool:
        return self._left_cb is not None or self._right_cb is not None

    def click(self, side: Side) -> bool:
        """Deliver a hand click. Returns False when nobody is listening."""
        cb = self._left_cb if side is Side.LEFT else self._right_cb if side is Side.RIGHT else None
        if cb is None:
            return False
        cb()
        return True


class RingView(ABC):
    @abstractmethod
    def set_side(self, side: Side) -> None: ...

    @abstractmethod
    def set_visible(self, state: bool) -> None: ...


class HealthView(ABC):
    @abstractmethod
    def get_remaining(self) -> int: ...

    @abstractmethod
    def reduce_one(self) -> None:
        """Remove exactly one unit; no-op when already empty."""

    @abstractmethod
    def reset(self, count: int) -> None: ...


class MessageView(ABC):
    @abstractmethod
    def hide(self) -> None: ...

    @abstractmethod
    def show_passive(self, text: str) -> None: ...

    @abstractmethod
    def show_danger(self, text: str) -> None: ...

    @abstractmethod
    def show_good(self, text: str) -> None: ...


class ScoreView(ABC):
    @abstractmethod
    def show_score(self, score: int, max_level: int) -> None: ...


def score_text(score: int, max_level: int) -> str:
    return f"Score: {score} / {max_level}"


class MemoryHandsView(HandsView):
    def __init__(self):
        super().__init__()
        self._open = True

    def open(self, state: bool) -> None:
        self._open = bool(state)

    def is_open(self) -> bool:
        return self._open


class MemoryRingView(RingView):
    def __init__(self):
        self.side = Side.MIDDLE
        self.visible = True

    def set_side(self, side: Side) -> None:
        self.side = side

    def set_visible(self, state: bool) -> None:
        self.visible = bool(state)


class MemoryHealthView(HealthView):
    def __init__(self, count: int = 3):
        self._remaining = count

    def get_remaining(self) -> int:
        return self._remaining

    def reduce_one(self) -> None:
        if self._remaining > 0:
            self._remaining -= 1

    def reset(self, count: int) -> None:
        self._remaining = max(0, count)


class MemoryMessageView(MessageView):
    """Keeps the current message plus every message shown, as (tone, text)."""

    def __init__(self):
        self.visible = False
        self.text = ''
        self.tone = 'passive'
        self.history: List[Tuple[str, str]] = []

    def _show(self, tone: str, text: str) -> None:
        self.visible = True
        self.tone = tone
        self.text = text
        self.history.append((tone, text))

    def hide(self) -> None:
        self.visible = False

    def show_passive(self, text: str) -> None:
        self._show('passive', text)

    def show_danger(self, text: str) -> None:
        self._show('danger', text)

    def show_good(self, text: str) -> None:
        self._show('good', text)


class MemoryScoreView(ScoreView):
    def __init__(self):
        self.score = 0
        self.max_level = 0
        self.text = ''

    def show_score(self, score: int, max_level: int) -> None:
        self.score = score
        self.max_level = max_level
        self.text = score_text(score, max_level)
