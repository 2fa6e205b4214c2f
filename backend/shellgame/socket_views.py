"""View adapters that render by emitting Socket.IO events to one client.

Each adapter mirrors the state it last sent so the controller can query it
(``is_open``, ``get_remaining``) without a round trip to the browser.
"""

from shellgame.models import Side
from shellgame.views import HandsView, HealthView, MessageView, RingView, ScoreView, score_text


class SocketEmitter:
    """Sends events to a single connection (its sid is its private room)."""

    def __init__(self, socketio, sid: str, namespace: str = '/ws'):
        self.socketio = socketio
        self.sid = sid
        self.namespace = namespace

    def emit(self, event: str, payload: dict) -> None:
        # socketio.emit rather than flask_socketio.emit: this also runs from timer tasks
        self.socketio.emit(event, payload, to=self.sid, namespace=self.namespace)


class SocketHandsView(HandsView):
    def __init__(self, emitter: SocketEmitter):
        super().__init__()
        self.emitter = emitter
        self._open = True

    def open(self, state: bool) -> None:
        self._open = bool(state)
        self.emitter.emit('hands', {'open': self._open})

    def is_open(self) -> bool:
        return self._open


class SocketRingView(RingView):
    def __init__(self, emitter: SocketEmitter):
        self.emitter = emitter
        self._side = Side.MIDDLE
        self._visible = True

    def _send(self) -> None:
        self.emitter.emit('ring', {'side': self._side.value, 'visible': self._visible})

    def set_side(self, side: Side) -> None:
        self._side = side
        if self._visible:
            self._send()

    def set_visible(self, state: bool) -> None:
        self._visible = bool(state)
        # The side is withheld while hidden so the client cannot peek
        if self._visible:
            self._send()
        else:
            self.emitter.emit('ring', {'side': None, 'visible': False})


class SocketHealthView(HealthView):
    def __init__(self, emitter: SocketEmitter, count: int = 3):
        self.emitter = emitter
        self._remaining = count

    def get_remaining(self) -> int:
        return self._remaining

    def reduce_one(self) -> None:
        if self._remaining > 0:
            self._remaining -= 1
            self.emitter.emit('health', {'remaining': self._remaining})

    def reset(self, count: int) -> None:
        self._remaining = max(0, count)
        self.emitter.emit('health', {'remaining': self._remaining})


class SocketMessageView(MessageView):
    def __init__(self, emitter: SocketEmitter):
        self.emitter = emitter

    def _show(self, tone: str, text: str) -> None:
        self.emitter.emit('game_message', {'text': text, 'tone': tone, 'visible': True})

    def hide(self) -> None:
        self.emitter.emit('game_message', {'text': '', 'tone': None, 'visible': False})

    def show_passive(self, text: str) -> None:
        self._show('passive', text)

    def show_danger(self, text: str) -> None:
        self._show('danger', text)

    def show_good(self, text: str) -> None:
        self._show('good', text)


class SocketScoreView(ScoreView):
    def __init__(self, emitter: SocketEmitter):
        self.emitter = emitter

    def show_score(self, score: int, max_level: int) -> None:
        self.emitter.emit('score', {'score': score, 'max_level': max_level, 'text': score_text(score, max_level)})
