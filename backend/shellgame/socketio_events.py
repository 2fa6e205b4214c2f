from flask import current_app, request
from flask_socketio import emit
from typing import Dict, Optional

from shellgame import socketio
from shellgame.models import GameSettings, GameState, Side
from shellgame.services.game.controller import GameController
from shellgame.socket_views import (
    SocketEmitter, SocketHandsView, SocketHealthView, SocketMessageView, SocketRingView, SocketScoreView,
)


STOPPED_BUTTON = {'state': 'inactive', 'label': 'Start'}
RUNNING_BUTTON = {'state': 'active', 'label': 'Give Up'}

# One game per connection, keyed by socket sid
_controllers: Dict[str, GameController] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _build_controller(sid: str, namespace: str) -> GameController:
    app = current_app._get_current_object()
    emitter = SocketEmitter(socketio, sid, namespace=namespace)

    def _on_stopped(controller: GameController) -> None:
        # Games also end from timers (won, lost, give-up), outside any handler
        emitter.emit('button_state', STOPPED_BUTTON)
        emitter.emit('state', controller.snapshot())

    return GameController(
        hands=SocketHandsView(emitter),
        ring=SocketRingView(emitter),
        health=SocketHealthView(emitter),
        message=SocketMessageView(emitter),
        score=SocketScoreView(emitter),
        scheduler=app.extensions['shellgame_scheduler'],
        settings=GameSettings.from_config(app.config),
        session_id=sid,
        on_stopped=_on_stopped,
    )


def _current_controller() -> Optional[GameController]:
    controller = _controllers.get(_get_sid())
    if controller is None:
        emit('error', {'message': 'No game session for this connection'})
    return controller


def live_session_count() -> int:
    return len(_controllers)


def toggle(controller: GameController) -> dict:
    """The start/give-up button: give up while running, otherwise start.
    Returns the button's new state and label."""
    if controller.get_state() is GameState.RUNNING:
        button = dict(STOPPED_BUTTON)
        controller.give_up()
    else:
        button = dict(RUNNING_BUTTON)
        controller.start()
    return button


def handle_connect(auth=None):
    sid = _get_sid()
    emit('connected', {'message': f'Connected to {request.namespace}'})
    controller = _build_controller(sid, request.namespace)
    _controllers[sid] = controller
    current_app.logger.info(f"[session-open] session={sid}")
    emit('button_state', STOPPED_BUTTON)
    emit('state', controller.snapshot())


def handle_disconnect(reason=None):
    sid = _get_sid()
    controller = _controllers.pop(sid, None)
    if not controller:
        return
    # Pending timers of this session fire into a bumped epoch and are dropped
    controller.close()
    current_app.logger.info(f"[session-close] session={sid}")


def handle_toggle(data=None):
    controller = _current_controller()
    if controller is None:
        return
    button = toggle(controller)
    emit('button_state', button)
    emit('state', controller.snapshot())


def handle_choose_hand(data=None):
    side = data.get('side') if isinstance(data, dict) else None
    if side not in (Side.LEFT.value, Side.RIGHT.value):
        emit('error', {'message': 'side must be "left" or "right"'})
        return
    controller = _current_controller()
    if controller is None:
        return
    # Goes through the hands' click listeners, which only exist while a game is on
    controller.hands.click(Side(side))
    emit('state', controller.snapshot())


def handle_get_state(data=None):
    controller = _current_controller()
    if controller is None:
        return
    emit('state', controller.snapshot())


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('toggle', handle_toggle, namespace=namespace)
        socketio.on_event('choose_hand', handle_choose_hand, namespace=namespace)
        socketio.on_event('get_state', handle_get_state, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
