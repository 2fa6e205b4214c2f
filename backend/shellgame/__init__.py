from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Round choreography timers; 'manual' puts every session on one virtual clock
    from shellgame.services.game.scheduler import ManualScheduler, SocketIOScheduler
    if flask_app.config.get('TIMER_MODE') == 'manual':
        flask_app.extensions['shellgame_scheduler'] = ManualScheduler()
    else:
        flask_app.extensions['shellgame_scheduler'] = SocketIOScheduler(flask_app, socketio)

    # Import and register blueprints here
    from shellgame.main import main
    flask_app.register_blueprint(main)

    from shellgame.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from shellgame.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('simulate')
    @click.option('--games', 'count', default=100, show_default=True, help='Number of play-throughs.')
    @click.option('--strategy', type=click.Choice(['left', 'right', 'random', 'peek']), default='random', show_default=True)
    @click.option('--seed', type=int, default=None, help='Seed for the random strategy.')
    def simulate_command(count, strategy, seed):
        """Plays headless games on a virtual clock and prints the results."""
        from shellgame.models import GameSettings
        from shellgame.services.game.simulation import simulate_games
        settings = GameSettings.from_config(flask_app.config)
        summary = simulate_games(count, strategy=strategy, settings=settings, seed=seed)
        click.echo(
            f"games={summary['games']} won={summary['won']} lost={summary['lost']} "
            f"average_level={summary['average_level']}"
        )

    flask_app.cli.add_command(simulate_command)

    return flask_app
