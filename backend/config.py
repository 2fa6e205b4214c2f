import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Game shape
    MAX_LEVEL = int(os.environ.get('MAX_LEVEL', '10'))
    START_HEALTH = int(os.environ.get('START_HEALTH', '3'))
    # Choreography delays (milliseconds)
    HIDE_DELAY_MS = int(os.environ.get('HIDE_DELAY_MS', '2000'))
    MESSAGE_DELAY_MS = int(os.environ.get('MESSAGE_DELAY_MS', '1000'))
    WIN_REVEAL_DELAY_MS = int(os.environ.get('WIN_REVEAL_DELAY_MS', '1000'))
    WIN_HOLD_MS = int(os.environ.get('WIN_HOLD_MS', '3000'))
    GAME_OVER_DELAY_MS = int(os.environ.get('GAME_OVER_DELAY_MS', '3000'))
    GIVE_UP_DELAY_MS = int(os.environ.get('GIVE_UP_DELAY_MS', '1000'))
    STOP_DELAY_MS = int(os.environ.get('STOP_DELAY_MS', '1000'))
    # Health carries over between play-throughs unless this is enabled
    RESET_HEALTH_ON_START = os.environ.get('RESET_HEALTH_ON_START', '0').lower() in ('1', 'true', 'yes')
    # 'socketio' runs timers as background tasks; 'manual' uses a virtual clock
    TIMER_MODE = os.environ.get('TIMER_MODE', 'socketio')
