# backgammon/config.py

class Config:
    """Базовый класс конфигурации (безопасные значения)."""

    LOG_FILE = 'application.log'
    EVENT_LOG_FILE = 'game_events.log'
    RESULTS_LOG_FILE = 'game_results.log'

    # --- Flask-Limiter ---
    RATELIMIT_DEFAULT = "120 per minute"
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_CREATE_GAME = "20 per minute"

    # --- SocketIO ---
    # None - автоопределение (eventlet, если установлен)
    SOCKETIO_ASYNC_MODE = None
    START_NOTIFICATION_CONSUMER = True

    # 0 - без ограничения
    MAX_ACTIVE_GAMES = 100
