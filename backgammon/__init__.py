import os
import logging
from flask import Flask
from .extensions import socketio, limiter, notification_queue
from .globals import log_event
from .services.logging_service import log_game_result
from .workers import start_notification_consumer

# Получаем логгер
logger = logging.getLogger(__name__)


def _configure_logging(app):
    """Настраивает файловый логгер (логгеры модулей пакета наследуют его)."""
    for handler in list(app.logger.handlers):
        if getattr(handler, 'is_backgammon_file_handler', False):
            app.logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(app.config['LOG_FILE'], encoding='utf-8')
    file_handler.is_backgammon_file_handler = True
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
    app.logger.addHandler(file_handler)
    app.logger.setLevel(logging.INFO)
    logger.info("File logger configured.")


def _init_extensions(app):
    """Инициализирует расширения Flask."""
    socketio.init_app(app, async_mode=app.config['SOCKETIO_ASYNC_MODE'])
    limiter.init_app(app)
    logger.info("Flask extensions (SocketIO, Limiter) initialized.")


def _init_services(app):
    """Инициализирует и внедряет сервисы приложения."""

    # Импорты сервисов здесь, чтобы избежать циклических зависимостей.
    from .services.game_service import GameService
    from .services.game_factory import GameFactory
    from .services.game_registry import GameRegistry

    registry = GameRegistry(log_event_func=log_event)

    game_factory = GameFactory(
        log_event=log_event,
        log_result=log_game_result,
        notification_queue=notification_queue
    )

    game_service = GameService(
        registry=registry,
        factory=game_factory,
        max_active_games=app.config['MAX_ACTIVE_GAMES']
    )

    # Прикрепляем главный сервис к экземпляру приложения
    app.game_service = game_service
    logger.info("Game services (GameService, Factory, Registry) initialized.")


def _register_blueprints(app):
    """Регистрирует все маршруты API (Blueprints)."""
    from .api.game_routes import bp as games_bp
    app.register_blueprint(games_bp)

    logger.info("Blueprints registered.")


def _register_socketio_handlers():
    """
    Импортирует обработчики SocketIO для их регистрации.
    """
    # Этот импорт регистрирует обработчики в экземпляре socketio
    from .sockets import connection_handlers
    from .sockets import game_handlers
    logger.info("SocketIO handlers (connection, game) registered.")


def create_app(test_config=None, instance_path=None):
    """
    Фабрика приложений (Паттерн Application Factory).
    """

    app = Flask(
        __name__,
        instance_relative_config=True,
        instance_path=instance_path
    )

    # 1. Загрузка конфигурации
    app.config.from_object('backgammon.config.Config')
    app.config.from_pyfile('config.py', silent=True)
    if test_config is not None:
        app.config.from_mapping(test_config)

    os.makedirs(app.instance_path, exist_ok=True)
    for key in ('LOG_FILE', 'EVENT_LOG_FILE', 'RESULTS_LOG_FILE'):
        app.config[key] = os.path.join(app.instance_path, app.config[key])

    # 2. Настройка логирования
    _configure_logging(app)

    # 3. Регистрация обработчиков SocketIO
    # (до init_app: socketio переносит их на сервер каждого приложения)
    _register_socketio_handlers()

    # 4. Инициализация расширений
    _init_extensions(app)

    # 5. Инициализация сервисов
    _init_services(app)

    # 6. Регистрация Blueprints (маршрутов API)
    _register_blueprints(app)

    # 7. Запуск фонового воркера
    if app.config['START_NOTIFICATION_CONSUMER']:
        logger.info("Starting notification consumer...")
        start_notification_consumer(socketio, notification_queue)

    app.logger.info("Application 'backgammon-board' created.")
    app.logger.info(f"Log file: {app.config['LOG_FILE']}")

    return app, socketio
