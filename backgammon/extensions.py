# backgammon/extensions.py
"""
Инициализация расширений Flask и глобальных объектов.

Экземпляры расширений создаются здесь, чтобы избежать циклических
импортов и упростить фабрику приложений (app factory).
"""

from flask_socketio import SocketIO
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import queue

# --- Расширения Flask ---

# SocketIO доставляет уведомления доски клиенту (слой презентации).
socketio = SocketIO(cors_allowed_origins="*")

# Limiter для ограничения частоты запросов (rate limiting) по IP клиента
limiter = Limiter(key_func=get_remote_address)


# --- Глобальное управление состоянием ---

# Потокобезопасная очередь уведомлений: обработчики кладут
# {'event', 'payload', 'room'}, фоновый воркер отправляет их через SocketIO.
notification_queue: queue.Queue = queue.Queue()
