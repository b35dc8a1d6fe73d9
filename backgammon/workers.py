# backgammon/workers.py

import logging

logger = logging.getLogger(__name__)


def dispatch_notification(socketio_instance, msg) -> bool:
    """Отправляет одно уведомление в его комнату. False - сообщение невалидно."""
    event = msg.get('event')
    payload = msg.get('payload', {})
    room = msg.get('room')

    if not event or not room:
        logger.warning(f"[QueueConsumer] Skipping invalid message: {msg}")
        return False

    socketio_instance.emit(event, payload, room=room)
    return True


def _notification_queue_consumer(socketio_instance, queue_instance):
    """
    Фоновый воркер (consumer) для обработки очереди уведомлений.
    Извлекает сообщения из `notification_queue` и отправляет их
    клиентам через SocketIO.
    """
    logger.info("[QueueConsumer] Consumer thread started.")
    while True:
        try:
            msg = queue_instance.get()
            if msg is None:
                logger.info("[QueueConsumer] Got None, shutting down.")
                break

            dispatch_notification(socketio_instance, msg)

        except Exception as e:
            logger.error(f"[QueueConsumer] Consumer failure: {e}", exc_info=True)
            socketio_instance.sleep(1)


def start_notification_consumer(socketio_instance, queue_instance):
    """
    Публичная функция для запуска воркера из create_app.
    """
    socketio_instance.start_background_task(
        target=_notification_queue_consumer,
        socketio_instance=socketio_instance,
        queue_instance=queue_instance
    )
