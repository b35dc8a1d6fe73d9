# backgammon/services/logging_service.py

import json
import datetime
import logging
import threading
from flask import current_app

logger = logging.getLogger(__name__)

file_lock = threading.RLock()


def log_game_result(result_data):
    """Записывает итог партии в JSON-лог (путь из app.config)."""
    result_data['timestamp'] = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_entry = json.dumps(result_data, ensure_ascii=False) + '\n'

    results_log_path = current_app.config['RESULTS_LOG_FILE']

    with file_lock:
        try:
            with open(results_log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            logger.error(f"Failed to write to results log file {results_log_path}: {e}")


def log_event_to_file(log_entry):
    """Записывает общее событие в лог-файл (путь из app.config)."""
    log_path = current_app.config['EVENT_LOG_FILE']

    with file_lock:
        try:
            with open(log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            logger.error(f"Failed to write to log file {log_path}: {e}")
