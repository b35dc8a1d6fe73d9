import eventlet
eventlet.monkey_patch()

# 2. Обычные импорты
import argparse
from backgammon import create_app

print("[run.py] Eventlet monkey-patch applied.")

# 3. Создаем приложение
app, socketio = create_app()

if __name__ == '__main__':

    # 4. Настраиваем парсер аргументов
    parser = argparse.ArgumentParser(description='Start the backgammon board server (Flask-SocketIO).')

    parser.add_argument(
        '-e', '--env',
        default='local',
        choices=['local', 'prod'],
        help='local (development, 127.0.0.1:4999) or prod (0.0.0.0:5000). Default: local.'
    )

    # 5. Считываем аргументы
    args = parser.parse_args()

    # 6. Выбираем, как запускать сервер
    if args.env == 'prod':
        print("[run.py] Starting in PRODUCTION mode on 0.0.0.0:5000...")
        socketio.run(app,
                     host='0.0.0.0',
                     port=5000,
                     debug=False
                    )

    else:
        print("[run.py] Starting in LOCAL mode on 127.0.0.1:4999 (debug=True)...")
        socketio.run(app,
                     host='127.0.0.1',
                     port=4999,
                     debug=True,
                     allow_unsafe_werkzeug=True
                    )
