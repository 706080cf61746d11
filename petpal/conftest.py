# petpal/conftest.py
import os
import sys

# Добавляем корень репозитория в PYTHONPATH, чтобы 'import petpal...' работал
sys.path.insert(0, str(os.path.dirname(os.path.dirname(__file__))))

# Тестовое окружение: in-memory SQLite, noop-календарь и eager Celery
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("CALENDAR_PROVIDER", "noop")
os.environ.setdefault("DEFAULT_TIMEZONE", "UTC")

# Обязательно после установки ENVIRONMENT подключаем Celery-конфиг eager
from petpal.workers.tasks import celery_app

celery_app.conf.task_always_eager = True
celery_app.conf.task_eager_propagates = True
