import json
import os

from kino_client.config import STATE_FILE
from kino_client.logger import logger


class LocalStore:
    """Локальное хранилище клиента: токен, язык, тема"""

    def __init__(self, path: str = STATE_FILE):
        self.path = path
        self.data = {}
        self.load()

    def load(self):
        """Загрузить значения из файла"""
        if not os.path.exists(self.path):
            logger.info("State file not found, starting with empty store")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading state file: {e}")
            return

        if not isinstance(data, dict):
            logger.error("State file does not hold an object, ignoring it")
            return
        self.data = {key: str(value) for key, value in data.items()}

    def save(self):
        """Сохранить значения в файл"""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, ensure_ascii=False, indent=2)

    def get(self, key: str, default: str = None):
        return self.data.get(key, default)

    def set(self, key: str, value: str):
        self.data[key] = value
        self.save()

    def remove(self, key: str):
        if key in self.data:
            del self.data[key]
            self.save()
