import json
from datetime import datetime
from pathlib import Path

from kino_client.config import LOG_DIR
from kino_client.logger import logger

LOG_FILE = Path(LOG_DIR) / "user_actions.log"


def log_action(action: str, user_id: str, details: dict = None):
    """Логирует действия пользователей в файл"""
    log_entry = {
        "timestamp": datetime.now().isoformat(),
        "action": action,
        "user_id": user_id,
        "details": details or {}
    }

    try:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + "\n")
    except OSError as e:
        logger.error(f"Failed to write action log: {e}")


def get_logs(limit: int = 100) -> list:
    """Возвращает последние логи"""
    if not LOG_FILE.exists():
        return []

    try:
        with open(LOG_FILE, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as e:
        logger.error(f"Failed to read action log: {e}")
        return []

    logs = []
    for line in lines[-limit:]:
        try:
            logs.append(json.loads(line))
        except json.JSONDecodeError:
            logger.warning("Skipping malformed action log line")

    return logs
