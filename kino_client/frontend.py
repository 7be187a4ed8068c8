import threading

from kino_client.admin import AdminPanel
from kino_client.api_client import ApiClient
from kino_client.auth import AuthController
from kino_client.config import DOWNLOAD_DIR
from kino_client.logger import logger
from kino_client.models import AppState
from kino_client.storage import LocalStore
from kino_client.workflow import BookingWorkflow


class Frontend:
    """Одно состояние приложения и контроллеры, которые его меняют"""

    def __init__(self, api: ApiClient = None, store: LocalStore = None, download_dir: str = DOWNLOAD_DIR):
        self.state = AppState()
        self.api = api or ApiClient()
        self.store = store or LocalStore()
        self.workflow = BookingWorkflow(self.state, self.api, self.store, download_dir=download_dir)
        self.auth = AuthController(self.state, self.api, self.store)
        self.admin = AdminPanel(self.state, self.api, self.store)
        # Один переход состояния за раз
        self.lock = threading.RLock()

    def start(self):
        """Первичная загрузка: настройки, афиша, вход по токену, админка"""
        self.auth.load_preferences()
        self.workflow.load_movies()
        self.auth.restore()
        self.admin.load()
        logger.info("Frontend state initialised")

    def login(self, email: str, password: str) -> bool:
        if not self.auth.login(email, password):
            return False
        self.admin.load()
        return True

    def register(self, name: str, email: str, password: str) -> bool:
        if not self.auth.register(name, email, password):
            return False
        self.admin.load()
        return True

    def logout(self):
        self.workflow.close_qr()
        self.auth.logout()
