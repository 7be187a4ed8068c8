from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from kino_client.api_client import ApiClient
from kino_client.errors import ApiError
from kino_client.i18n import t
from kino_client.logger import logger
from kino_client.models import AppState
from kino_client.storage import LocalStore


class BaseController:
    """Общая часть контроллеров: состояние, клиент, хранилище, флеш-сообщения"""

    def __init__(self, state: AppState, api: ApiClient, store: LocalStore):
        self.state = state
        self.api = api
        self.store = store

    def t(self, key: str) -> str:
        return t(self.state.lang, key)

    def fail(self, error: ApiError, fallback_key: str):
        """Показать ошибку пользователю; состояние не трогаем"""
        message = error.message or self.t(fallback_key)
        logger.warning(f"{type(error).__name__}: {message}")
        self.state.error(message)

    @contextmanager
    def busy(self):
        self.state.loading = True
        try:
            yield
        finally:
            self.state.loading = False

    def fetch_together(self, *calls) -> list:
        """Запустить независимые запросы одновременно и дождаться всех"""
        with ThreadPoolExecutor(max_workers=len(calls)) as pool:
            futures = [pool.submit(call) for call in calls]
            return [future.result() for future in futures]

    def refresh_bookings(self) -> bool:
        """Перечитать бронирования текущего пользователя"""
        if not self.state.token:
            return False
        try:
            bookings = self.api.fetch_my_bookings(self.state.token)
        except ApiError as e:
            self.fail(e, "flash_load_failed")
            return False
        self.state.bookings = bookings
        return True
