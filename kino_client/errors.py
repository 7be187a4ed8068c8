class ApiError(Exception):
    """Базовая ошибка обращения к бэкенду"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(ApiError):
    """Бэкенд недоступен: сеть, DNS, таймаут"""


class RequestError(ApiError):
    """Бэкенд ответил статусом вне 2xx"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ApiMisconfiguredError(ApiError):
    """Ответ не JSON или не той формы"""
