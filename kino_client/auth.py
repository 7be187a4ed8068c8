from kino_client.config import LANG_KEY, THEME_KEY, TOKEN_KEY
from kino_client.controller import BaseController
from kino_client.errors import ApiError
from kino_client.i18n import LANGUAGES
from kino_client.logger import logger
from kino_client.logging_service import log_action
from kino_client.models import AdminState
from kino_client.schemas import ChangePasswordRequest, LoginRequest, RegisterRequest, UpdateProfileRequest

THEMES = ("light", "dark")


class AuthController(BaseController):
    """Токен, профиль пользователя и настройки интерфейса"""

    def load_preferences(self):
        """Применить сохранённые язык и тему"""
        lang = self.store.get(LANG_KEY)
        if lang in LANGUAGES:
            self.state.lang = lang
        theme = self.store.get(THEME_KEY)
        if theme in THEMES:
            self.state.theme = theme

    def set_language(self, lang: str):
        if lang not in LANGUAGES:
            raise ValueError(f"Unsupported language: {lang}")
        self.state.lang = lang
        self.store.set(LANG_KEY, lang)

    def set_theme(self, theme: str):
        if theme not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        self.state.theme = theme
        self.store.set(THEME_KEY, theme)

    def restore(self) -> bool:
        """Восстановить вход по сохранённому токену.

        Если бэкенд не принял токен (истёк, отозван), токен удаляется
        и клиент остаётся гостем. Исключения наружу не выходят.
        """
        token = self.store.get(TOKEN_KEY)
        if not token:
            return False

        try:
            user = self.api.fetch_me(token)
        except ApiError as e:
            logger.warning(f"Stored token rejected, signing out: {e.message}")
            self.store.remove(TOKEN_KEY)
            self.state.token = None
            self.state.user = None
            return False

        self.state.token = token
        self.state.user = user
        logger.info(f"Session restored for {user.email}")
        self.refresh_bookings()
        return True

    def _signed_in(self, token: str, user, action: str, message_key: str):
        self.state.token = token
        self.state.user = user
        self.store.set(TOKEN_KEY, token)
        self.state.success(self.t(message_key))
        logger.info(f"{action} succeeded for {user.email}")
        log_action(action=action, user_id=user.email, details={"is_admin": user.is_admin})
        self.refresh_bookings()

    def login(self, email: str, password: str) -> bool:
        self.state.clear_flash()
        with self.busy():
            try:
                result = self.api.login(LoginRequest(email=email, password=password))
            except ApiError as e:
                self.fail(e, "flash_auth_error")
                return False
            self._signed_in(result.token, result.user, "LOGIN", "flash_logged_in")
        return True

    def register(self, name: str, email: str, password: str) -> bool:
        self.state.clear_flash()
        with self.busy():
            try:
                result = self.api.register(RegisterRequest(name=name, email=email, password=password))
            except ApiError as e:
                self.fail(e, "flash_auth_error")
                return False
            self._signed_in(result.token, result.user, "REGISTER", "flash_account_created")
        return True

    def logout(self):
        """Выйти без обращения к бэкенду"""
        user = self.state.user
        self.state.token = None
        self.state.user = None
        self.state.bookings = []
        self.state.admin = AdminState()
        self.store.remove(TOKEN_KEY)
        if user:
            logger.info(f"Logout for {user.email}")
            log_action(action="LOGOUT", user_id=user.email)

    def update_profile(self, name: str) -> bool:
        if not self.state.token:
            self.state.error(self.t("flash_auth_error"))
            return False
        with self.busy():
            try:
                user = self.api.update_profile(self.state.token, UpdateProfileRequest(name=name))
            except ApiError as e:
                self.fail(e, "flash_profile_save_failed")
                return False
        self.state.user = user
        self.state.success(self.t("flash_profile_saved"))
        return True

    def change_password(self, current_password: str, new_password: str) -> bool:
        if not self.state.token:
            self.state.error(self.t("flash_auth_error"))
            return False
        request = ChangePasswordRequest(current_password=current_password, new_password=new_password)
        with self.busy():
            try:
                self.api.change_password(self.state.token, request)
            except ApiError as e:
                self.fail(e, "flash_password_change_failed")
                return False
        self.state.success(self.t("flash_password_changed"))
        log_action(action="CHANGE_PASSWORD", user_id=self.state.user.email if self.state.user else "anonymous")
        return True
