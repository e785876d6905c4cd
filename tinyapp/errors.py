from typing import Any, Optional

from fastapi import HTTPException, status


class TinyAppError(HTTPException):
    """Базовая ошибка приложения, отдается клиенту как {"detail": ...}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: Any = "Внутренняя ошибка"

    def __init__(self, detail: Any = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail if detail is not None else type(self).detail,
            headers=headers,
        )


class NotFound(TinyAppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Ссылка не найдена"


class Forbidden(TinyAppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Ссылка принадлежит другому пользователю"


class Unauthenticated(TinyAppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = {"message": "Пользователь не авторизован", "login_url": "/login"}


class DuplicateEmail(TinyAppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Пользователь уже существует"


class InvalidInput(TinyAppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Email и пароль обязательны"


class AuthFailure(TinyAppError):
    # Одна ошибка и для неизвестного email, и для неверного пароля
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Неверный логин или пароль"


class ShortCodeCollision(TinyAppError):
    detail = "Не удалось сгенерировать свободный код"
