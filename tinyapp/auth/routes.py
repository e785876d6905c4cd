from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, RedirectResponse

from sqlalchemy.ext.asyncio import AsyncSession

from tinyapp.models.models import User
from tinyapp.auth import services
from tinyapp.database import get_db

router = APIRouter()

FORM_FIELDS = ["email", "password"]


@router.get("/register")
async def register_form(current_user: Optional[User] = Depends(services.get_current_user)):
    """Форма регистрации; авторизованного пользователя отправляет к его ссылкам."""
    if current_user:
        return RedirectResponse(url="/urls")
    return {"fields": FORM_FIELDS}


@router.post("/register")
async def register(email: str = Form(""), password: str = Form(""),
                   db: AsyncSession = Depends(get_db)):
    """
        Регистрация нового пользователя.

        :param email: Электронная почта
        :param password: Пароль
        :return: Данные пользователя, токен доступа уходит в cookie
    """
    user = await services.create_user(db, email, password)

    content = {
        "message": "Welcome to the dark side, we have cookies",
        "id": user.id,
        "email": user.email,
    }

    response = JSONResponse(content=content)
    services.issue_session(response, user)
    return response


@router.get("/login")
async def login_form(current_user: Optional[User] = Depends(services.get_current_user)):
    if current_user:
        return RedirectResponse(url="/urls")
    return {"fields": FORM_FIELDS}


@router.post("/login")
async def login(email: str = Form(""), password: str = Form(""),
                db: AsyncSession = Depends(get_db)):
    """
        Аутентификация пользователя.

        :param email: Электронная почта
        :param password: Пароль
        :return: Данные пользователя, токен доступа уходит в cookie
    """
    user = await services.authenticate_user(db, email, password)

    content = {
        "message": "Hi again in the dark side, we have cookies",
        "id": user.id,
        "email": user.email,
    }

    response = JSONResponse(content=content)
    services.issue_session(response, user)
    return response


@router.api_route("/logout", methods=["POST", "DELETE"])
async def logout():
    """
        Выход из системы. Без сессии тоже завершается успешно.
    """
    response = JSONResponse(content={"message": "Вы успешно вышли из системы"})
    services.clear_session(response)
    return response
