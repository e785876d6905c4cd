import logging

from passlib.context import CryptContext

from jose import jwt, JWTError
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert

from datetime import timedelta, datetime, timezone

from fastapi import Depends, Request

from tinyapp.models.models import User
from tinyapp.config import SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from tinyapp.database import get_db
from tinyapp.errors import AuthFailure, DuplicateEmail, InvalidInput, Unauthenticated
from tinyapp.utils import generate_unique_code

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM: str = "HS256"
ACCESS_TOKEN_COOKIE = "access_token"
VISITOR_COOKIE = "visitor_id"
VISITOR_COOKIE_MAX_AGE = 60 * 60 * 24 * 365 * 2


def get_password_hash(password: str) -> str:
    """Хеширует пароль.

    Args:
        password (str): Пароль для хеширования.

    Returns:
        str: Хешированный пароль.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяет, соответствует ли пароль его хешу.
    Args:
        plain_password (str): Пароль для проверки.
        hashed_password (str): Хешированный пароль.

    Returns:
        bool: True, если пароль соответствует хешу, False в противном случае.
     """
    return pwd_context.verify(plain_password, hashed_password)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Ищет пользователя по email (точное совпадение, с учетом регистра)."""
    result = await session.execute(select(User).filter_by(email=email))
    return result.scalars().first()


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(select(User).filter_by(id=user_id))
    return result.scalars().first()


async def create_user(session: AsyncSession, email: str, password: str) -> User:
    """Создает нового пользователя

    Args:
        session (AsyncSession): Сессия базы данных.
        email (str): Электронная почта пользователя.
        password (str): Пароль пользователя.

    Returns:
        User: Созданный пользователь.

    Raises:
        InvalidInput: Не указан email или пароль.
        DuplicateEmail: Пользователь с таким email уже есть.
    """
    if not email or not password:
        raise InvalidInput()
    if await get_user_by_email(session, email):
        raise DuplicateEmail()

    user_data = {
        "id": await generate_unique_code(session, User.id),
        "email": email,
        "hashed_password": get_password_hash(password),
    }

    # Выполняем INSERT-запрос
    statement = insert(User).values(**user_data)
    await session.execute(statement)
    await session.commit()

    logger.info("Зарегистрирован пользователь %s", user_data["id"])
    return User(**user_data)


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    """
        Аутентифицирует пользователя

        Args:
            session (AsyncSession): Сессия базы данных.
            email (str): Электронная почта пользователя.
            password (str): Пароль пользователя.

        Returns:
            User: Аутентифицированный пользователь.

        Raises:
            AuthFailure: Неизвестный email или неверный пароль, без различия.
    """
    user = await get_user_by_email(session, email)
    if user and verify_password(password, user.hashed_password):
        return user
    logger.warning("Неудачная попытка входа")
    raise AuthFailure()


def create_access_token(data: dict, expires_delta: timedelta) -> str:
    """
        Создает JWT-токен.

        Args:
            data (dict): Данные для токена.
            expires_delta (timedelta): Время истечения токена.

        Returns:
            str: JWT-токен.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Декодирует JWT-токен."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload.get("sub")
    except JWTError:
        return None


def issue_session(response, user: User) -> None:
    """Делает пользователя текущим для клиента: кладет токен в cookie."""
    access_token = create_access_token(
        data={"sub": user.id},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
    )


def clear_session(response) -> None:
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE)


async def get_current_user(request: Request, session: AsyncSession = Depends(get_db)) -> Optional[User]:
    """
    Получает текущего пользователя по токену из cookie

    Args:
        request (Request): Запрос с cookie access_token
        session (AsyncSession): Сессия базы данных
    Returns:
        User: Текущий пользователь или None для анонимного запроса.
        """
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        return None

    user_id = decode_access_token(token)
    if not user_id:
        return None

    return await get_user_by_id(session, user_id)


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """То же, что get_current_user, но анонимный запрос отклоняется."""
    if user is None:
        raise Unauthenticated()
    return user


def read_visitor_id(request: Request) -> Optional[str]:
    """Возвращает id посетителя из подписанной cookie или None."""
    token = request.cookies.get(VISITOR_COOKIE)
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    visitor_id = payload.get("vid")
    return visitor_id if isinstance(visitor_id, str) else None


def write_visitor_id(response, visitor_id: str) -> None:
    """Одна cookie фиксированного размера на браузер, живет VISITOR_COOKIE_MAX_AGE."""
    token = jwt.encode({"vid": visitor_id}, SECRET_KEY, algorithm=ALGORITHM)
    response.set_cookie(
        key=VISITOR_COOKIE,
        value=token,
        max_age=VISITOR_COOKIE_MAX_AGE,
        httponly=True,
    )
