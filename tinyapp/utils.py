import random
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tinyapp.errors import ShortCodeCollision

ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
SHORT_CODE_LENGTH = 6
MAX_ATTEMPTS = 10


def generate_short_code() -> str:
    """Генерирует случайный код из символов [0-9a-zA-Z].

    Уникальность не проверяется, см. generate_unique_code.
    """
    return "".join(random.choices(ALPHABET, k=SHORT_CODE_LENGTH))


async def generate_unique_code(session: AsyncSession, column) -> str:
    """Генерирует код, которого еще нет в колонке column.

    Args:
        session (AsyncSession): Сессия базы данных.
        column: Колонка модели с уникальными кодами (Link.short_code, User.id).

    Returns:
        str: Свободный код.
    """
    for _ in range(MAX_ATTEMPTS):
        code = generate_short_code()
        result = await session.execute(select(column).where(column == code))
        if result.first() is None:
            return code
    raise ShortCodeCollision()
