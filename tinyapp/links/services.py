import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from tinyapp.errors import Forbidden, InvalidInput, NotFound
from tinyapp.models.models import Link, User, Visit
from tinyapp.utils import generate_short_code, generate_unique_code

logger = logging.getLogger(__name__)


def can_access(requester: Optional[User], link: Link) -> bool:
    """Может ли пользователь просматривать и менять ссылку (только владелец)."""
    return requester is not None and requester.id == link.owner_id


def ensure_owner(requester: Optional[User], link: Link) -> None:
    if not can_access(requester, link):
        raise Forbidden()


async def create_link_in_db(session: AsyncSession, long_url: str, owner_id: str) -> Link:
    """
    Функция для создания ссылки в базе данных

    Arguments:
    - session: Сессия для работы с базой данных
    - long_url: Оригинальный URL
    - owner_id: Идентификатор пользователя-владельца

    Returns:
    - Новая ссылка с обнуленными счетчиками
    """
    if not long_url:
        raise InvalidInput("Не указан URL")

    link = Link(
        short_code=await generate_unique_code(session, Link.short_code),
        long_url=long_url,
        owner_id=owner_id,
        created_at=datetime.now(timezone.utc),
        visit_count=0,
        unique_visitor_count=0,
        visits=[],
    )
    session.add(link)
    await session.commit()

    logger.info("Создана ссылка %s пользователем %s", link.short_code, owner_id)
    return link


async def get_link_by_code(session: AsyncSession, short_code: str) -> Optional[Link]:
    """Находит ссылку по короткому коду."""
    result = await session.execute(select(Link).filter_by(short_code=short_code))
    return result.scalars().first()


async def get_owned_link(session: AsyncSession, short_code: str, requester: Optional[User]) -> Link:
    """Ссылка по коду с проверкой владельца: NotFound, затем Forbidden."""
    link = await get_link_by_code(session, short_code)
    if not link:
        raise NotFound()
    ensure_owner(requester, link)
    return link


async def update_link_in_db(
        session: AsyncSession,
        short_code: str,
        new_long_url: str,
        requester: Optional[User]) -> Link:
    """
    Обновление оригинального URL у ссылки.
    :param session: сессия базы данных
    :param short_code: короткий код ссылки
    :param new_long_url: новый оригинальный URL
    :param requester: пользователь, выполняющий запрос
    """
    link = await get_owned_link(session, short_code, requester)
    if not new_long_url:
        raise InvalidInput("Не указан URL")

    link.long_url = new_long_url
    await session.commit()

    logger.info("Ссылка %s обновлена", short_code)
    return link


async def delete_link_from_db(session: AsyncSession, short_code: str, requester: Optional[User]) -> None:
    """
    Удаление ссылки вместе с журналом переходов.
    :param session: сессия базы данных
    :param short_code: короткий код ссылки
    :param requester: пользователь, выполняющий запрос
    """
    link = await get_owned_link(session, short_code, requester)

    await session.execute(delete(Visit).where(Visit.link_id == link.id))
    await session.execute(delete(Link).where(Link.id == link.id))
    await session.commit()

    logger.info("Ссылка %s удалена", short_code)


async def urls_for_user(session: AsyncSession, owner_id: str) -> List[Link]:
    """Все ссылки пользователя в порядке создания."""
    result = await session.execute(
        select(Link).filter_by(owner_id=owner_id).order_by(Link.id)
    )
    return list(result.scalars().all())


async def record_visit(
        session: AsyncSession,
        short_code: str,
        visitor_token: Optional[str]) -> Tuple[Link, str]:
    """
    Учитывает переход по ссылке.

    Каждый переход увеличивает visit_count и добавляется в журнал visits.
    unique_visitor_count растет, если visitor_token не передан или еще не
    встречался у этой ссылки. Без токена посетителю выдается новый id.

    :param session: сессия базы данных
    :param short_code: короткий код ссылки
    :param visitor_token: id посетителя из cookie или None
    :return: ссылка и id посетителя, который нужно сохранить в cookie
    """
    link = await get_link_by_code(session, short_code)
    if not link:
        raise NotFound()

    seen = visitor_token is not None and any(
        visit.visitor_id == visitor_token for visit in link.visits
    )
    visitor_id = visitor_token or generate_short_code()

    # Без блокировок: параллельные переходы могут потерять инкремент
    link.visit_count += 1
    if not seen:
        link.unique_visitor_count += 1
    link.visits.append(Visit(visitor_id=visitor_id, timestamp=datetime.now(timezone.utc)))
    await session.commit()

    logger.debug("Переход по %s, посетитель %s", short_code, visitor_id)
    return link, visitor_id


async def resolve(session: AsyncSession, short_code: str, visitor_token: Optional[str]) -> Tuple[Link, str]:
    """Публичный переход по короткому коду: учитывает визит и отдает ссылку."""
    return await record_visit(session, short_code, visitor_token)
