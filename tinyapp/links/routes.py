from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse

from sqlalchemy.ext.asyncio import AsyncSession

from tinyapp.links.models import LinkDetail, LinkRead
from tinyapp.models.models import User
from tinyapp.database import get_db
from tinyapp.auth.services import require_user, read_visitor_id, write_visitor_id
from tinyapp.links.services import create_link_in_db, get_owned_link, update_link_in_db, \
    delete_link_from_db, urls_for_user, resolve

router = APIRouter()


@router.get("/urls")
async def list_links(current_user: User = Depends(require_user), db: AsyncSession = Depends(get_db)):
    """
        Ссылки текущего пользователя в порядке создания.
        :return: JSON-список ссылок
    """
    links = await urls_for_user(db, current_user.id)
    return JSONResponse(status_code=200, content=[
        LinkRead.model_validate(link).model_dump(mode="json") for link in links
    ])


@router.get("/urls.json")
async def list_links_json(current_user: User = Depends(require_user), db: AsyncSession = Depends(get_db)):
    """Ссылки пользователя в виде {short_code: long_url}."""
    links = await urls_for_user(db, current_user.id)
    return {link.short_code: link.long_url for link in links}


@router.post("/urls", status_code=201)
async def create_link(
        long_url: str = Form("", alias="longURL"),
        current_user: User = Depends(require_user),
        db: AsyncSession = Depends(get_db),
):
    """
        Создание короткой ссылки.
        Принимает форму с полем:
        :param longURL: URL для сокращения

        :return: JSON с созданной ссылкой
    """
    link = await create_link_in_db(db, long_url, current_user.id)
    return JSONResponse(status_code=201, content=LinkRead.model_validate(link).model_dump(mode="json"))


@router.get("/urls/new")
async def new_link_form(current_user: User = Depends(require_user)):
    return {"fields": ["longURL"]}


@router.get("/urls/{short_code}")
async def show_link(short_code: str, current_user: User = Depends(require_user),
                    db: AsyncSession = Depends(get_db)):
    """
        Ссылка со статистикой переходов. Доступна только владельцу.
        :param short_code: Короткий код ссылки
    """
    link = await get_owned_link(db, short_code, current_user)
    return JSONResponse(status_code=200, content=LinkDetail.model_validate(link).model_dump(mode="json"))


@router.api_route("/urls/{short_code}", methods=["POST", "PUT"])
async def update_link(
        short_code: str,
        long_url: str = Form("", alias="longURL"),
        current_user: User = Depends(require_user),
        db: AsyncSession = Depends(get_db),
):
    """
    Меняет оригинальный URL ссылки.
    :param short_code: Короткий код ссылки
    :param longURL: Новый URL
    :return: Обновленная ссылка
    """
    link = await update_link_in_db(db, short_code, long_url, current_user)
    return JSONResponse(status_code=200, content=LinkRead.model_validate(link).model_dump(mode="json"))


@router.api_route("/urls/{short_code}/delete", methods=["POST", "DELETE"])
async def delete_link(short_code: str, current_user: User = Depends(require_user),
                      db: AsyncSession = Depends(get_db)):
    """
        Удаляет ссылку.
        :param short_code: Короткий код ссылки
    """
    await delete_link_from_db(db, short_code, current_user)
    return JSONResponse(status_code=200, content={"message": "Ссылка удалена"})


@router.get("/u/{short_code}")
async def redirect_to_long_url(short_code: str, request: Request, db: AsyncSession = Depends(get_db)):
    """
        Переход по сокращенной ссылке на оригинальный URL. Доступен всем.
        :param short_code: Короткий код ссылки
        :return: Редирект на оригинальный URL
    """
    visitor_token = read_visitor_id(request)
    link, visitor_id = await resolve(db, short_code, visitor_token)

    long_url = link.long_url
    if not long_url.startswith("http://") and not long_url.startswith("https://"):
        long_url = "https://" + long_url

    response = RedirectResponse(url=long_url)
    if visitor_token != visitor_id:
        write_visitor_id(response, visitor_id)
    return response
