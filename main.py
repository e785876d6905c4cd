import uvicorn
import logging

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from typing import Optional

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from tinyapp.config import LOG_LEVEL
from tinyapp.database import init_db
from tinyapp.models.models import User
from tinyapp.auth.services import get_current_user

from tinyapp.auth.routes import router as auth_router
from tinyapp.links.routes import router as links_router

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=LOG_LEVEL
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await init_db()
    yield

app = FastAPI(
    title="TinyApp",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(auth_router, tags=["Auth"])
app.include_router(links_router, tags=["Links"])


@app.get("/")
async def read_root(current_user: Optional[User] = Depends(get_current_user)):
    if current_user:
        return RedirectResponse(url="/urls")
    return RedirectResponse(url="/login")


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=True)
