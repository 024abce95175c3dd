from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .goals import router as goals_router
from .logging_config import setup_logging


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging(settings.log_level)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(goals_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
