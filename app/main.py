# app/main.py
import logging

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.config import settings
from app.errors import register_exception_handlers

logging.basicConfig(
    level=settings.log_level,
    format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(title="Sitemap Architect")

app.include_router(api_router, prefix="/api")

# どんなエラーでも HTML ではなく JSON で返す
register_exception_handlers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
