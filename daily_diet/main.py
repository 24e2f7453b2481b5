import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from daily_diet.api.router import api_router
from daily_diet.core.config import settings
from daily_diet.core.database import init_database
from daily_diet.core.session import SessionCookieMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Ошибки хранилища не маскируем и не повторяем, отдаем 500"""
    logger.exception(f"Ошибка БД на {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Daily Diet - meal log and diet metrics")

    app.add_middleware(SessionCookieMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    @app.get("/")
    async def root():
        return {
            "app": "Daily Diet",
            "links": {
                "meals": "/meals/",
                "metrics": "/meals/metrics",
                "me": "/users/me",
                "docs": "/docs",
            },
        }

    return app


app = create_app()


@app.on_event("startup")
async def startup_event():
    await init_database()
    logger.info("Приложение запущено")


if __name__ == "__main__":
    uvicorn.run(
        "daily_diet.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
