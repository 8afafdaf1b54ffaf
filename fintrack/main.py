import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fintrack.api.router import api_router
from fintrack.config import settings
from fintrack.core.database import AsyncSessionLocal, init_db
from fintrack.core.errors import AppError
from fintrack.core.log_config import configure_logging
from fintrack.core.seed import seed_data

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "Auth", "description": "Registration, login and the current user."},
    {"name": "Accounts", "description": "Bank, cash and card accounts."},
    {"name": "Categories", "description": "Income and expense categories."},
    {"name": "Budgets", "description": "Periodic spending budgets per category."},
    {"name": "Transactions", "description": "Income and expense records."},
    {"name": "Reports", "description": "Aggregated spending and income."},
    {"name": "Users", "description": "Administration of user accounts."},
    {"name": "System", "description": "Service status."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed_data(session)
    yield


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_tags=tags_metadata,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
            details.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
        return JSONResponse(status_code=400, content={"message": "; ".join(details) or "Invalid request"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["System"])
    def health():
        return {"status": "operational", "version": settings.VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fintrack.main:app", host="0.0.0.0", port=8000)
