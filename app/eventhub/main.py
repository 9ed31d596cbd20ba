import os
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.constant_file import upload_base_path, upload_url_prefix
from eventhub.database import Base, SessionLocal, engine
from eventhub.file_storage import FileStorageService
from eventhub.logger import get_logger, setup_logging
from eventhub.response_model import ErrorResponseModel
from eventhub.routes.auth_route import router as AuthRouter
from eventhub.routes.category_route import router as CategoryRouter
from eventhub.routes.event_route import router as EventRouter
from eventhub.routes.user_route import router as UserRouter
from eventhub.seed import initialize_database
from eventhub.token_issuer import TokenIssuer

# Every mapped class must be imported before create_all
from eventhub.models.user_model import Role, User
from eventhub.models.refresh_token_model import RefreshToken
from eventhub.models.category_model import Category
from eventhub.models.event_model import Event
from eventhub.models.image_model import Image
from eventhub.models.participant_model import EventParticipant

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # A missing signing key or unseedable roles stop the application here
    app.state.token_issuer = TokenIssuer.from_env()
    upload_dir = app.state.upload_dir
    app.state.file_storage = FileStorageService(upload_dir)
    os.makedirs(upload_dir, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        initialize_database(db)
    finally:
        db.close()

    logger.info("application_started", upload_dir=upload_dir)
    yield
    logger.info("application_stopped")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponseModel(HTTPStatus(exc.status_code).phrase, exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponseModel("InternalServerError", 500, "An unexpected error occurred."),
    )


def create_app(upload_dir: str = upload_base_path) -> FastAPI:
    app = FastAPI(title="EventHub", lifespan=lifespan)
    app.state.upload_dir = upload_dir

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:3001"],
        allow_credentials=True,
        allow_methods=["POST", "GET", "OPTIONS", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # An image with stored_path /images/eventImages/<file> is served at /uploads/images/eventImages/<file>
    app.mount(upload_url_prefix, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    app.include_router(AuthRouter, tags=["Auth"], prefix="/api/auth")
    app.include_router(CategoryRouter, tags=["Category"], prefix="/api/categories")
    app.include_router(EventRouter, tags=["Event"], prefix="/api/events")
    app.include_router(UserRouter, tags=["User"], prefix="/api/users")
    return app


app = create_app()
