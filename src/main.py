import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from src.api.v1.router import api_router
from src.config import Settings, settings as default_settings
from src.core.database import Database
from src.core.exceptions import AppException
from src.core.identity import IdentityProvider, init_identity_provider
from src.services.email_service import SmtpTransport
from src.utils.logger import api_logger, app_logger, email_logger


def _error_body(message: str, code: str) -> dict:
    return {
        "success": False,
        "error": message,
        "message": message,
        "code": code,
        "timestamp": time.time(),
    }


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    identity: Optional[IdentityProvider] = None,
    mail_transport: Optional[SmtpTransport] = None,
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用启动和关闭时执行"""
        app_logger.info("🚀 Application starting up...")

        app.state.database.open()
        app.state.database.init_schema()
        app_logger.info("✅ Database initialized successfully")

        # Admin SDK 只在启动时检查一次
        if app.state.identity is None:
            app.state.identity = init_identity_provider(settings.firebase_credentials_path)

        transport = app.state.mail_transport
        email_logger.info(
            f"Configured transport: Host={transport.host}, Port={transport.port}, "
            f"Secure={transport.secure}, User={transport.username}")
        if not settings.smtp_password:
            email_logger.warning(
                "SMTP_PASSWORD is not defined or empty. Email sending will likely fail.")

        app_logger.info(
            f"✅ {settings.app_name} v{settings.app_version} listening on port {settings.listen_port}")

        yield

        app_logger.info("🛑 Application shutting down...")
        app.state.database.close()
        app_logger.info("✅ Application shut down complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="SuperTA 账号服务 - 用户资料、登录审计、邮箱验证与密码重置",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(settings.database_url)
    app.state.identity = identity
    app.state.mail_transport = mail_transport or SmtpTransport.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 请求ID与访问日志（不记录请求体，避免写入密码）
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        api_logger.info(f"{request.method} request to {request.url.path}"
                        + (f"?{request.url.query}" if request.url.query else ""))

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        if exc.status_code >= 500:
            api_logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_error_body("Invalid request body", "BAD_REQUEST"))

    # 通用异常处理：细节只写日志
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        api_logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=_error_body("Internal server error", "INTERNAL_ERROR"))

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "API Server is running"

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
