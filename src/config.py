from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./superta.db"
    test_database_url: str = "sqlite://"

    # Email (SMTP relay)
    smtp_outgoing_server: str = "localhost"
    smtp_outgoing_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_email: str = ""
    smtp_timeout: int = 60

    # Firebase Admin
    firebase_credentials_path: str = "service-account.json"

    # Application
    app_name: str = "SuperTA Auth API"
    app_version: str = "1.0.0"
    debug: bool = False
    website_url: str = "http://localhost:6000"
    listen_port: int = 6000
    cors_origins: List[str] = ["*"]

    # 调试 / 管理接口默认关闭
    enable_debug_endpoints: bool = False
    send_welcome_email: bool = False

    # 令牌有效期
    verification_token_ttl_hours: int = Field(default=24, ge=1)
    reset_token_ttl_minutes: int = Field(default=60, ge=1)

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def sender_address(self) -> str:
        return self.smtp_email or self.smtp_username


settings = Settings()
