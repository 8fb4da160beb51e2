from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """前端配置，对应 VITE_API_URL / VITE_FIREBASE_API_KEY"""

    api_url: str = "http://localhost:6000"
    firebase_api_key: str = ""

    class Config:
        env_file = ".env"
        env_prefix = "VITE_"
        extra = "ignore"
