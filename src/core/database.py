from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from src.utils.logger import db_logger

# 创建基础模型类
Base = declarative_base()


class Database:
    """数据库句柄

    由应用在启动时创建并 open()，关闭时 close()；通过依赖注入传给各请求。
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        if self._engine is not None:
            return self

        kwargs = dict(self.engine_kwargs)
        if self.url.startswith("sqlite"):
            kwargs.setdefault("connect_args", {"check_same_thread": False})
            # 内存库需要共享同一连接
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs.setdefault("poolclass", StaticPool)
        else:
            kwargs.setdefault("pool_pre_ping", True)
            kwargs.setdefault("pool_recycle", 300)

        self._engine = create_engine(self.url, **kwargs)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self._engine)
        db_logger.info(f"Connected to database at {self._safe_url()}")
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            db_logger.info("Database connection closed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def init_schema(self) -> None:
        """如果表不存在则自动创建"""
        # 导入所有模型以确保它们被注册到Base.metadata
        import src.models  # noqa: F401

        existing_tables = set(inspect(self.engine).get_table_names())
        expected_tables = list(Base.metadata.tables.keys())
        missing_tables = [
            table for table in expected_tables if table not in existing_tables]

        if missing_tables:
            db_logger.info(f"Creating missing tables: {missing_tables}")
            Base.metadata.create_all(bind=self.engine)
        else:
            db_logger.info("All tables present")

    def _safe_url(self) -> str:
        # 不把凭据写进日志
        return self.url.split("@")[-1]


def get_db(request: Request) -> Iterator[Session]:
    """获取数据库会话"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
