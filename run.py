#!/usr/bin/env python3

import uvicorn
from src.config import settings
from src.utils.logger import app_logger

if __name__ == "__main__":
    app_logger.info("=" * 80)
    app_logger.info(f"🚀 Starting {settings.app_name}")
    app_logger.info("=" * 80)

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.listen_port,
        reload=settings.debug,
        log_level="info",
        access_log=True
    )
