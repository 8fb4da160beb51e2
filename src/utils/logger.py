"""
日志系统配置
控制台输出带颜色，可选写入日志文件
"""
import logging
import sys
from pathlib import Path
from typing import Optional


class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    MAGENTA = '\033[95m'


_LINE = "%(levelname)-8s{reset} | %(asctime)s | %(name)s | %(message)s"


class ColoredFormatter(logging.Formatter):
    """按级别着色的格式化器"""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.MAGENTA + Colors.BOLD,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "")
        log_fmt = color + _LINE.format(reset=Colors.RESET)
        formatter = logging.Formatter(log_fmt, datefmt='%Y-%m-%d %H:%M:%S')
        return formatter.format(record)


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    设置并返回一个配置好的logger

    Args:
        name: logger名称
        level: 日志级别
        log_file: 日志文件路径（可选）

    Returns:
        配置好的Logger实例
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 防止重复添加handler
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            _LINE.format(reset=""), datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger


# 预定义的logger
app_logger = setup_logger('app', level=logging.INFO)
api_logger = setup_logger('api', level=logging.INFO)
db_logger = setup_logger('database', level=logging.INFO)
email_logger = setup_logger('email', level=logging.INFO)
identity_logger = setup_logger('identity', level=logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """获取或创建logger"""
    return setup_logger(name)
