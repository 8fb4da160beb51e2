#!/usr/bin/env python3
"""
数据库初始化脚本
用于创建所有数据库表
"""
import sys

from src.config import settings
from src.core.database import Base, Database


def create_tables():
    """创建所有数据库表"""
    database = Database(settings.database_url).open()
    try:
        database.init_schema()
        print("✅ 数据库表创建成功！")

        print("\n📋 已创建的表:")
        for table_name in Base.metadata.tables.keys():
            print(f"  - {table_name}")
    except Exception as e:
        print(f"❌ 创建数据库表时出错: {e}")
        sys.exit(1)
    finally:
        database.close()


if __name__ == "__main__":
    create_tables()
