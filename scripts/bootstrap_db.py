"""
创建数据库表（开发环境快速初始化，生产环境请使用 Alembic 迁移）

    python scripts/bootstrap_db.py
"""

import asyncio
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.database import close_db, init_db


async def main() -> None:
    try:
        await init_db()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
