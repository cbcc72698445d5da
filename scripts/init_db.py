import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.append(str(Path.cwd() / "src"))

from city_explorer.config import settings
from city_explorer.data.database import create_db_engine, init_db
from city_explorer.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def create_tables(database_url: str | None = None):
    url = database_url or settings.database.url
    engine = create_db_engine(url)
    try:
        await init_db(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging(
        settings.logging.level,
        settings.logging.file,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    url = sys.argv[1] if len(sys.argv) > 1 else None
    print("--- Creating City Explorer tables ---")
    asyncio.run(create_tables(url))
    print("Done.")
