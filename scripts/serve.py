import sys
from pathlib import Path

import uvicorn

# Add src to path
sys.path.append(str(Path.cwd() / "src"))

from city_explorer.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "city_explorer.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
