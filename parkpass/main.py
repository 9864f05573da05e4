"""Run the ParkPass API server."""
import uvicorn

from parkpass.config.settings_env import settings
from parkpass.infrastructure.persistence.database import init_db
from parkpass.shared.utils import logger


def main():
    init_db()
    logger.info(f"Starting ParkPass API on {settings.FASTAPI_HOST}:{settings.FASTAPI_PORT}")
    uvicorn.run(
        "parkpass.infrastructure.api.app:app",
        host=settings.FASTAPI_HOST,
        port=settings.FASTAPI_PORT,
        reload=settings.DEV_MODE,
    )


if __name__ == "__main__":
    main()
