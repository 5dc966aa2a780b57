import os

import uvicorn

from app.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weather_gateway")
    port = int(os.getenv("PORT", 3000))
    logger.info(f"Starting weather gateway on port {port} ({settings.environment})")

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_config=None,
    )
