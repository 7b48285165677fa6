import os
import sys

import uvicorn

from utils.logging_utils import build_uvicorn_log_config, get_tagged_logger, setup_logging
from webui.config import settings
from webui.errors import StartupError

logger = get_tagged_logger(__name__, tag="server")

JOB_NAME = "webui"


def load_app():
    """
    Import the application so startup failures surface before uvicorn binds a port.

    A bundle without build/index.html or an unserializable UI config is fatal.
    """
    try:
        from webui.main import app
    except StartupError as exc:
        logger.error(f"Web UI failed to start: {exc}")
        sys.exit(1)
    return app


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name=JOB_NAME)
    application = load_app()

    uvicorn.run(
        application,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        log_config=build_uvicorn_log_config(level=settings.log_level, job_name=JOB_NAME),
    )
