import sys

import click
import uvicorn
from loguru import logger

try:
    from erp_backend.app.config import settings, PROJECT_ROOT
except Exception as e:
    logger.remove()
    logger.add(sys.stderr, level="ERROR")
    logger.opt(exception=e).critical(
        f"Failed to load configuration or set up logging: {e}"
    )
    sys.exit("Critical error: could not initialize application configuration.")

LOG_LEVELS = ["critical", "error", "warning", "info", "debug", "trace"]


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--host",
    default=settings.backend.host,
    show_default=True,
    help="Interface to bind the API server to.",
)
@click.option(
    "--port",
    type=int,
    default=settings.backend.port,
    show_default=True,
    help="Port for the API server.",
)
@click.option(
    "--reload/--no-reload",
    default=True,
    show_default=True,
    help="Restart the server when files under erp_backend/ change.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=settings.logging.level.lower(),
    show_default=True,
    help="Log level for uvicorn's own loggers.",
)
def main(host: str, port: int, reload: bool, log_level: str):
    """Serve the ERP analytics and inventory API with uvicorn."""
    logger.info(f"Starting Uvicorn server on {host}:{port} (reload={reload})")
    logger.debug(f"Full settings dump: {settings.model_dump_json(indent=2)}")

    # log_config=None keeps uvicorn from replacing the loguru intercept handlers
    uvicorn.run(
        "erp_backend.app.main:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=[str(PROJECT_ROOT / "erp_backend")] if reload else None,
        log_level=log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
