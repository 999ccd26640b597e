import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    DEFAULT_DATABASE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_STAGING_DIR,
    DEFAULT_UPLOAD_TIMEOUT_MINUTES,
    DEFAULT_USER,
)
from .core import BackupOrchestrator
from .errors import BackupError
from .models import BackupParameters
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .mongobackup.yml if present.",
)
@click.option("--host", required=False, help=f"MongoDB host (default: {DEFAULT_HOST})")
@click.option("--port", required=False, type=int, help=f"MongoDB port (default: {DEFAULT_PORT})")
@click.option(
    "--database",
    required=False,
    help=f"Database name reported in logs (default: {DEFAULT_DATABASE})",
)
@click.option(
    "--staging-dir",
    required=False,
    type=click.Path(file_okay=False),
    help=f"Directory for the local archive (default: {DEFAULT_STAGING_DIR})",
)
@click.option("--bucket", required=False, help="Target GCS bucket. Overrides BACKUP_BUCKET.")
@click.option(
    "--upload-timeout-minutes",
    required=False,
    type=int,
    default=None,
    help=f"Time budget for the upload (default: {DEFAULT_UPLOAD_TIMEOUT_MINUTES}).",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Validate settings and print the backup plan without dumping or uploading.",
)
def main(
    config,
    host,
    port,
    database,
    staging_dir,
    bucket,
    upload_timeout_minutes,
    verbose,
    log_file,
    dry_run,
):
    """Dump a MongoDB deployment and archive it in Google Cloud Storage.

    Credentials come from MONGO_USER, MONGO_PASSWORD and BACKUP_BUCKET.
    """
    logger = logging.getLogger("mongobackup")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".mongobackup.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
        environment = config_loader.load_environment()
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    # environment settings win over the config file
    settings = dict(config_values)
    settings.update(environment)

    verbose = bool(_resolve_option(verbose, settings, "verbose", default=False))
    log_file = _resolve_option(log_file, settings, "log_file")
    dry_run = bool(_resolve_option(dry_run, settings, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        params = BackupParameters(
            password=settings.get("password", ""),
            bucket=str(_resolve_option(bucket, settings, "bucket") or ""),
            user=str(_resolve_option(None, settings, "user", default=DEFAULT_USER)),
            host=str(_resolve_option(host, settings, "host", default=DEFAULT_HOST)),
            port=int(_resolve_option(port, settings, "port", default=DEFAULT_PORT)),
            database=str(_resolve_option(database, settings, "database", default=DEFAULT_DATABASE)),
            staging_dir=str(
                _resolve_option(staging_dir, settings, "staging_dir", default=DEFAULT_STAGING_DIR)
            ),
            upload_timeout_minutes=int(
                _resolve_option(
                    upload_timeout_minutes,
                    settings,
                    "upload_timeout_minutes",
                    default=DEFAULT_UPLOAD_TIMEOUT_MINUTES,
                )
            ),
        )
    except (TypeError, ValueError) as exc:
        raise click.ClickException(f"Invalid configuration value: {exc}") from exc

    orchestrator = BackupOrchestrator(params=params, dry_run=dry_run)
    raise SystemExit(orchestrator.run())


if __name__ == "__main__":
    main()
