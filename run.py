#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for StudyShare. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action init-db
    python run.py --action create-admin --username admin --password secret
    python run.py --action config
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from studyshare.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "init-db", "create-admin", "config", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option("--username", default=None, help="Admin username (for create-admin action).")
@click.option("--password", default=None, help="Admin password (for create-admin action).")
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    username: str | None,
    password: str | None,
) -> None:
    """
    StudyShare Entry Point.

    Run the web server, prepare the database, seed an admin account,
    or view configuration.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Create the tables
        python run.py --action init-db

        # Seed an admin account
        python run.py --action create-admin --username admin --password secret
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "init-db":
        init_db(logger)
    elif action == "create-admin":
        create_admin(logger, username, password)
    elif action == "config":
        show_config(logger)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the uvicorn server."""
    from studyshare.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "studyshare.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger) -> None:
    """Create any missing tables."""
    from studyshare.backend.core.database import create_tables

    asyncio.run(create_tables())
    click.echo(click.style("Database ready", fg="green"))


async def _create_admin(username: str, password: str) -> str:
    from studyshare.backend.core.database import create_tables, get_session_factory
    from studyshare.backend.services.user import AdminService

    await create_tables()
    async with get_session_factory()() as session:
        admin = await AdminService(session).create_admin(username, password)
        await session.commit()
        return admin.id


def create_admin(logger, username: str | None, password: str | None) -> None:
    """Seed an admin account."""
    from studyshare.backend.core.exceptions import ApplicationError

    if not username or not password:
        click.echo(click.style("--username and --password are required", fg="red"), err=True)
        sys.exit(2)

    try:
        admin_id = asyncio.run(_create_admin(username, password))
    except ApplicationError as e:
        logger.error("Admin creation failed", extra={"error": e.message})
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"Admin '{username}' created ({admin_id})", fg="green"))


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from studyshare.backend.core.config import get_app_config

        app_config = get_app_config()
        sections = [
            ("Application Settings", app_config.application),
            ("Database Settings", app_config.database),
            ("Logging Settings", app_config.logging),
            ("Feature Flags", app_config.features),
            ("Service Settings", app_config.services),
        ]
        for title, section in sections:
            click.echo(f"{title} (from YAML):")
            click.echo("-" * 40)
            for key, value in section.model_dump().items():
                click.echo(f"  {key}: {value}")
            click.echo()

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    click.echo("StudyShare Web Application")
    click.echo("=" * 40)

    try:
        from studyshare.backend.core.config import get_app_config
        app_config = get_app_config()
        click.echo(f"Name: {app_config.application.name}")
        click.echo(f"Version: {app_config.application.version}")
        click.echo(f"Description: {app_config.application.description}")
    except Exception:
        click.echo("Name: StudyShare")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server        Start the web server")
    click.echo("  --action init-db       Create database tables")
    click.echo("  --action create-admin  Seed an admin (--username, --password)")
    click.echo("  --action config        Display configuration")
    click.echo("  --action info          Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
