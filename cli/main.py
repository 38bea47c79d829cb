# cli/main.py
import logging
import click

from core.config import settings
from .commands.db import db
from .commands.loans import loans


@click.group()
@click.option('--log-level', default=None, help='Logging level (default: LIBRARY_LOG_LEVEL or INFO)')
def cli(log_level):
    """Library Desk CLI"""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


@cli.command()
@click.option('--host', default="127.0.0.1", show_default=True, help='Interface to bind')
@click.option('--port', default=8000, show_default=True, type=int, help='Port to listen on')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API"""
    import uvicorn

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


cli.add_command(db)
cli.add_command(loans)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
