# cli.py
import asyncio
import logging

import click

from vault_api.client import UploadController
from vault_api.config.settings import get_settings
from vault_api.logging_config import setup_logging

# Configure logging
logger = logging.getLogger(__name__)

@click.group()
def cli():
    """CLI commands for running the Vault API and talking to it"""
    setup_logging(get_settings().log_level)

@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host, port, reload):
    """Run the HTTP server"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "vault_api.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )

@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Environment: {settings.environment}")
    print(f"  Listen: {settings.host}:{settings.port}")
    print(f"  Storage Dir: {settings.storage_dir}")
    print(f"  Client Dist Dir: {settings.client_dist_dir}")
    print(f"  Public Base URL: {settings.public_base_url or '(from request)'}")
    print(f"  API Base URL: {settings.api_base_url}")
    print(f"  Client Timeout: {settings.client_timeout_seconds}s")

@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--url", "base_url", default=None, help="Server base URL (defaults to API_BASE_URL)")
def upload(paths, base_url):
    """Upload a file and print the resulting catalog (only the first PATH is sent)"""
    settings = get_settings()

    async def run():
        async with UploadController(
            base_url=base_url or settings.api_base_url,
            timeout=settings.client_timeout_seconds,
        ) as controller:
            result = await controller.select(list(paths))
            await controller.wait_idle()
            return controller, result

    controller, result = asyncio.run(run())
    print(controller.message)
    if result is None:
        raise SystemExit(1)
    print(f"URL: {result.url}")
    _print_catalog(controller)

@cli.command("list")
@click.option("--url", "base_url", default=None, help="Server base URL (defaults to API_BASE_URL)")
def list_files(base_url):
    """Print the catalog of stored files"""
    settings = get_settings()

    async def run():
        async with UploadController(
            base_url=base_url or settings.api_base_url,
            timeout=settings.client_timeout_seconds,
        ) as controller:
            return controller

    controller = asyncio.run(run())
    if controller.message:
        print(controller.message)
        raise SystemExit(1)
    _print_catalog(controller)

def _print_catalog(controller: UploadController):
    if not controller.files:
        print("No files uploaded yet.")
        return
    for entry in controller.files:
        print(f"{entry.name}\t{entry.url}")

if __name__ == "__main__":
    cli()
