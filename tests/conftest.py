from tests.fixtures.app_client import (  # noqa: F401
    app,
    asgi_http_client,
    client,
    dist_dir,
    settings,
    storage_dir,
)
