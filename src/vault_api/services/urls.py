from urllib.parse import quote

UPLOADS_PATH = "/uploads"


def file_url(base_url: str, stored_name: str) -> str:
    """Public URL of a stored file, e.g. ``http://host:3000/uploads/<name>``."""
    return f"{base_url.rstrip('/')}{UPLOADS_PATH}/{quote(stored_name)}"
