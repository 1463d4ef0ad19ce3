from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import (
    TEST_BASE_URL,
    TEST_FILE_CONTENT,
    TEST_FILE_CONTENT_TYPE,
    TEST_FILE_NAME,
)
from tests.fixtures.app_client import stored_files


def upload(client: TestClient, name: str, content: bytes, content_type: str = TEST_FILE_CONTENT_TYPE):
    return client.post("/api/upload", files={"file": (name, content, content_type)})


def test__upload_file__happy_path(client: TestClient, storage_dir):
    response = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["message"] == "File uploaded successfully"

    descriptor = data["file"]
    assert descriptor["original_name"] == TEST_FILE_NAME
    assert descriptor["stored_name"].endswith(f"-{TEST_FILE_NAME}")
    assert descriptor["size_bytes"] == len(TEST_FILE_CONTENT)
    assert descriptor["content_type"] == TEST_FILE_CONTENT_TYPE
    assert descriptor["uploaded_at"]
    assert data["url"] == descriptor["url"]
    assert data["url"] == f"{TEST_BASE_URL}/uploads/{descriptor['stored_name']}"

    # exactly one new file, holding the payload
    assert stored_files(storage_dir) == [descriptor["stored_name"]]
    assert (storage_dir / descriptor["stored_name"]).read_bytes() == TEST_FILE_CONTENT


def test_get_uploaded_file(client: TestClient):
    stored_name = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT).json()["file"]["stored_name"]

    response = client.get(f"/uploads/{stored_name}")
    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT
    assert response.headers["content-type"].startswith("text/plain")


def test_list_files__empty(client: TestClient):
    response = client.get("/api/files")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"files": []}


def test_list_files__round_trip(client: TestClient):
    upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT)

    files = client.get("/api/files").json()["files"]
    assert len(files) == 1
    entry = files[0]
    assert entry["name"].endswith(TEST_FILE_NAME)
    assert entry["url"] == f"{TEST_BASE_URL}/uploads/{entry['name']}"

    # the catalog URL resolves to the uploaded bytes
    response = client.get(entry["url"])
    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT


def test_two_uploads_stay_independent(client: TestClient):
    upload(client, "a.txt", b"hello")
    upload(client, "b.txt", b"world", "text/plain")

    files = client.get("/api/files").json()["files"]
    assert len(files) == 2

    contents = {}
    for entry in files:
        original = entry["name"].rsplit("-", 1)[-1]
        contents[original] = client.get(entry["url"]).content

    assert contents == {"a.txt": b"hello", "b.txt": b"world"}


def test_same_name_uploads_get_distinct_stored_names(client: TestClient):
    first = upload(client, TEST_FILE_NAME, b"first").json()["file"]["stored_name"]
    second = upload(client, TEST_FILE_NAME, b"second").json()["file"]["stored_name"]

    assert first != second
    assert client.get(f"/uploads/{first}").content == b"first"
    assert client.get(f"/uploads/{second}").content == b"second"


def test_upload_sanitizes_original_name(client: TestClient, storage_dir):
    response = upload(client, "../../evil.txt", b"payload")

    assert response.status_code == status.HTTP_200_OK
    stored_name = response.json()["file"]["stored_name"]
    assert stored_name.endswith("-evil.txt")
    assert "/" not in stored_name
    assert stored_files(storage_dir) == [stored_name]


def test_upload_long_multibyte_name(client: TestClient, storage_dir):
    response = upload(client, "文" * 90 + ".txt", b"payload")

    assert response.status_code == status.HTTP_200_OK
    stored_name = response.json()["file"]["stored_name"]
    assert stored_name.endswith(".txt")
    assert len(stored_name.encode("utf-8")) <= 255
    assert stored_files(storage_dir) == [stored_name]
    assert client.get(f"/uploads/{stored_name}").content == b"payload"


def test_upload_keeps_leading_dot(client: TestClient):
    response = upload(client, ".gitignore", b"*.pyc\n")

    assert response.status_code == status.HTTP_200_OK
    descriptor = response.json()["file"]
    assert descriptor["original_name"] == ".gitignore"
    assert descriptor["stored_name"].endswith("-.gitignore")
    assert client.get(f"/uploads/{descriptor['stored_name']}").content == b"*.pyc\n"


def test_upload_binary_payload_is_byte_identical(client: TestClient):
    payload = bytes(range(256)) * 64
    stored_name = upload(client, "blob.bin", payload, "application/octet-stream").json()["file"]["stored_name"]

    assert client.get(f"/uploads/{stored_name}").content == payload


def test_list_files_skips_directories(client: TestClient, storage_dir):
    (storage_dir / "nested").mkdir()
    upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT)

    names = [entry["name"] for entry in client.get("/api/files").json()["files"]]
    assert len(names) == 1
    assert names[0].endswith(TEST_FILE_NAME)


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["timestamp"]


def test_public_base_url_is_used_for_links(app, client: TestClient):
    app.state.settings.public_base_url = "https://files.example.com"

    url = upload(client, TEST_FILE_NAME, TEST_FILE_CONTENT).json()["url"]
    assert url.startswith("https://files.example.com/uploads/")

    entry = client.get("/api/files").json()["files"][0]
    assert entry["url"].startswith("https://files.example.com/uploads/")


def test_bundled_client_app_is_served(client: TestClient, dist_dir):
    dist_dir.mkdir()
    (dist_dir / "index.html").write_text("<html>vault</html>")
    (dist_dir / "assets").mkdir()
    (dist_dir / "assets" / "app.js").write_text("console.log('vault')")

    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.text == "<html>vault</html>"

    # client-side routes fall back to index.html
    assert client.get("/some/client/route").text == "<html>vault</html>"
    assert client.get("/assets/app.js").text == "console.log('vault')"
