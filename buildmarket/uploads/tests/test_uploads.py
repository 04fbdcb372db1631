import base64
import os

from buildmarket import config

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_upload_and_download(client, register):
    _, headers = register("uploader")
    image = base64.b64encode(PNG_BYTES).decode()

    response = client.post("/api/upload", json={"image": image, "filename": "photo.PNG"}, headers=headers)
    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("/api/files/")
    name = url.rsplit("/", 1)[1]
    assert name.endswith(".png")
    assert os.path.isfile(os.path.join(config.UPLOAD_DIR, name))

    download = client.get(url, headers=headers)
    assert download.status_code == 200
    assert download.content == PNG_BYTES

    assert client.get(url).status_code == 401


def test_upload_accepts_data_url(client, register):
    _, headers = register("uploader")
    image = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
    response = client.post("/api/upload", json={"image": image, "filename": "photo.png"}, headers=headers)
    assert response.status_code == 200


def test_upload_rejects_bad_input(client, register, monkeypatch):
    _, headers = register("uploader")
    assert client.post("/api/upload", json={"image": "!!!", "filename": "x.png"}, headers=headers).status_code == 400
    assert client.post("/api/upload", json={"filename": "x.png"}, headers=headers).status_code == 400

    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 16)
    image = base64.b64encode(PNG_BYTES).decode()
    response = client.post("/api/upload", json={"image": image, "filename": "x.png"}, headers=headers)
    assert response.status_code == 413

    assert client.post("/api/upload", json={"image": image, "filename": "x.png"}).status_code == 401


def test_download_unknown_or_unsafe_name(client, register):
    _, headers = register("uploader")
    assert client.get("/api/files/missing.png", headers=headers).status_code == 404
    assert client.get("/api/files/..%2Fconfig.py", headers=headers).status_code == 404
