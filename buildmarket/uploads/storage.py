import base64
import binascii
import logging
import os
import re
import secrets
import time

from buildmarket import config

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,")
SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


class UploadError(ValueError):
    pass


class UploadTooLarge(UploadError):
    pass


def upload_dir() -> str:
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    return config.UPLOAD_DIR


def decode_image(image: str) -> bytes:
    """Decode raw base64 or a ``data:<mime>;base64,`` URL."""
    payload = DATA_URL_PREFIX.sub("", image.strip(), count=1)
    # Reject oversized payloads before decoding them
    if len(payload) * 3 // 4 > config.MAX_UPLOAD_BYTES + 3:
        raise UploadTooLarge("File is too large")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise UploadError("Invalid base64 image data")
    if not data:
        raise UploadError("Empty file")
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise UploadTooLarge("File is too large")
    return data


def make_stored_name(filename: str) -> str:
    ext = os.path.splitext(os.path.basename(filename or ""))[1].lower()
    if not SAFE_NAME.match(ext or "."):
        ext = ""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


def save_upload(image: str, filename: str) -> str:
    data = decode_image(image)
    name = make_stored_name(filename)
    path = os.path.join(upload_dir(), name)
    with open(path, "wb") as fh:
        fh.write(data)
    logger.info("Stored upload %s (%d bytes)", name, len(data))
    return name


def resolve_upload(filename: str):
    """Absolute path of a stored upload, or None for unknown or unsafe names."""
    if not filename or not SAFE_NAME.match(filename) or filename.startswith("."):
        return None
    root = os.path.realpath(config.UPLOAD_DIR)
    path = os.path.realpath(os.path.join(root, filename))
    if os.path.dirname(path) != root or not os.path.isfile(path):
        return None
    return path
