from pathlib import Path
from typing import BinaryIO

from devcamper.config import settings
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)


def read_upload(stream: BinaryIO, max_bytes: int) -> bytes:
    """Read at most one byte past ``max_bytes`` so oversized uploads are detected without buffering them."""
    return stream.read(max_bytes + 1)


def save_upload(file_name: str, content: bytes) -> Path:
    upload_dir = Path(settings.file_upload_path)
    upload_dir.mkdir(parents=True, exist_ok=True)
    destination = upload_dir / file_name
    destination.write_bytes(content)
    logger.info("file_saved", path=str(destination), size=len(content))
    return destination
