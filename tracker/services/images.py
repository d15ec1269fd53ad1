"""Project image storage on local disk, served under /uploads."""

import logging
import secrets
import time
from pathlib import Path

from tracker.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})
PROJECT_IMAGE_SUBDIR = "projects"
PUBLIC_PREFIX = "/uploads"


def save_project_image(
    upload_dir: str,
    filename: str | None,
    content: bytes,
    max_bytes: int,
) -> str:
    """
    Store an uploaded project image under a unique name and return its public URL
    (/uploads/projects/<name>). Raises ValidationError for bad type or size.
    """
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError(
            "Image must be one of: " + ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
        )
    if not content:
        raise ValidationError("Image file is empty.")
    if len(content) > max_bytes:
        raise ValidationError(
            f"Image size must not exceed {max_bytes // (1024 * 1024)} MB."
        )
    target_dir = Path(upload_dir) / PROJECT_IMAGE_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{ext}"
    (target_dir / stored_name).write_bytes(content)
    logger.info("Stored project image %s (%s bytes)", stored_name, len(content))
    return f"{PUBLIC_PREFIX}/{PROJECT_IMAGE_SUBDIR}/{stored_name}"


def discard_project_image(upload_dir: str, image_url: str | None) -> None:
    """Remove a stored image by its public URL (used when the project write fails)."""
    if not image_url:
        return
    path = Path(upload_dir) / PROJECT_IMAGE_SUBDIR / Path(image_url).name
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove orphaned project image %s", path, exc_info=True)
        return
    logger.info("Removed orphaned project image %s", path.name)
