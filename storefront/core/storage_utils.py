# storefront/core/storage_utils.py
import logging
import uuid

from storefront.core.config import get_settings
from storefront.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

settings = get_settings()


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it will be overwritten
    thanks to the 'upsert' option.

    Args:
        path: Full object path inside the bucket.
              Example: "products/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored alongside the object.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    bucket = supabase_admin().storage.from_(settings.STORAGE_BUCKET)
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/products/abc.png
        -> 'abc.png'
    """
    marker = f"/storage/v1/object/public/{settings.STORAGE_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    path = url[idx + len(marker) :]
    # get_public_url may append an empty query string
    return path.split("?", 1)[0] or None


def delete_public_url(url: str) -> None:
    """
    Best-effort delete of a hosted file by its public URL.

    No-op if the URL does not belong to this bucket; storage errors are
    logged, never raised, so a catalog delete cannot fail on cleanup.
    """
    path = extract_path_from_public_url(url)
    if not path:
        return
    try:
        supabase_admin().storage.from_(settings.STORAGE_BUCKET).remove([path])
    except Exception:
        logger.warning("Could not delete stored image %s", path, exc_info=True)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"
