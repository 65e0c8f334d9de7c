"""
Docker Images API
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from .exceptions import DecodeError
from .models import NONE_SENTINEL, ImageRecord

logger = logging.getLogger(__name__)

NONE_NAMES = ('<none>:<none>', '<none>@<none>', NONE_SENTINEL)


def quote_id(value: str) -> str:
    """Quote an id or reference for interpolation into an API path"""
    return quote(value, safe=':@/')


def from_unix_timestamp(value: Any) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def split_image_name(name: str) -> Tuple[str, str]:
    """
    Split ``repository:tag`` or ``repository@digest``

    A colon that belongs to a registry port (``host:5000/app``) is not a
    tag separator.
    """
    if '@' in name:
        repository, _, tag = name.partition('@')
    else:
        repository, separator, tag = name.rpartition(':')
        if not separator or '/' in tag:
            repository, tag = name, ''
    return repository or NONE_SENTINEL, tag or NONE_SENTINEL


def first_image_name(attrs: Dict[str, Any]) -> Optional[str]:
    """First RepoTags/RepoDigests entry that is not a <none> placeholder"""
    candidates = list(attrs.get('RepoTags') or []) + list(attrs.get('RepoDigests') or [])
    for name in candidates:
        if name and name not in NONE_NAMES:
            return name
    return None


def image_from_attrs(attrs: Dict[str, Any]) -> Optional[ImageRecord]:
    """Build an ImageRecord, or None for images with no usable name"""
    name = first_image_name(attrs)
    if name is None:
        return None
    repository, tag = split_image_name(name)
    return ImageRecord(
        id=attrs['Id'],
        repository=repository,
        tag=tag,
        created_at=from_unix_timestamp(attrs['Created']),
        size_bytes=int(attrs['Size']),
        in_use=(attrs.get('Containers') or 0) > 0,
    )


def parse_image_list(data: Any) -> List[ImageRecord]:
    """Map a /images/json payload to records, dropping unnamed images"""
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of images, got {type(data).__name__}")
    try:
        images = [image_from_attrs(attrs) for attrs in data]
    except (AttributeError, KeyError, OverflowError, OSError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected image entry: {e!r}") from e
    return [image for image in images if image is not None]


class ImageCollection:
    """Docker Images collection"""

    def __init__(self, client):
        self.client = client

    async def list(self) -> List[ImageRecord]:
        """
        List images

        Returns:
            ImageRecord per named image
        """
        data = await self.client.http.get_json('/images/json')
        images = parse_image_list(data)
        logger.debug(f"Listed {len(images)} images ({len(data) - len(images)} unnamed dropped)")
        return images

    async def remove(self, image_id: str):
        """Force-remove an image"""
        await self.client.http.delete(f'/images/{quote_id(image_id)}?force=1')
        logger.info(f"Image removed: {image_id}")
