"""
Docker System API - disk usage accounting
"""

import logging
from typing import Any, Dict, List

from .containers import format_name
from .exceptions import DecodeError
from .images import first_image_name, from_unix_timestamp, split_image_name
from .models import (
    NONE_SENTINEL,
    BuildCacheEntry,
    DiskUsageContainer,
    DiskUsageImage,
    DiskUsageSnapshot,
    DiskUsageVolume,
    UsageSummary,
)

logger = logging.getLogger(__name__)


def _size(value: Any) -> int:
    # The engine reports -1 when a size was not computed
    size = int(value or 0)
    return size if size > 0 else 0


def df_image_from_attrs(attrs: Dict[str, Any]) -> DiskUsageImage:
    name = first_image_name(attrs)
    repository, tag = split_image_name(name) if name else (NONE_SENTINEL, NONE_SENTINEL)
    return DiskUsageImage(
        id=attrs['Id'],
        repository=repository,
        tag=tag,
        created_at=from_unix_timestamp(attrs['Created']),
        size_bytes=_size(attrs.get('Size')),
        shared_size_bytes=_size(attrs.get('SharedSize')),
        containers=max(int(attrs.get('Containers') or 0), 0),
    )


def df_container_from_attrs(attrs: Dict[str, Any]) -> DiskUsageContainer:
    return DiskUsageContainer(
        id=attrs['Id'],
        name=format_name(attrs.get('Names') or []),
        image=attrs.get('Image') or '',
        state=attrs.get('State') or '',
        status=attrs.get('Status') or '',
        size_rw_bytes=_size(attrs.get('SizeRw')),
        size_root_fs_bytes=_size(attrs.get('SizeRootFs')),
    )


def df_volume_from_attrs(attrs: Dict[str, Any]) -> DiskUsageVolume:
    usage = attrs.get('UsageData') or {}
    return DiskUsageVolume(
        name=attrs['Name'],
        driver=attrs.get('Driver') or '',
        mountpoint=attrs.get('Mountpoint') or '',
        size_bytes=_size(usage.get('Size')),
        ref_count=max(int(usage.get('RefCount') or 0), 0),
    )


def build_cache_from_attrs(attrs: Dict[str, Any]) -> BuildCacheEntry:
    return BuildCacheEntry(
        id=attrs['ID'],
        type=attrs.get('Type') or '',
        description=attrs.get('Description') or '',
        in_use=bool(attrs.get('InUse', False)),
        shared=bool(attrs.get('Shared', False)),
        size_bytes=_size(attrs.get('Size')),
        usage_count=int(attrs.get('UsageCount') or 0),
        created_raw=attrs.get('CreatedAt') or '',
        last_used_raw=attrs.get('LastUsedAt') or '',
    )


def summarize_images(images: List[DiskUsageImage], layers_size: int) -> UsageSummary:
    active = [image for image in images if image.containers > 0]
    total = layers_size or sum(image.effective_size_bytes for image in images)
    used = sum(image.effective_size_bytes for image in active)
    return UsageSummary(
        total_size_bytes=total,
        total_count=len(images),
        active_count=len(active),
        reclaimable_bytes=max(total - used, 0),
    )


def summarize_containers(containers: List[DiskUsageContainer]) -> UsageSummary:
    return UsageSummary(
        total_size_bytes=sum(c.size_rw_bytes for c in containers),
        total_count=len(containers),
        active_count=sum(1 for c in containers if c.state == 'running'),
        reclaimable_bytes=sum(c.size_rw_bytes for c in containers if c.state != 'running'),
    )


def summarize_volumes(volumes: List[DiskUsageVolume]) -> UsageSummary:
    return UsageSummary(
        total_size_bytes=sum(v.size_bytes for v in volumes),
        total_count=len(volumes),
        active_count=sum(1 for v in volumes if v.ref_count > 0),
        reclaimable_bytes=sum(v.size_bytes for v in volumes if v.ref_count == 0),
    )


def summarize_build_cache(entries: List[BuildCacheEntry]) -> UsageSummary:
    return UsageSummary(
        total_size_bytes=sum(e.size_bytes for e in entries),
        total_count=len(entries),
        active_count=sum(1 for e in entries if e.in_use),
        reclaimable_bytes=sum(e.size_bytes for e in entries if not e.in_use and not e.shared),
    )


def parse_disk_usage(data: Any) -> DiskUsageSnapshot:
    """Map a /system/df payload to a snapshot with derived summaries"""
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a disk usage object, got {type(data).__name__}")
    try:
        layers_size = _size(data.get('LayersSize'))
        images = [df_image_from_attrs(a) for a in data.get('Images') or []]
        containers = [df_container_from_attrs(a) for a in data.get('Containers') or []]
        volumes = [df_volume_from_attrs(a) for a in data.get('Volumes') or []]
        build_cache = [build_cache_from_attrs(a) for a in data.get('BuildCache') or []]
    except (AttributeError, KeyError, OverflowError, OSError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected disk usage entry: {e!r}") from e

    return DiskUsageSnapshot(
        layers_size=layers_size,
        images=images,
        containers=containers,
        volumes=volumes,
        build_cache=build_cache,
        image_summary=summarize_images(images, layers_size),
        container_summary=summarize_containers(containers),
        volume_summary=summarize_volumes(volumes),
        build_cache_summary=summarize_build_cache(build_cache),
    )


class SystemCollection:
    """Docker system-wide endpoints"""

    def __init__(self, client):
        self.client = client

    async def disk_usage(self) -> DiskUsageSnapshot:
        """Fetch /system/df"""
        data = await self.client.http.get_json('/system/df')
        return parse_disk_usage(data)
