"""
Domain records returned by the engine client.

All records are frozen dataclasses built by a single decode pass per
request. They hold no reference to the client that produced them; every
refresh yields wholly new collections.

Records:
  - ImageRecord, ContainerRecord: list views of images and containers
  - NetworkRecord (+ NetworkIPAM, NetworkIPAMConfig, NetworkConfigFrom,
    NetworkContainer): full network description
  - DiskUsageSnapshot (+ DiskUsageImage, DiskUsageContainer, DiskUsageVolume,
    BuildCacheEntry, UsageSummary): /system/df accounting
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

NONE_SENTINEL = "<none>"


@dataclass(frozen=True)
class ImageRecord:
    id: str
    repository: str
    tag: str
    created_at: datetime
    size_bytes: int
    in_use: bool

    @property
    def name_with_tag(self) -> str:
        return f"{self.repository}:{self.tag}"

    @property
    def short_id(self) -> str:
        return truncated_id(self.id)


@dataclass(frozen=True)
class ContainerRecord:
    id: str
    image: str
    command: str
    created_at: datetime
    status: str  # "Up 2 minutes"
    state: str   # "running", "exited", ...
    ports: str
    name: str

    @property
    def is_running(self) -> bool:
        return self.state == "running"

    @property
    def short_id(self) -> str:
        return truncated_id(self.id)


@dataclass(frozen=True)
class NetworkIPAMConfig:
    id: str  # position in the engine's Config list
    subnet: Optional[str] = None
    gateway: Optional[str] = None
    ip_range: Optional[str] = None
    aux_addresses: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NetworkIPAM:
    driver: str = ""
    options: Dict[str, str] = field(default_factory=dict)
    config: List[NetworkIPAMConfig] = field(default_factory=list)


@dataclass(frozen=True)
class NetworkConfigFrom:
    network: str = ""


@dataclass(frozen=True)
class NetworkContainer:
    id: str
    name: str
    endpoint_id: str
    mac_address: str
    ipv4_address: str
    ipv6_address: str


@dataclass(frozen=True)
class NetworkRecord:
    id: str
    name: str
    created_at: Optional[datetime]
    created_raw: str
    scope: str
    driver: str
    enable_ipv4: Optional[bool]
    enable_ipv6: Optional[bool]
    ipam: NetworkIPAM
    internal: bool
    attachable: bool
    ingress: bool
    config_from: NetworkConfigFrom
    config_only: bool
    containers: List[NetworkContainer] = field(default_factory=list)
    options: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DiskUsageImage:
    id: str
    repository: str
    tag: str
    created_at: datetime
    size_bytes: int
    shared_size_bytes: int
    containers: int

    @property
    def effective_size_bytes(self) -> int:
        """Size not shared with other images"""
        if self.shared_size_bytes > 0:
            return max(self.size_bytes - self.shared_size_bytes, 0)
        return self.size_bytes

    @property
    def display_name(self) -> str:
        if self.repository == NONE_SENTINEL:
            return truncated_id(self.id)
        return f"{self.repository}:{self.tag}"


@dataclass(frozen=True)
class DiskUsageContainer:
    id: str
    name: str
    image: str
    state: str
    status: str
    size_rw_bytes: int
    size_root_fs_bytes: int


@dataclass(frozen=True)
class DiskUsageVolume:
    name: str
    driver: str
    mountpoint: str
    size_bytes: int
    ref_count: int


@dataclass(frozen=True)
class BuildCacheEntry:
    id: str
    type: str
    description: str
    in_use: bool
    shared: bool
    size_bytes: int
    usage_count: int
    created_raw: str = ""
    last_used_raw: str = ""


@dataclass(frozen=True)
class UsageSummary:
    total_size_bytes: int
    total_count: int
    active_count: int
    reclaimable_bytes: int


@dataclass(frozen=True)
class DiskUsageSnapshot:
    layers_size: int
    images: List[DiskUsageImage]
    containers: List[DiskUsageContainer]
    volumes: List[DiskUsageVolume]
    build_cache: List[BuildCacheEntry]
    image_summary: UsageSummary
    container_summary: UsageSummary
    volume_summary: UsageSummary
    build_cache_summary: UsageSummary


def truncated_id(value: str) -> str:
    """First 12 characters of an id, without the sha256: prefix"""
    if value.startswith("sha256:"):
        value = value[len("sha256:"):]
    return value[:12]


def format_bytes(value: int) -> str:
    """Human readable size using decimal units (1 kB = 1000 bytes)"""
    if value < 1000:
        return f"{value} bytes"
    size = float(value)
    for unit in ("kB", "MB", "GB", "TB"):
        size /= 1000
        if size < 1000:
            return f"{size:.1f} {unit}"
    return f"{size:.1f} PB"


def sort_networks(networks: Iterable[NetworkRecord]) -> List[NetworkRecord]:
    """
    Newest first. Networks with a parsed timestamp come before those
    without; ties fall back to a case-insensitive name order.
    """
    networks = list(networks)
    dated = [n for n in networks if n.created_at is not None]
    undated = [n for n in networks if n.created_at is None]
    dated.sort(key=lambda n: n.name.lower())
    dated.sort(key=lambda n: n.created_at, reverse=True)
    undated.sort(key=lambda n: n.name.lower())
    undated.sort(key=lambda n: n.created_raw, reverse=True)
    return dated + undated
