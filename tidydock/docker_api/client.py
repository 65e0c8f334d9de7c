"""
Docker Client - Main API entry point
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .containers import ContainerCollection
from .http_client import DockerHTTPClient
from .images import ImageCollection
from .models import ContainerRecord, DiskUsageSnapshot, ImageRecord, NetworkRecord
from .networks import NetworkCollection
from .system import SystemCollection
from .transport import DEFAULT_TIMEOUT, OpenConnection


class DockerService(ABC):
    """
    Operations the presentation layer consumes

    Every method is a coroutine and independent of the others; callers
    that need a refresh after a mutation await the mutation first.
    """

    @abstractmethod
    async def fetch_images(self) -> List[ImageRecord]:
        pass

    @abstractmethod
    async def fetch_containers(self) -> List[ContainerRecord]:
        pass

    @abstractmethod
    async def fetch_networks(self) -> List[NetworkRecord]:
        pass

    @abstractmethod
    async def fetch_disk_usage(self) -> DiskUsageSnapshot:
        pass

    @abstractmethod
    async def delete_image(self, image_id: str):
        pass

    @abstractmethod
    async def delete_container(self, container_id: str):
        pass

    @abstractmethod
    async def start_container(self, container_id: str):
        pass

    @abstractmethod
    async def stop_container(self, container_id: str):
        pass


class DockerClient(DockerService):
    """Docker engine client over the control socket"""

    def __init__(self, socket_path: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 open_connection: Optional[OpenConnection] = None):
        """
        Initialize Docker client

        Args:
            socket_path: Docker socket path (default: auto-detect)
            timeout: Per-request deadline in seconds
            open_connection: Connection factory override, used by tests
        """
        self.http = DockerHTTPClient(socket_path=socket_path, timeout=timeout,
                                     open_connection=open_connection)
        self.images = ImageCollection(self)
        self.containers = ContainerCollection(self)
        self.networks = NetworkCollection(self)
        self.system = SystemCollection(self)

    @property
    def socket_path(self) -> str:
        return self.http.socket_path

    async def fetch_images(self) -> List[ImageRecord]:
        return await self.images.list()

    async def fetch_containers(self) -> List[ContainerRecord]:
        return await self.containers.list()

    async def fetch_networks(self) -> List[NetworkRecord]:
        return await self.networks.list()

    async def fetch_disk_usage(self) -> DiskUsageSnapshot:
        return await self.system.disk_usage()

    async def delete_image(self, image_id: str):
        await self.images.remove(image_id)

    async def delete_container(self, container_id: str):
        await self.containers.remove(container_id)

    async def start_container(self, container_id: str):
        await self.containers.start(container_id)

    async def stop_container(self, container_id: str):
        await self.containers.stop(container_id)
