"""
In-memory Docker service with canned data, for previews and tests
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .client import DockerService
from .models import (
    ContainerRecord,
    DiskUsageSnapshot,
    ImageRecord,
    NetworkConfigFrom,
    NetworkContainer,
    NetworkIPAM,
    NetworkIPAMConfig,
    NetworkRecord,
)
from .system import parse_disk_usage

logger = logging.getLogger(__name__)

DISK_USAGE_PAYLOAD = {
    'LayersSize': 203_423_744,
    'Images': [
        {'Id': 'sha256:1a2b3c4d5e', 'RepoTags': ['nginx:latest'], 'Created': 1_700_000_000,
         'Size': 134_217_728, 'SharedSize': 0, 'Containers': 1},
        {'Id': 'sha256:9f8e7d6c5b', 'RepoTags': ['redis:7.2'], 'Created': 1_690_000_000,
         'Size': 69_206_016, 'SharedSize': 0, 'Containers': 0},
    ],
    'Containers': [
        {'Id': 'f1e2d3c4b5', 'Names': ['/web-nginx'], 'Image': 'nginx:latest', 'State': 'running',
         'Status': 'Up 12 hours', 'SizeRw': 2_048, 'SizeRootFs': 134_219_776},
        {'Id': 'a1b2c3d4e5', 'Names': ['/cache-redis'], 'Image': 'redis:7.2', 'State': 'exited',
         'Status': 'Exited (0) 2 days ago', 'SizeRw': 8_192, 'SizeRootFs': 69_214_208},
    ],
    'Volumes': [
        {'Name': 'redis-data', 'Driver': 'local', 'Mountpoint': '/var/lib/docker/volumes/redis-data/_data',
         'UsageData': {'Size': 5_242_880, 'RefCount': 0}},
    ],
    'BuildCache': [
        {'ID': 'k2v9x8w7', 'Type': 'regular', 'Description': 'mount / from exec /bin/sh -c apt-get update',
         'InUse': False, 'Shared': False, 'Size': 31_457_280, 'UsageCount': 3},
    ],
}


class FixtureDockerService(DockerService):
    """Docker service backed by canned data; mutations are accepted and ignored"""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime.now(timezone.utc)

    async def fetch_images(self) -> List[ImageRecord]:
        return [
            ImageRecord(
                id='sha256:1a2b3c4d5e',
                repository='nginx',
                tag='latest',
                created_at=self.now - timedelta(days=3),
                size_bytes=134_217_728,
                in_use=True,
            ),
            ImageRecord(
                id='sha256:9f8e7d6c5b',
                repository='redis',
                tag='7.2',
                created_at=self.now - timedelta(days=30),
                size_bytes=69_206_016,
                in_use=False,
            ),
        ]

    async def fetch_containers(self) -> List[ContainerRecord]:
        return [
            ContainerRecord(
                id='f1e2d3c4b5',
                image='nginx:latest',
                command="nginx -g 'daemon off;'",
                created_at=self.now - timedelta(hours=12),
                status='Up 12 hours',
                state='running',
                ports='0.0.0.0:8080->80/tcp',
                name='web-nginx',
            ),
            ContainerRecord(
                id='a1b2c3d4e5',
                image='redis:7.2',
                command='redis-server',
                created_at=self.now - timedelta(days=2),
                status='Exited (0) 2 days ago',
                state='exited',
                ports='-',
                name='cache-redis',
            ),
        ]

    async def fetch_networks(self) -> List[NetworkRecord]:
        created_at = self.now - timedelta(days=10)
        return [
            NetworkRecord(
                id='3c4d5e6f7a8b',
                name='bridge',
                created_at=created_at,
                created_raw=created_at.isoformat(),
                scope='local',
                driver='bridge',
                enable_ipv4=True,
                enable_ipv6=False,
                ipam=NetworkIPAM(
                    driver='default',
                    config=[NetworkIPAMConfig(id='0', subnet='172.17.0.0/16', gateway='172.17.0.1')],
                ),
                internal=False,
                attachable=False,
                ingress=False,
                config_from=NetworkConfigFrom(),
                config_only=False,
                containers=[
                    NetworkContainer(
                        id='f1e2d3c4b5',
                        name='web-nginx',
                        endpoint_id='e1d2c3b4a5',
                        mac_address='02:42:ac:11:00:02',
                        ipv4_address='172.17.0.2/16',
                        ipv6_address='',
                    ),
                ],
                options={'com.docker.network.bridge.default_bridge': 'true'},
            ),
        ]

    async def fetch_disk_usage(self) -> DiskUsageSnapshot:
        return parse_disk_usage(DISK_USAGE_PAYLOAD)

    async def delete_image(self, image_id: str):
        logger.info(f"Fixture service: ignoring delete of image {image_id}")

    async def delete_container(self, container_id: str):
        logger.info(f"Fixture service: ignoring delete of container {container_id}")

    async def start_container(self, container_id: str):
        logger.info(f"Fixture service: ignoring start of container {container_id}")

    async def stop_container(self, container_id: str):
        logger.info(f"Fixture service: ignoring stop of container {container_id}")
