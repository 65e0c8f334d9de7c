"""
Docker Containers API
"""

import logging
from typing import Any, Dict, List

from .exceptions import DecodeError
from .images import from_unix_timestamp, quote_id
from .models import ContainerRecord

logger = logging.getLogger(__name__)


def format_ports(ports: List[Dict[str, Any]]) -> str:
    """
    Render port mappings the way `docker ps` does

    ``0.0.0.0:8080->80/tcp`` for published ports, ``80/tcp`` otherwise.
    """
    if not ports:
        return "-"
    parts = []
    for port in ports:
        private_port = port['PrivatePort']
        port_type = port['Type']
        public_port = port.get('PublicPort')
        if public_port is not None:
            ip = port.get('IP') or '0.0.0.0'
            parts.append(f"{ip}:{public_port}->{private_port}/{port_type}")
        else:
            parts.append(f"{private_port}/{port_type}")
    return ", ".join(parts)


def format_name(names: List[str]) -> str:
    """First engine name without its leading slash"""
    if not names:
        return "-"
    first = names[0]
    return first[1:] if first.startswith('/') else first


def container_from_attrs(attrs: Dict[str, Any]) -> ContainerRecord:
    return ContainerRecord(
        id=attrs['Id'],
        image=attrs['Image'],
        command=attrs['Command'],
        created_at=from_unix_timestamp(attrs['Created']),
        status=attrs['Status'],
        state=attrs['State'],
        ports=format_ports(attrs['Ports']),
        name=format_name(attrs['Names']),
    )


def parse_container_list(data: Any) -> List[ContainerRecord]:
    """Map a /containers/json payload to records"""
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of containers, got {type(data).__name__}")
    try:
        return [container_from_attrs(attrs) for attrs in data]
    except (AttributeError, KeyError, OverflowError, OSError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected container entry: {e!r}") from e


class ContainerCollection:
    """Docker Containers collection"""

    def __init__(self, client):
        self.client = client

    async def list(self) -> List[ContainerRecord]:
        """List all containers, including stopped ones"""
        data = await self.client.http.get_json('/containers/json?all=1')
        return parse_container_list(data)

    async def remove(self, container_id: str):
        """Force-remove a container"""
        await self.client.http.delete(f'/containers/{quote_id(container_id)}?force=1')
        logger.info(f"Container removed: {container_id}")

    async def start(self, container_id: str):
        """Start a container"""
        await self.client.http.post(f'/containers/{quote_id(container_id)}/start')
        logger.info(f"Container started: {container_id}")

    async def stop(self, container_id: str):
        """Stop a container"""
        await self.client.http.post(f'/containers/{quote_id(container_id)}/stop')
        logger.info(f"Container stopped: {container_id}")
