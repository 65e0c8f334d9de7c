"""
Docker Networks API
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .exceptions import DecodeError
from .models import NetworkConfigFrom, NetworkContainer, NetworkIPAM, NetworkIPAMConfig, NetworkRecord

logger = logging.getLogger(__name__)

# 2024-01-02T03:04:05.123456789Z / 2024-01-02T03:04:05+01:00
FRACTIONAL_TIMESTAMP = re.compile(
    r'^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.(\d+)(Z|[+-]\d{2}:\d{2})$'
)
PLAIN_TIMESTAMP = re.compile(
    r'^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(Z|[+-]\d{2}:\d{2})$'
)


def _parse_zone(zone: str) -> timezone:
    if zone == 'Z':
        return timezone.utc
    sign = -1 if zone[0] == '-' else 1
    hours, minutes = zone[1:].split(':')
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))


def _build_timestamp(base: str, zone: str, fraction: str = '') -> datetime:
    # datetime only keeps microseconds; the engine sends nanoseconds
    microseconds = int(fraction[:6].ljust(6, '0')) if fraction else 0
    parsed = datetime.strptime(base, '%Y-%m-%dT%H:%M:%S')
    return parsed.replace(microsecond=microseconds, tzinfo=_parse_zone(zone))


def parse_engine_timestamp(raw: str) -> Optional[datetime]:
    """
    Parse an engine RFC 3339 timestamp

    Tries the fractional-seconds form first, then the plain form.
    Returns None when neither matches.
    """
    try:
        match = FRACTIONAL_TIMESTAMP.match(raw)
        if match:
            base, fraction, zone = match.groups()
            return _build_timestamp(base, zone, fraction)
        match = PLAIN_TIMESTAMP.match(raw)
        if match:
            base, zone = match.groups()
            return _build_timestamp(base, zone)
    except ValueError:
        logger.debug(f"Unparsable timestamp: {raw!r}")
    return None


def _string_map(value: Any) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (value or {}).items()}


def ipam_from_attrs(attrs: Optional[Dict[str, Any]]) -> NetworkIPAM:
    attrs = attrs or {}
    config = [
        NetworkIPAMConfig(
            id=str(index),
            subnet=entry.get('Subnet'),
            gateway=entry.get('Gateway'),
            ip_range=entry.get('IPRange'),
            aux_addresses=_string_map(entry.get('AuxiliaryAddresses') or entry.get('AuxAddresses')),
        )
        for index, entry in enumerate(attrs.get('Config') or [])
    ]
    return NetworkIPAM(
        driver=attrs.get('Driver') or '',
        options=_string_map(attrs.get('Options')),
        config=config,
    )


def attached_containers(attrs: Optional[Dict[str, Any]]) -> List[NetworkContainer]:
    containers = [
        NetworkContainer(
            id=container_id,
            name=entry.get('Name') or '',
            endpoint_id=entry.get('EndpointID') or '',
            mac_address=entry.get('MacAddress') or '',
            ipv4_address=entry.get('IPv4Address') or '',
            ipv6_address=entry.get('IPv6Address') or '',
        )
        for container_id, entry in (attrs or {}).items()
    ]
    return sorted(containers, key=lambda c: c.name)


def network_from_attrs(attrs: Dict[str, Any]) -> NetworkRecord:
    created_raw = attrs.get('Created') or ''
    return NetworkRecord(
        id=attrs['Id'],
        name=attrs['Name'],
        created_at=parse_engine_timestamp(created_raw),
        created_raw=created_raw,
        scope=attrs.get('Scope') or '',
        driver=attrs.get('Driver') or '',
        enable_ipv4=attrs.get('EnableIPv4'),
        enable_ipv6=attrs.get('EnableIPv6'),
        ipam=ipam_from_attrs(attrs.get('IPAM')),
        internal=bool(attrs.get('Internal', False)),
        attachable=bool(attrs.get('Attachable', False)),
        ingress=bool(attrs.get('Ingress', False)),
        config_from=NetworkConfigFrom(network=(attrs.get('ConfigFrom') or {}).get('Network') or ''),
        config_only=bool(attrs.get('ConfigOnly', False)),
        containers=attached_containers(attrs.get('Containers')),
        options=_string_map(attrs.get('Options')),
        labels=_string_map(attrs.get('Labels')),
    )


def parse_network_list(data: Any) -> List[NetworkRecord]:
    """Map a /networks payload to records"""
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of networks, got {type(data).__name__}")
    try:
        return [network_from_attrs(attrs) for attrs in data]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected network entry: {e!r}") from e


class NetworkCollection:
    """Docker Networks Collection"""

    def __init__(self, client):
        self.client = client

    async def list(self) -> List[NetworkRecord]:
        """List networks"""
        data = await self.client.http.get_json('/networks')
        return parse_network_list(data)
