from datetime import datetime, timedelta, timezone

import pytest

from tidydock.docker_api.exceptions import DecodeError
from tidydock.docker_api.networks import network_from_attrs, parse_engine_timestamp, parse_network_list


def test_timestamp_with_nanoseconds():
    parsed = parse_engine_timestamp('2024-01-02T03:04:05.123456789Z')
    assert parsed == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)


def test_timestamp_with_short_fraction_and_offset():
    parsed = parse_engine_timestamp('2024-01-02T03:04:05.5+02:00')
    assert parsed == datetime(2024, 1, 2, 3, 4, 5, 500000, tzinfo=timezone(timedelta(hours=2)))
    assert parsed == datetime(2024, 1, 2, 1, 4, 5, 500000, tzinfo=timezone.utc)


def test_timestamp_without_fraction():
    assert parse_engine_timestamp('2023-12-30T10:00:00Z') == datetime(2023, 12, 30, 10, tzinfo=timezone.utc)
    assert parse_engine_timestamp('2023-12-30T10:00:00-05:30') == datetime(
        2023, 12, 30, 15, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize('raw', ['not-a-date', '', '2024-01-02', '2024-13-45T03:04:05Z', '2024-01-02 03:04:05Z'])
def test_unparsable_timestamps(raw):
    assert parse_engine_timestamp(raw) is None


def test_bridge_network(load_fixture):
    bridge = parse_network_list(load_fixture('networks.json'))[0]

    assert bridge.id.startswith('f2de39df4171')
    assert bridge.name == 'bridge'
    assert bridge.created_at == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)
    assert bridge.created_raw == '2024-01-02T03:04:05.123456789Z'
    assert bridge.scope == 'local'
    assert bridge.driver == 'bridge'
    assert bridge.enable_ipv4 is True
    assert bridge.enable_ipv6 is False
    assert bridge.internal is False
    assert bridge.config_from.network == ''
    assert bridge.options == {'com.docker.network.bridge.default_bridge': 'true'}
    assert bridge.labels == {}


def test_ipam_config_is_indexed_by_position(load_fixture):
    ipam = parse_network_list(load_fixture('networks.json'))[0].ipam

    assert ipam.driver == 'default'
    assert ipam.options == {}
    assert [c.id for c in ipam.config] == ['0', '1']
    assert (ipam.config[0].subnet, ipam.config[0].gateway, ipam.config[0].ip_range) == (
        '172.17.0.0/16', '172.17.0.1', None)
    assert ipam.config[1].ip_range == 'fd00::/80'
    assert ipam.config[1].aux_addresses == {'router': 'fd00::2'}


def test_attached_containers_sorted_by_name(load_fixture):
    containers = parse_network_list(load_fixture('networks.json'))[0].containers

    assert [(c.id, c.name) for c in containers] == [('39b69226f9d7', 'api'), ('8dfafdbc3a40', 'web-nginx')]
    assert containers[0].endpoint_id == 'd4e5f6'
    assert containers[0].mac_address == '02:42:ac:11:00:02'
    assert containers[0].ipv4_address == '172.17.0.2/16'
    assert containers[0].ipv6_address == ''


def test_null_collections_become_empty(load_fixture):
    host, legacy = parse_network_list(load_fixture('networks.json'))[1:]

    assert host.enable_ipv4 is None
    assert host.enable_ipv6 is None
    assert host.ipam.config == []
    assert host.options == {}
    assert host.labels == {}
    assert legacy.ipam.driver == ''
    assert legacy.containers == []


def test_unparsable_created_keeps_raw_string(load_fixture):
    legacy = parse_network_list(load_fixture('networks.json'))[2]

    assert legacy.created_at is None
    assert legacy.created_raw == 'not-a-date'
    assert legacy.internal is True
    assert legacy.attachable is True
    assert legacy.config_from.network == 'legacy-config'
    assert legacy.labels == {'team': 'infra'}


def test_minimal_network_entry():
    network = network_from_attrs({'Id': 'abc', 'Name': 'none'})
    assert network.created_raw == ''
    assert network.created_at is None
    assert network.scope == ''
    assert network.config_only is False


def test_missing_name_is_decode_error():
    with pytest.raises(DecodeError, match='Name'):
        parse_network_list([{'Id': 'abc'}])


def test_malformed_ipam_is_decode_error():
    with pytest.raises(DecodeError):
        parse_network_list([{'Id': 'abc', 'Name': 'n', 'IPAM': {'Config': ['172.17.0.0/16']}}])
