import json

import pytest

from tidydock.settings_manager import SettingsManager


@pytest.fixture
def settings_file(tmp_path):
    return tmp_path / 'tidydock' / 'settings.json'


def test_defaults_without_file(settings_file, monkeypatch):
    monkeypatch.setenv('TIDYDOCK_SOCKET', '/tmp/engine.sock')
    settings = SettingsManager(str(settings_file))

    assert settings.get_all() == SettingsManager.DEFAULTS
    assert settings.socket_path() == '/tmp/engine.sock'
    assert settings.request_timeout() == 3.0
    assert not settings_file.exists()


def test_user_file_overrides_defaults(settings_file):
    settings_file.parent.mkdir()
    settings_file.write_text(json.dumps({'docker_socket_path': '/run/user/1000/docker.sock', 'request_timeout': 10}))

    settings = SettingsManager(str(settings_file))

    assert settings.socket_path() == '/run/user/1000/docker.sock'
    assert settings.request_timeout() == 10.0
    assert settings.get('log_level') == 'INFO'


@pytest.mark.parametrize('content', ['{not json', '["a", "list"]'])
def test_unreadable_file_keeps_defaults(settings_file, content):
    settings_file.parent.mkdir()
    settings_file.write_text(content)

    assert SettingsManager(str(settings_file)).get_all() == SettingsManager.DEFAULTS


@pytest.mark.parametrize('value', [0, -2, 'soon', None])
def test_invalid_timeout_falls_back(settings_file, value):
    settings = SettingsManager(str(settings_file))
    settings.set('request_timeout', value, save=False)
    assert settings.request_timeout() == 3.0


def test_set_saves_and_reloads(settings_file):
    settings = SettingsManager(str(settings_file))
    settings.set('log_level', 'DEBUG')

    assert json.loads(settings_file.read_text())['log_level'] == 'DEBUG'
    assert SettingsManager(str(settings_file)).get('log_level') == 'DEBUG'


def test_default_location_follows_xdg(tmp_path, monkeypatch):
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    if SettingsManager.get_user_settings_path().startswith(str(tmp_path)):
        assert SettingsManager.get_user_settings_path() == str(tmp_path / 'tidydock' / 'settings.json')
    else:
        pytest.skip('XDG_CONFIG_HOME is not used on this platform')
