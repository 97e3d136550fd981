"""
Configuration Tests
"""

import pytest

from contract_engine.config import ConfigError, load_config

ENV_VARS = ['CONTRACT_STORAGE_DIR', 'BLUEPRINT_SNAPSHOT_NAME', 'CONTRACT_SNAPSHOT_NAME', 'LOG_LEVEL']


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # Empty .env so a developer's local file is not picked up
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return env_file


def test_defaults(clean_env):
    config = load_config(str(clean_env))
    assert config == {
        'storage_dir': './data',
        'blueprint_snapshot': 'blueprint-storage',
        'contract_snapshot': 'contract-storage',
        'log_level': 'INFO',
    }


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv('CONTRACT_STORAGE_DIR', '/var/lib/contracts')
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    config = load_config(str(clean_env))

    assert config['storage_dir'] == '/var/lib/contracts'
    assert config['log_level'] == 'DEBUG'


def test_env_file_values(clean_env):
    clean_env.write_text("CONTRACT_SNAPSHOT_NAME=contracts-v2\n")
    assert load_config(str(clean_env))['contract_snapshot'] == 'contracts-v2'


def test_invalid_log_level(clean_env, monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'LOUD')
    with pytest.raises(ConfigError):
        load_config(str(clean_env))


def test_empty_snapshot_name(clean_env, monkeypatch):
    monkeypatch.setenv('BLUEPRINT_SNAPSHOT_NAME', ' ')
    with pytest.raises(ConfigError):
        load_config(str(clean_env))
