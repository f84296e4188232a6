"""
Tests for configuration management system.
"""

import pytest

from hshmm.config import (
    ConfigManager, get_config, set_config, update_config,
    load_config_file, save_config_file,
    get_all_config, reset_config
)


def test_default_config():
    """Test that default configuration is loaded correctly."""
    assert get_config('hmm', 'n_states') == 3
    assert get_config('hmm', 'horizon') == 10
    assert get_config('hmm', 'init_policy') == 'biased'
    assert get_config('hmm', 'auto_finalize') is False
    assert get_config('emission', 'family') == 'gaussian'
    assert get_config('sampling', 'random_seed') == 42


def test_get_config_section():
    """Test getting entire configuration sections."""
    hmm_config = get_config('hmm')
    assert isinstance(hmm_config, dict)
    assert 'n_states' in hmm_config
    assert 'tolerance' in hmm_config


def test_set_config():
    """Test setting individual configuration values."""
    set_config('hmm', 'horizon', 25)
    assert get_config('hmm', 'horizon') == 25

    set_config('test_section', 'test_key', 'test_value')
    assert get_config('test_section', 'test_key') == 'test_value'


def test_update_config():
    """Test updating configuration with dictionary."""
    update_config({
        'hmm': {'n_states': 8, 'new_setting': True},
        'new_section': {'key1': 'value1'}
    })

    assert get_config('hmm', 'n_states') == 8
    assert get_config('hmm', 'new_setting') is True
    assert get_config('new_section', 'key1') == 'value1'
    assert get_config('hmm', 'horizon') == 10


def test_config_file_operations(temp_dir):
    """Test saving and loading configuration files."""
    config_file = temp_dir / "nested" / "config.json"

    set_config('hmm', 'horizon', 30)
    set_config('test', 'value', 123)
    save_config_file(str(config_file))
    assert config_file.exists()

    reset_config()
    assert get_config('hmm', 'horizon') == 10
    assert get_config('test', 'value') is None

    load_config_file(str(config_file))
    assert get_config('hmm', 'horizon') == 30
    assert get_config('test', 'value') == 123


def test_get_all_config_is_copy():
    """Modifying the returned dictionary leaves the configuration untouched."""
    all_config = get_all_config()
    assert {'hmm', 'emission', 'sampling', 'logging'} <= set(all_config)

    all_config['hmm']['n_states'] = 999
    assert get_config('hmm', 'n_states') == 3


def test_reset_restores_nested_defaults():
    """Nested values changed in place are restored by reset."""
    set_config('hmm', 'n_states', 12)
    reset_config()

    assert get_config('hmm', 'n_states') == 3


def test_invalid_config_file(temp_dir):
    """Test handling of invalid configuration files."""
    with pytest.raises(ValueError):
        load_config_file(str(temp_dir / "nonexistent.json"))

    invalid_file = temp_dir / "invalid.json"
    invalid_file.write_text("{ invalid json }")

    with pytest.raises(ValueError):
        load_config_file(str(invalid_file))


def test_environment_overrides(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv('HSHMM_N_STATES', '7')
    monkeypatch.setenv('HSHMM_RANDOM_SEED', '123')

    manager = ConfigManager()

    assert manager.get('hmm', 'n_states') == 7
    assert manager.get('sampling', 'random_seed') == 123


def test_invalid_environment_value_warns(monkeypatch):
    """Unparseable environment values are ignored with a warning."""
    monkeypatch.setenv('HSHMM_HORIZON', 'ten')

    with pytest.warns(UserWarning, match="HSHMM_HORIZON"):
        manager = ConfigManager()

    assert manager.get('hmm', 'horizon') == 10


def test_environment_config_file(monkeypatch, temp_dir):
    """HSHMM_CONFIG points at a JSON file loaded on startup."""
    config_file = temp_dir / "env.json"
    config_file.write_text('{"hmm": {"n_dims": 4}}')
    monkeypatch.setenv('HSHMM_CONFIG', str(config_file))

    assert ConfigManager().get('hmm', 'n_dims') == 4
