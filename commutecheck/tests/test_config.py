"""Tests for configuration loading."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from commutecheck.config.loader import (
    load_config,
    DEFAULT_CONFIG,
    get_database_path,
)


class TestConfigLoading(unittest.TestCase):
    """Test configuration loading."""

    def setUp(self):
        # Keep the developer's real environment out of these tests
        self.env = mock.patch.dict(os.environ, {}, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()

    def test_default_config_structure(self):
        """Verify default config has required keys."""
        required_keys = [
            'database_path',
            'google_maps_api_key',
            'admin_api_key',
            'cache_ttl_seconds',
            'refresh_interval_seconds',
            'request_timeout_seconds',
            'placeholder_min_wait',
            'placeholder_max_wait',
        ]
        for key in required_keys:
            self.assertIn(key, DEFAULT_CONFIG)

    def test_default_ttl_is_ten_minutes(self):
        self.assertEqual(DEFAULT_CONFIG['cache_ttl_seconds'], 600)
        self.assertEqual(DEFAULT_CONFIG['refresh_interval_seconds'], 600)

    def test_load_config_returns_defaults(self):
        """Verify load_config returns defaults when no config file exists."""
        with mock.patch('commutecheck.config.loader.get_config_path') as mock_path:
            mock_path.return_value = Path('/nonexistent/config.json')
            config = load_config()

        self.assertIsNone(config['google_maps_api_key'])
        self.assertEqual(config['placeholder_min_wait'], 10)
        self.assertEqual(config['placeholder_max_wait'], 40)

    def test_load_config_merges_user_config(self):
        """Verify user config overrides defaults."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            with open(config_path, 'w') as f:
                json.dump({"cache_ttl_seconds": 300, "database_path": "/tmp/x.db"}, f)

            with mock.patch('commutecheck.config.loader.get_config_path') as mock_path:
                mock_path.return_value = config_path
                config = load_config()

        self.assertEqual(config['cache_ttl_seconds'], 300)
        self.assertEqual(config['database_path'], "/tmp/x.db")
        # Other defaults should still exist
        self.assertEqual(config['refresh_interval_seconds'], 600)

    def test_invalid_json_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text("{not json", encoding='utf-8')

            with mock.patch('commutecheck.config.loader.get_config_path') as mock_path:
                mock_path.return_value = config_path
                with self.assertLogs('commutecheck.config', level='WARNING'):
                    config = load_config()

        self.assertEqual(config['cache_ttl_seconds'], 600)

    def test_environment_overrides(self):
        os.environ['GOOGLE_MAPS_API_KEY'] = 'maps-key'
        os.environ['ADMIN_API_KEY'] = 'admin-key'
        os.environ['COMMUTECHECK_DB'] = '/tmp/env.db'

        with mock.patch('commutecheck.config.loader.get_config_path') as mock_path:
            mock_path.return_value = Path('/nonexistent/config.json')
            config = load_config()

        self.assertEqual(config['google_maps_api_key'], 'maps-key')
        self.assertEqual(config['admin_api_key'], 'admin-key')
        self.assertEqual(config['database_path'], '/tmp/env.db')

    def test_path_expansion(self):
        """Verify path expansion works correctly."""
        db_path = get_database_path(DEFAULT_CONFIG.copy())
        self.assertIsInstance(db_path, Path)
        self.assertFalse(str(db_path).startswith('~'))


if __name__ == '__main__':
    unittest.main()
