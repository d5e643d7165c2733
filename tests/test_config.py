"""
Unit tests for harborrp.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

from harborrp.config import (
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        env = {k: v for k, v in os.environ.items() if not k.startswith('HARBORRP_')}
        env['HOME'] = self.temp_dir
        self.env_patch = patch.dict(os.environ, env, clear=True)
        self.env_patch.start()
        self.config_dir = Path(self.temp_dir) / '.harborrp'
        self.config_dir.mkdir()

    def tearDown(self):
        """Clean up test environment"""
        self.env_patch.stop()
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Default configuration has every section"""
        config = get_default_config()

        self.assertEqual(set(config), {'harbor', 'session', 'policy', 'logging'})
        self.assertEqual(config['harbor']['lang'], 'zh-cn')
        self.assertEqual(config['policy']['path'], './rp.yaml')
        self.assertTrue(config['harbor']['verify_tls'])

    def test_load_config_no_file(self):
        """Defaults are returned when no file exists"""
        self.assertEqual(load_config(), get_default_config())

    def test_load_config_json_file(self):
        """JSON file values are merged over defaults"""
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'harbor': {'url': 'https://harbor.example.com'}}, f)

        config = load_config()

        self.assertEqual(config['harbor']['url'], 'https://harbor.example.com')
        self.assertEqual(config['harbor']['lang'], 'zh-cn')

    def test_load_config_yaml_file(self):
        """YAML config is supported"""
        (self.config_dir / 'config.yaml').write_text(
            "harbor:\n  url: https://yaml.example.com\n  timeout_seconds: 5\n"
        )

        config = load_config()

        self.assertEqual(config['harbor']['url'], 'https://yaml.example.com')
        self.assertEqual(config['harbor']['timeout_seconds'], 5)

    def test_load_config_toml_file(self):
        """TOML config is supported"""
        (self.config_dir / 'config.toml').write_text(
            '[policy]\npath = "/etc/harborrp/rp.yaml"\n'
        )

        config = load_config()

        self.assertEqual(config['policy']['path'], '/etc/harborrp/rp.yaml')

    def test_invalid_file_falls_back_to_defaults(self):
        """A broken config file is logged and ignored"""
        (self.config_dir / 'config.json').write_text('{"harbor": {broken json here')

        with self.assertLogs('harborrp', level='ERROR'):
            config = load_config()

        self.assertEqual(config['harbor']['url'], 'http://localhost')

    def test_config_env_var(self):
        """HARBORRP_CONFIG points at an explicit file"""
        custom = Path(self.temp_dir) / 'custom.json'
        custom.write_text(json.dumps({'session': {'path': '/tmp/s.json'}}))
        os.environ['HARBORRP_CONFIG'] = str(custom)

        self.assertEqual(get_config_path(), custom)
        self.assertEqual(load_config()['session']['path'], '/tmp/s.json')

    def test_env_overrides(self):
        """HARBORRP_SECTION_KEY variables override file values"""
        os.environ['HARBORRP_HARBOR_URL'] = 'https://env.example.com'
        os.environ['HARBORRP_HARBOR_VERIFY_TLS'] = 'false'
        os.environ['HARBORRP_HARBOR_TIMEOUT_SECONDS'] = '12'
        os.environ['HARBORRP_POLICY_PATH'] = '/srv/rp.yaml'

        config = load_config()

        self.assertEqual(config['harbor']['url'], 'https://env.example.com')
        self.assertFalse(config['harbor']['verify_tls'])
        self.assertEqual(config['harbor']['timeout_seconds'], 12)
        self.assertEqual(config['policy']['path'], '/srv/rp.yaml')

    def test_unknown_env_key_ignored(self):
        os.environ['HARBORRP_NOPE_THING'] = 'x'
        self.assertEqual(apply_env_overrides(get_default_config()), get_default_config())


class TestConfigHelpers(unittest.TestCase):

    def test_merge_configs_is_recursive(self):
        merged = merge_configs({'a': {'b': 1, 'c': 2}, 'd': 3}, {'a': {'c': 9}, 'e': 4})
        self.assertEqual(merged, {'a': {'b': 1, 'c': 9}, 'd': 3, 'e': 4})

    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging({'logging': {'level': 'warning'}})
            self.assertEqual(root.level, logging.WARNING)
        finally:
            root.setLevel(previous)


if __name__ == '__main__':
    unittest.main()
