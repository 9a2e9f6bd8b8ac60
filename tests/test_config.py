"""
Unit tests for ngpackager.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

from ngpackager.config import (
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)
from ngpackager.exit_codes import ConfigError, CONFIG_ERROR
from ngpackager.params import RunParameters
from ngpackager.services.package_service import PackageOptions, PackageService


def _clean_environ():
    return {k: v for k, v in os.environ.items() if not k.startswith('NGPACKAGER_')}


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.env_patch = patch.dict(os.environ, _clean_environ(), clear=True)
        self.env_patch.start()
        os.environ['HOME'] = self.temp_dir
        self.config_dir = Path(self.temp_dir) / '.ngpackager'

    def tearDown(self):
        """Clean up test environment"""
        self.env_patch.stop()
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertIn('logging', config)
        self.assertIn('packaging', config)
        self.assertEqual(config['packaging']['stamp_key'], 'BUILD_SCM_VERSION')
        self.assertEqual(config['packaging']['descriptor_name'], 'package.json')
        self.assertIn('.png', config['packaging']['binary_extensions'])
        self.assertEqual(config['logging']['level'], 'WARNING')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        self.assertEqual(load_config(), get_default_config())

    def test_default_config_path(self):
        """Test the path used when nothing exists yet"""
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self.config_dir.mkdir()
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'packaging': {'stamp_key': 'STABLE_VERSION'}}, f)

        config = load_config()

        self.assertEqual(config['packaging']['stamp_key'], 'STABLE_VERSION')
        # Untouched keys keep their defaults
        self.assertEqual(config['packaging']['descriptor_name'], 'package.json')

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.toml').write_text(
            '[logging]\nlevel = "DEBUG"\n'
        )

        config = load_config()

        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.yaml').write_text(
            'packaging:\n  binary_extensions: [".bin"]\n'
        )

        config = load_config()

        self.assertEqual(config['packaging']['binary_extensions'], ['.bin'])

    def test_config_env_var_path(self):
        """Test NGPACKAGER_CONFIG pointing at a file"""
        custom = Path(self.temp_dir) / 'custom.yml'
        custom.write_text('logging:\n  level: INFO\n')

        with patch.dict(os.environ, {'NGPACKAGER_CONFIG': str(custom)}):
            self.assertEqual(get_config_path(), custom)
            config = load_config()

        self.assertEqual(config['logging']['level'], 'INFO')

    def test_invalid_json(self):
        """Test a config file that does not parse"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text('{not json')

        with self.assertRaises(ConfigError) as ctx:
            load_config()
        self.assertEqual(ctx.exception.exit_code, CONFIG_ERROR)

    def test_non_mapping_config(self):
        """Test a config file whose top level is not a mapping"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.yaml').write_text('- a\n- b\n')

        with self.assertRaises(ConfigError):
            load_config()

    def test_environment_override(self):
        """Test environment variable override"""
        with patch.dict(os.environ, {'NGPACKAGER_PACKAGING_STAMP_KEY': 'STABLE_VERSION'}):
            config = load_config()

        self.assertEqual(config['packaging']['stamp_key'], 'STABLE_VERSION')

    def test_environment_overrides_file(self):
        """Test environment wins over the config file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text('{"logging": {"level": "INFO"}}')

        with patch.dict(os.environ, {'NGPACKAGER_LOGGING_LEVEL': 'ERROR'}):
            config = load_config()

        self.assertEqual(config['logging']['level'], 'ERROR')

    def test_list_environment_override(self):
        """Test a comma-separated env value for a list key"""
        env = {'NGPACKAGER_PACKAGING_BINARY_EXTENSIONS': '.png, .woff2'}
        with patch.dict(os.environ, env):
            config = load_config()

        self.assertEqual(config['packaging']['binary_extensions'], ['.png', '.woff2'])

    def test_list_environment_override_packages_binary(self):
        """Test a binary source still copies after an env override"""
        root = Path(self.temp_dir)
        (root / 'src').mkdir()
        (root / 'bin').mkdir()
        logo = root / 'src' / 'logo.png'
        logo.write_bytes(b'\x89PNG\r\n\x1a\n\x00\xff')

        with patch.dict(os.environ, {'NGPACKAGER_PACKAGING_BINARY_EXTENSIONS': '.png'}):
            config = load_config()
        options = PackageOptions.from_config(config)
        self.assertEqual(options.binary_extensions, ['.png'])

        params = RunParameters(
            out=root / 'out', src_dir=root / 'src', bin_dir=root / 'bin', srcs=[logo],
        )
        PackageService(config=config).run(params, options)

        self.assertEqual((root / 'out' / 'logo.png').read_bytes(), logo.read_bytes())


class TestConfigValidation(unittest.TestCase):
    """Test configuration helpers"""

    def test_merge_configs(self):
        """Test configuration merging"""
        base_config = {
            'packaging': {'stamp_key': 'BUILD_SCM_VERSION', 'descriptor_name': 'package.json'},
            'logging': {'level': 'INFO'}
        }

        override_config = {
            'packaging': {'stamp_key': 'STABLE_VERSION'},
            'new_section': {'key': 'value'}
        }

        merged = merge_configs(base_config, override_config)

        self.assertEqual(merged['packaging']['descriptor_name'], 'package.json')
        self.assertEqual(merged['logging']['level'], 'INFO')
        self.assertEqual(merged['packaging']['stamp_key'], 'STABLE_VERSION')
        self.assertEqual(merged['new_section']['key'], 'value')
        # Base is left alone
        self.assertEqual(base_config['packaging']['stamp_key'], 'BUILD_SCM_VERSION')

    def test_env_override_value_types(self):
        """Test conversion of boolean and integer env values"""
        config = {'packaging': {'dry_run': False, 'retries': 0}}
        env = {
            'NGPACKAGER_PACKAGING_DRY_RUN': 'yes',
            'NGPACKAGER_PACKAGING_RETRIES': '3',
        }
        with patch.dict(os.environ, env):
            config = apply_env_overrides(config)

        self.assertIs(config['packaging']['dry_run'], True)
        self.assertEqual(config['packaging']['retries'], 3)

    def test_env_override_unknown_key_ignored(self):
        """Test env vars that match nothing leave config unchanged"""
        with patch.dict(os.environ, {'NGPACKAGER_NOPE_THING': 'x'}):
            config = apply_env_overrides(get_default_config())

        self.assertEqual(config, get_default_config())


class TestConfigureLogging(unittest.TestCase):
    """Test logging setup from config"""

    def tearDown(self):
        logging.getLogger().setLevel(logging.WARNING)

    def test_configured_level(self):
        configure_logging({'logging': {'level': 'info'}})
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_debug_flag_wins(self):
        configure_logging({'logging': {'level': 'ERROR'}}, debug=True)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_unknown_level(self):
        with self.assertRaises(ConfigError):
            configure_logging({'logging': {'level': 'LOUD'}})


if __name__ == '__main__':
    unittest.main()
