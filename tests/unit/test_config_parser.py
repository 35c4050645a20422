"""
Unit tests for configuration parser.

Tests the YAML configuration parsing, validation, and error handling
functionality of the ConfigParser class.
"""

import pytest
import tempfile
import os
import shutil
import yaml
from pathlib import Path
from unittest.mock import patch

from filesearcher.config.parser import (
    ConfigParser,
    ConfigParseResult,
    ConfigurationError,
    load_config,
    validate_config_file,
    create_config_template
)
from filesearcher.models.config import SearcherConfig


class TestConfigParser:
    """Test cases for ConfigParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.temp_path = Path(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        path = self.temp_path / name
        path.write_text(content)
        return path

    def test_init_default(self):
        """Test default initialization."""
        parser = ConfigParser()
        assert parser.strict_mode is False
        assert parser.DEFAULT_CONFIG_NAMES == [
            '.filesearcher.yaml',
            '.filesearcher.yml',
            'filesearcher.yaml',
            'filesearcher.yml'
        ]

    def test_load_config_with_valid_file(self):
        """Test loading configuration from valid YAML file."""
        config_data = {
            'roots': [self.temp_dir],
            'concurrency': {'producer_count': 3, 'file_queue_capacity': 50},
            'skip': {'skip_paths': ['/proc']}
        }
        config_path = self._write('config.yaml', yaml.dump(config_data))

        result = ConfigParser().load_config(config_path)

        assert isinstance(result, ConfigParseResult)
        assert isinstance(result.config, SearcherConfig)
        assert result.config_path == config_path
        assert result.is_default is False
        assert result.config.roots == [os.path.abspath(self.temp_dir)]
        assert result.config.concurrency.producer_count == 3
        assert result.config.concurrency.file_queue_capacity == 50

    def test_load_config_file_not_found(self):
        """Test loading configuration from non-existent file."""
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            ConfigParser().load_config("/nonexistent/config.yaml")

    def test_load_config_invalid_yaml(self):
        """Test loading configuration with invalid YAML syntax."""
        config_path = self._write('bad.yaml', "roots:\n  - invalid: [\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML syntax"):
            ConfigParser().load_config(config_path)

    def test_load_config_empty_file(self):
        """Test that an empty file gives the default configuration."""
        config_path = self._write('empty.yaml', "")
        result = ConfigParser().load_config(config_path)

        assert result.config.concurrency.producer_count == 6
        assert result.config_path == config_path
        assert result.is_default is False

    def test_load_config_non_dict_yaml(self):
        """Test loading configuration with non-dictionary YAML."""
        config_path = self._write('list.yaml', "- item1\n- item2")

        with pytest.raises(ConfigurationError, match="must contain a YAML object"):
            ConfigParser().load_config(config_path)

    def test_load_config_invalid_values(self):
        """Test that out-of-range values are reported as configuration errors."""
        config_path = self._write('invalid.yaml', yaml.dump({'concurrency': {'producer_count': 0}}))

        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            ConfigParser().load_config(config_path)

    def test_load_config_unknown_keys(self):
        """Test that unknown sections are rejected."""
        config_path = self._write('unknown.yaml', yaml.dump({'embeddings': {'provider': 'x'}}))

        with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
            ConfigParser().load_config(config_path)

    def test_load_config_no_file_found(self):
        """Test falling back to defaults when no configuration file exists."""
        parser = ConfigParser()
        with patch.object(parser, '_find_and_load_config', return_value=(None, None)):
            result = parser.load_config()

        assert result.is_default is True
        assert result.config_path is None
        assert result.config.roots is None
        assert "No configuration file found, using default settings" in result.warnings

    def test_find_config_in_current_directory(self):
        """Test discovery of a configuration file in the working directory."""
        self._write('.filesearcher.yaml', yaml.dump({'concurrency': {'producer_count': 2}}))
        empty = self.temp_path / "home"
        empty.mkdir()

        with patch('pathlib.Path.cwd', return_value=self.temp_path), \
             patch('pathlib.Path.home', return_value=empty):
            result = ConfigParser().load_config()

        assert result.is_default is False
        assert result.config_path == self.temp_path / '.filesearcher.yaml'
        assert result.config.concurrency.producer_count == 2

    def test_find_config_skips_broken_file(self):
        """Test that an unreadable discovered file is skipped with a warning."""
        self._write('.filesearcher.yaml', "- not\n- a mapping")
        self._write('filesearcher.yml', yaml.dump({'max_recorded_errors': 5}))

        with patch('pathlib.Path.cwd', return_value=self.temp_path), \
             patch('pathlib.Path.home', return_value=self.temp_path / "nowhere"):
            result = ConfigParser().load_config()

        assert result.config_path == self.temp_path / 'filesearcher.yml'
        assert result.config.max_recorded_errors == 5

    def test_strict_mode(self):
        """Test that warnings become errors in strict mode."""
        missing_root = str(self.temp_path / "missing")
        config_path = self._write('config.yaml', yaml.dump({'roots': [missing_root]}))

        with pytest.raises(ConfigurationError, match="strict mode"):
            ConfigParser(strict_mode=True).load_config(config_path)

    def test_parser_warnings(self):
        """Test warnings about settings that make searches slow or unsafe."""
        config = SearcherConfig(
            roots=[self.temp_dir],
            concurrency={'producer_count': 8, 'file_queue_capacity': 2},
            skip={'skip_hidden': False, 'skip_paths': []}
        )
        warnings = ConfigParser()._get_parser_warnings(config, is_default=False)

        assert any("file_queue_capacity" in w for w in warnings)
        assert any("No skip rules" in w for w in warnings)

    def test_read_error(self):
        """Test that OS errors while reading are wrapped."""
        config_path = self._write('config.yaml', "roots: []")

        with patch('builtins.open', side_effect=PermissionError("Access denied")):
            with pytest.raises(ConfigurationError, match="Cannot read configuration file"):
                ConfigParser().load_config(config_path)

    def test_save_and_reload(self):
        """Test that a saved configuration loads back unchanged."""
        config = SearcherConfig(
            roots=[self.temp_dir],
            concurrency={'producer_count': 4},
            skip={'skip_paths': ['/proc', '/sys']}
        )
        output_path = self.temp_path / "out" / "saved.yaml"

        parser = ConfigParser()
        parser.save_config(config, output_path)

        content = output_path.read_text()
        assert content.startswith("# File Searcher Configuration")
        assert "# Worker pool and queue settings" in content

        reloaded = parser.load_config(output_path).config
        assert reloaded.to_dict() == config.to_dict()

    def test_validate_config_file(self):
        """Test validation of good, bad and missing files."""
        good = self._write('good.yaml', yaml.dump({'concurrency': {'producer_count': 2}}))
        bad = self._write('bad.yaml', yaml.dump({'concurrency': {'file_queue_capacity': -5}}))

        assert validate_config_file(good) == []
        assert len(validate_config_file(bad)) == 1
        assert "not found" in validate_config_file(self.temp_path / "missing.yaml")[0]

    def test_config_template(self):
        """Test that the template is valid YAML describing every section."""
        template = ConfigParser().get_config_template()
        data = yaml.safe_load(template)

        assert data['roots'] == ['~']
        assert data['concurrency']['producer_count'] == 6
        assert data['concurrency']['file_queue_capacity'] == 10000
        assert 'skip_hidden' in data['skip']

    def test_create_config_template(self):
        """Test writing the template to disk and loading it."""
        output_path = self.temp_path / "nested" / "template.yaml"
        create_config_template(output_path)

        assert output_path.exists()
        result = load_config(output_path)
        assert result.config.roots == [os.path.expanduser('~')]

    def test_create_config_template_write_error(self):
        """Test that a template write failure is reported."""
        with patch('builtins.open', side_effect=PermissionError("Access denied")):
            with pytest.raises(ConfigurationError, match="Cannot create template file"):
                create_config_template(self.temp_path / "template.yaml")
