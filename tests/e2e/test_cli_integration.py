"""End-to-end tests of the ovh-provider command line."""
import json
import os
import shutil
import tempfile
from unittest.mock import patch

import pytest
import yaml

from terraform_provider_ovh.cli.main import main, parse_args, parse_assignments

CREDENTIALS = "[ovh-eu]\napplication_key = app-key-1234\napplication_secret = secret-5678\nconsumer_key = consumer-9012\n"


@pytest.mark.e2e
class TestCLIIntegration:
    """Test complete CLI scenarios."""

    def setup_method(self):
        """Set up test fixtures."""
        self.home = tempfile.mkdtemp()
        with open(os.path.join(self.home, '.ovh.conf'), 'w') as f:
            f.write(CREDENTIALS)

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.home, ignore_errors=True)

    def run(self, capsys, *argv):
        code = main(list(argv))
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    def test_schema(self, capsys):
        code, out, _ = self.run(capsys, 'schema')

        assert code == 0
        schema = json.loads(out)
        assert set(schema['provider']) == {'endpoint', 'application_key', 'application_secret', 'consumer_key'}
        assert schema['provider']['endpoint']['default_func'] == 'env_default_ovh_endpoint'

    def test_resources_deprecated_only(self, capsys):
        code, out, _ = self.run(capsys, 'resources', '--kind', 'resource', '--deprecated')

        assert code == 0
        names = [entry['name'] for entry in json.loads(out)['resource']]
        assert names == [
            'ovh_publiccloud_private_network',
            'ovh_publiccloud_private_network_subnet',
            'ovh_publiccloud_user',
            'ovh_vrack_publiccloud_attachment',
        ]

    def test_resources_yaml(self, capsys):
        code, out, _ = self.run(capsys, '--format', 'yaml', 'resources', '--kind', 'data_source')

        assert code == 0
        assert len(yaml.safe_load(out)['data_source']) == 8

    @patch('terraform_provider_ovh.infrastructure.ovh.ovh_client.ovh.Client')
    def test_configure_masks_secrets(self, mock_client, capsys):
        code, out, _ = self.run(capsys, 'configure', '--endpoint', 'ovh-eu',
                                '--home', self.home, '--no-validate')

        assert code == 0
        assert json.loads(out) == {
            'endpoint': 'ovh-eu',
            'application_key': '********1234',
            'application_secret': '*******5678',
            'consumer_key': '*********9012',
        }
        mock_client.assert_called_once()
        mock_client.return_value.get.assert_not_called()

    @patch('terraform_provider_ovh.infrastructure.ovh.ovh_client.ovh.Client')
    def test_configure_probes_api(self, mock_client, capsys):
        mock_client.return_value.get.return_value = 1700000000

        code, _, _ = self.run(capsys, 'configure', '--endpoint', 'ovh-eu', '--home', self.home)

        assert code == 0
        mock_client.return_value.get.assert_called_once_with('/auth/time', _need_auth=False)

    @patch('terraform_provider_ovh.infrastructure.ovh.ovh_client.ovh.Client')
    def test_data_source(self, mock_client, capsys, fake_api):
        mock_client.return_value = fake_api
        fake_api.add('GET', '/domain/zone/example.com', {'dnssecSupported': True})

        code, out, _ = self.run(capsys, 'data', 'ovh_domain_zone', '--arg', 'name=example.com',
                                '--endpoint', 'ovh-eu', '--home', self.home, '--no-validate')

        assert code == 0
        assert json.loads(out) == {'id': 'example.com', 'name': 'example.com', 'dnssec_supported': True}

    def test_missing_endpoint_fails(self, capsys):
        code, out, err = self.run(capsys, 'configure', '--home', self.home, '--no-validate')

        assert code == 1
        assert out == ''
        assert 'Error: Missing required argument(s): endpoint' in err

    def test_unknown_endpoint_section_fails(self, capsys):
        code, _, err = self.run(capsys, 'configure', '--endpoint', 'ovh-ca', '--home', self.home)

        assert code == 1
        assert "No section matching endpoint 'ovh-ca'" in err

    def test_invalid_settings_file(self, capsys):
        settings = os.path.join(self.home, 'settings.yml')
        with open(settings, 'w') as f:
            f.write('wait:\n  timeout: -1\n')

        code, _, err = self.run(capsys, '--config', settings, 'schema')

        assert code == 1
        assert 'Invalid provider settings' in err


class TestArgumentParsing:
    """Test argument helpers."""

    def test_assignments_decode_json(self):
        assert parse_assignments(['name=example.com', 'use_default=true', 'states=["ok"]']) == {
            'name': 'example.com', 'use_default': True, 'states': ['ok'],
        }

    def test_invalid_assignment(self):
        with pytest.raises(ValueError, match='KEY=VALUE'):
            parse_assignments(['name'])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_global_options(self):
        args = parse_args(['--log-level', 'DEBUG', '--format', 'yaml', 'schema'])

        assert args.log_level == 'DEBUG'
        assert args.format == 'yaml'
        assert args.command == 'schema'
