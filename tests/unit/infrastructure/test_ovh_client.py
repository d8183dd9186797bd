"""Tests for the OVH client wrapper."""

from unittest.mock import Mock, patch

import ovh.exceptions
import pytest

from terraform_provider_ovh.config.schemas.app_schema import ClientConfig, WaitConfig
from terraform_provider_ovh.domain.config import ResolvedConfig
from terraform_provider_ovh.domain.exceptions import CredentialValidationError
from terraform_provider_ovh.infrastructure.exceptions import (
    OVHApiError,
    ResourceNotFoundError,
    WaitTimeoutError,
)
from terraform_provider_ovh.infrastructure.ovh.ovh_client import OVHClient
from terraform_provider_ovh.infrastructure.ovh.validation import validate_credentials


class TestOVHClientConstruction:
    """Test SDK client creation."""

    @patch('terraform_provider_ovh.infrastructure.ovh.ovh_client.ovh.Client')
    def test_builds_sdk_client(self, mock_client, resolved_config):
        """Test the SDK client receives the resolved credentials."""
        OVHClient(resolved_config, ClientConfig(timeout=30))

        mock_client.assert_called_once_with(
            endpoint='ovh-eu',
            application_key='test-application-key',
            application_secret='test-application-secret',
            consumer_key='test-consumer-key',
            timeout=30,
        )

    @patch('terraform_provider_ovh.infrastructure.ovh.ovh_client.ovh.Client')
    def test_sdk_error_is_configuration_error(self, mock_client, resolved_config):
        mock_client.side_effect = ovh.exceptions.InvalidRegion("Unknown endpoint")

        with pytest.raises(CredentialValidationError, match="Error getting ovh client"):
            OVHClient(resolved_config)


class TestOVHClientCalls:
    """Test request forwarding and error mapping."""

    def test_get_forwards_query_parameters(self, ovh_client, fake_api):
        fake_api.add('GET', '/me/paymentMean/bankAccount', [1, 2])

        assert ovh_client.get('/me/paymentMean/bankAccount', state='valid') == [1, 2]
        assert fake_api.calls_to('GET', '/me/paymentMean/bankAccount') == [{'state': 'valid'}]

    def test_post_sends_body(self, ovh_client, fake_api):
        fake_api.add('POST', '/domain/zone/example.com/record', {'id': 1})

        ovh_client.post('/domain/zone/example.com/record', {'fieldType': 'A', 'ttl': 60})

        assert fake_api.calls_to('POST', '/domain/zone/example.com/record') == [
            {'fieldType': 'A', 'ttl': 60}
        ]

    def test_not_found_mapped(self, ovh_client):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            ovh_client.get('/missing')
        assert exc_info.value.method == 'GET'
        assert exc_info.value.path == '/missing'

    def test_api_error_mapped(self, ovh_client, fake_api):
        error = ovh.exceptions.BadParametersError("Invalid ttl")
        fake_api.add('PUT', '/domain/zone/example.com/record/1', error)

        with pytest.raises(OVHApiError, match="Calling PUT /domain/zone/example.com/record/1: Invalid ttl"):
            ovh_client.put('/domain/zone/example.com/record/1', {'ttl': 1})


class TestCheckConnectivity:
    """Test the /auth/time probe."""

    def test_success(self, ovh_client, fake_api):
        fake_api.add('GET', '/auth/time', 1700000000)
        assert ovh_client.check_connectivity() == 1700000000

    def test_zero_time_is_misconfiguration(self, ovh_client, fake_api):
        fake_api.add('GET', '/auth/time', 0)

        with pytest.raises(CredentialValidationError, match="misconfigured"):
            ovh_client.check_connectivity()

    def test_api_failure_is_misconfiguration(self, ovh_client, fake_api):
        fake_api.add('GET', '/auth/time', ovh.exceptions.NetworkError("connection refused"))

        with pytest.raises(CredentialValidationError, match="misconfigured"):
            ovh_client.check_connectivity()


class TestWaitFor:
    """Test polling of asynchronous operations."""

    def test_reaches_target(self, ovh_client):
        refresh = Mock(side_effect=['BUILDING', 'BUILDING', 'ACTIVE'])

        assert ovh_client.wait_for(refresh, ['ACTIVE'], ['BUILDING'], 'network') == 'ACTIVE'
        assert refresh.call_count == 3

    def test_unexpected_state(self, ovh_client):
        refresh = Mock(return_value='ERROR')

        with pytest.raises(OVHApiError, match="unexpected state 'ERROR'"):
            ovh_client.wait_for(refresh, ['ACTIVE'], ['BUILDING'], 'network')

    def test_timeout(self, resolved_config, fake_api):
        client = OVHClient(resolved_config, wait_config=WaitConfig(timeout=0.01, interval=0.0),
                           sdk_client=fake_api)

        with pytest.raises(WaitTimeoutError) as exc_info:
            client.wait_for(lambda: 'BUILDING', ['ACTIVE'], ['BUILDING'], 'network')
        assert exc_info.value.details == {'last_state': 'BUILDING'}


class TestValidateCredentials:
    """Test static credential validation."""

    def test_complete_config(self, resolved_config):
        validate_credentials(resolved_config)

    def test_unknown_endpoint(self):
        config = ResolvedConfig(endpoint='ovh-moon', application_key='a',
                                application_secret='b', consumer_key='c')

        with pytest.raises(CredentialValidationError, match="ovh-moon must be one of"):
            validate_credentials(config)

    def test_missing_credentials(self):
        config = ResolvedConfig(endpoint='ovh-eu', application_key='a')

        with pytest.raises(CredentialValidationError) as exc_info:
            validate_credentials(config)
        assert exc_info.value.missing_fields == ['application_secret', 'consumer_key']
