"""Tests for IP reverse, vRack and payment mean handlers."""

import ovh.exceptions
import pytest

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.infrastructure.exceptions import OVHApiError
from terraform_provider_ovh.providers.ovh.handlers.ip_reverse import IpReverseResource
from terraform_provider_ovh.providers.ovh.handlers.me_paymentmean import (
    BankAccountDataSource,
    CreditCardDataSource,
)
from terraform_provider_ovh.providers.ovh.handlers.vrack import VRackCloudProjectResource

REVERSE = '/ip/192.0.2.0%2F29/reverse'


class TestIpReverseResource:
    """Test IP reverse lifecycle."""

    def setup_method(self):
        self.handler = IpReverseResource()

    def test_defaults_to_block_address(self, fake_api, meta):
        fake_api.add('POST', REVERSE, {'ipReverse': '192.0.2.0', 'reverse': 'host.example.com.'})
        fake_api.add('GET', f'{REVERSE}/192.0.2.0', {'ipReverse': '192.0.2.0', 'reverse': 'host.example.com.'})
        data = ResourceData.from_config(self.handler.schema,
                                        {'ip': '192.0.2.0/29', 'reverse': 'host.example.com.'})

        self.handler.create(data, meta)

        assert fake_api.calls_to('POST', REVERSE) == [
            {'ipReverse': '192.0.2.0', 'reverse': 'host.example.com.'}
        ]
        assert data.id == '192.0.2.0'
        assert data.get('ipreverse') == '192.0.2.0'

    def test_explicit_address(self, fake_api, meta):
        fake_api.add('POST', REVERSE, {'ipReverse': '192.0.2.3', 'reverse': 'h.example.com.'})
        fake_api.add('GET', f'{REVERSE}/192.0.2.3', {'ipReverse': '192.0.2.3', 'reverse': 'h.example.com.'})
        data = ResourceData.from_config(self.handler.schema, {
            'ip': '192.0.2.0/29', 'ipreverse': '192.0.2.3', 'reverse': 'h.example.com.',
        })

        self.handler.create(data, meta)

        assert data.id == '192.0.2.3'

    @pytest.mark.parametrize('config', [
        {'ip': 'not-a-block', 'reverse': 'h.'},
        {'ip': '192.0.2.0/29', 'ipreverse': '198.51.100.1', 'reverse': 'h.'},
        {'ip': '192.0.2.0/29', 'ipreverse': 'bogus', 'reverse': 'h.'},
    ])
    def test_invalid_addresses(self, meta, config):
        data = ResourceData.from_config(self.handler.schema, config)

        with pytest.raises(ValidationError):
            self.handler.create(data, meta)

    def test_delete(self, fake_api, meta):
        fake_api.add('DELETE', f'{REVERSE}/192.0.2.0', None)
        data = ResourceData(self.handler.schema, state={'ip': '192.0.2.0/29'}, resource_id='192.0.2.0')

        self.handler.delete(data, meta)

        assert data.id == ''
        assert len(fake_api.calls_to('DELETE', f'{REVERSE}/192.0.2.0')) == 1


class TestVRackCloudProjectResource:
    """Test vRack attachment lifecycle."""

    def setup_method(self):
        self.handler = VRackCloudProjectResource()

    def test_create_waits_for_task(self, fake_api, meta):
        fake_api.add('POST', '/vrack/pn-123/cloudProject', {'id': 55, 'status': 'init'})
        fake_api.add('GET', '/vrack/pn-123/task/55', {'id': 55, 'status': 'todo'},
                     ovh.exceptions.ResourceNotFoundError('done'))
        fake_api.add('GET', '/vrack/pn-123/cloudProject/pid', {'vrack': 'pn-123', 'project': 'pid'})
        data = ResourceData.from_config(self.handler.schema, {'vrack_id': 'pn-123', 'project_id': 'pid'})

        self.handler.create(data, meta)

        assert fake_api.calls_to('POST', '/vrack/pn-123/cloudProject') == [{'project': 'pid'}]
        assert data.id == 'vrack_pn-123-cloudproject_pid'

    def test_failed_task(self, fake_api, meta):
        fake_api.add('POST', '/vrack/pn-123/cloudProject', {'id': 55})
        fake_api.add('GET', '/vrack/pn-123/task/55', {'id': 55, 'status': 'cancelled'})
        data = ResourceData.from_config(self.handler.schema, {'vrack_id': 'pn-123', 'project_id': 'pid'})

        with pytest.raises(OVHApiError):
            self.handler.create(data, meta)

    def test_ids_from_environment(self, monkeypatch):
        monkeypatch.setenv('OVH_VRACK_ID', 'pn-env')
        monkeypatch.setenv('OVH_PROJECT_ID', 'pid-env')

        data = ResourceData.from_config(self.handler.schema, {})

        assert data.get('vrack_id') == 'pn-env'
        assert data.get('project_id') == 'pid-env'

    def test_delete_waits_for_task(self, fake_api, meta):
        fake_api.add('DELETE', '/vrack/pn-123/cloudProject/pid', {'id': 56})
        fake_api.add('GET', '/vrack/pn-123/task/56', {'id': 56, 'status': 'done'})
        data = ResourceData(self.handler.schema, state={'vrack_id': 'pn-123', 'project_id': 'pid'},
                            resource_id='vrack_pn-123-cloudproject_pid')

        self.handler.delete(data, meta)

        assert data.id == ''
        assert len(fake_api.calls_to('GET', '/vrack/pn-123/task/56')) == 1


def add_means(fake_api, path, means):
    fake_api.add('GET', path, [mean['id'] for mean in means])
    for mean in means:
        fake_api.add('GET', f"{path}/{mean['id']}", mean)


class TestBankAccountDataSource:
    """Test bank account lookup."""

    BANK = '/me/paymentMean/bankAccount'
    MEANS = [
        {'id': 1, 'description': 'main account', 'defaultPaymentMean': True,
         'state': 'valid', 'creationDate': '2019-01-01'},
        {'id': 2, 'description': 'old account', 'defaultPaymentMean': False,
         'state': 'valid', 'creationDate': '2015-01-01'},
    ]

    def setup_method(self):
        self.handler = BankAccountDataSource()

    def test_default_account(self, fake_api, meta):
        add_means(fake_api, self.BANK, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {'use_default': True})

        self.handler.read(data, meta)

        assert data.id == '1'
        assert data.get('default') is True
        assert data.get('description') == 'main account'

    def test_state_query_parameter(self, fake_api, meta):
        add_means(fake_api, self.BANK, self.MEANS)
        data = ResourceData.from_config(self.handler.schema,
                                        {'state': 'valid', 'description_regexp': '^old'})

        self.handler.read(data, meta)

        assert fake_api.calls_to('GET', self.BANK) == [{'state': 'valid'}]
        assert data.id == '2'

    def test_use_oldest(self, fake_api, meta):
        add_means(fake_api, self.BANK, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {'use_oldest': True})

        self.handler.read(data, meta)

        assert data.id == '2'

    def test_ambiguous(self, fake_api, meta):
        add_means(fake_api, self.BANK, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {})

        with pytest.raises(ValidationError, match='more than one result'):
            self.handler.read(data, meta)

    def test_invalid_regexp(self, fake_api, meta):
        add_means(fake_api, self.BANK, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {'description_regexp': '('})

        with pytest.raises(ValidationError, match='description_regexp'):
            self.handler.read(data, meta)


class TestCreditCardDataSource:
    """Test credit card lookup."""

    CARDS = '/me/paymentMean/creditCard'
    MEANS = [
        {'id': 10, 'description': 'visa', 'defaultPaymentMean': False,
         'state': 'ok', 'expirationDate': '2027-01-01'},
        {'id': 11, 'description': 'mastercard', 'defaultPaymentMean': False,
         'state': 'ok', 'expirationDate': '2029-01-01'},
        {'id': 12, 'description': 'expired visa', 'defaultPaymentMean': False,
         'state': 'expired', 'expirationDate': '2020-01-01'},
    ]

    def setup_method(self):
        self.handler = CreditCardDataSource()

    def test_states_filter(self, fake_api, meta):
        add_means(fake_api, self.CARDS, self.MEANS)
        data = ResourceData.from_config(self.handler.schema,
                                        {'states': ['expired'], 'description_regexp': 'visa'})

        self.handler.read(data, meta)

        assert data.id == '12'
        assert data.get('state') == 'expired'

    def test_last_to_expire(self, fake_api, meta):
        add_means(fake_api, self.CARDS, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {'use_last_to_expire': True})

        self.handler.read(data, meta)

        assert data.id == '11'

    def test_no_match(self, fake_api, meta):
        add_means(fake_api, self.CARDS, self.MEANS)
        data = ResourceData.from_config(self.handler.schema, {'description_regexp': 'amex'})

        with pytest.raises(ValidationError, match='no results'):
            self.handler.read(data, meta)
