"""OVH Provider Registration - build the resource and data source tables."""

import logging
from typing import Optional

from terraform_provider_ovh.infrastructure.registry.resource_registry import ResourceRegistry, deprecated
from terraform_provider_ovh.providers.ovh.handlers.cloud_network_private import (
    PrivateNetworkResource,
    PrivateNetworkSubnetResource,
)
from terraform_provider_ovh.providers.ovh.handlers.cloud_region import (
    CloudRegionDataSource,
    CloudRegionsDataSource,
)
from terraform_provider_ovh.providers.ovh.handlers.cloud_user import CloudUserResource
from terraform_provider_ovh.providers.ovh.handlers.domain_zone import (
    DomainZoneDataSource,
    DomainZoneRecordResource,
    DomainZoneRedirectionResource,
)
from terraform_provider_ovh.providers.ovh.handlers.ip_reverse import IpReverseResource
from terraform_provider_ovh.providers.ovh.handlers.iploadbalancing import (
    HttpRouteResource,
    HttpRouteRuleResource,
    IpLoadbalancingDataSource,
    RefreshResource,
    TcpFarmResource,
    TcpFarmServerResource,
    TcpFrontendResource,
)
from terraform_provider_ovh.providers.ovh.handlers.me_paymentmean import (
    BankAccountDataSource,
    CreditCardDataSource,
)
from terraform_provider_ovh.providers.ovh.handlers.vrack import VRackCloudProjectResource

logger = logging.getLogger(__name__)

DATA_SOURCES = {
    "ovh_cloud_region": CloudRegionDataSource,
    "ovh_cloud_regions": CloudRegionsDataSource,
    "ovh_domain_zone": DomainZoneDataSource,
    "ovh_iploadbalancing": IpLoadbalancingDataSource,
    "ovh_me_paymentmean_bankaccount": BankAccountDataSource,
    "ovh_me_paymentmean_creditcard": CreditCardDataSource,

    # Legacy naming schema (publiccloud)
    "ovh_publiccloud_region": deprecated(CloudRegionDataSource,
                                         "Use ovh_cloud_region data source instead"),
    "ovh_publiccloud_regions": deprecated(CloudRegionsDataSource,
                                          "Use ovh_cloud_regions data source instead"),
}

RESOURCES = {
    "ovh_iploadbalancing_tcp_farm": TcpFarmResource,
    "ovh_iploadbalancing_tcp_farm_server": TcpFarmServerResource,
    "ovh_iploadbalancing_tcp_frontend": TcpFrontendResource,
    "ovh_iploadbalancing_http_route": HttpRouteResource,
    "ovh_iploadbalancing_http_route_rule": HttpRouteRuleResource,
    "ovh_iploadbalancing_refresh": RefreshResource,
    "ovh_domain_zone_record": DomainZoneRecordResource,
    "ovh_domain_zone_redirection": DomainZoneRedirectionResource,
    "ovh_ip_reverse": IpReverseResource,
    "ovh_cloud_network_private": PrivateNetworkResource,
    "ovh_cloud_network_private_subnet": PrivateNetworkSubnetResource,
    "ovh_cloud_user": CloudUserResource,
    "ovh_vrack_cloudproject": VRackCloudProjectResource,

    # Legacy naming schema (publiccloud)
    "ovh_publiccloud_private_network": deprecated(PrivateNetworkResource,
                                                  "Use ovh_cloud_network_private resource instead"),
    "ovh_publiccloud_private_network_subnet": deprecated(PrivateNetworkSubnetResource,
                                                         "Use ovh_cloud_network_private_subnet resource instead"),
    "ovh_publiccloud_user": deprecated(CloudUserResource,
                                       "Use ovh_cloud_user resource instead"),
    "ovh_vrack_publiccloud_attachment": deprecated(VRackCloudProjectResource,
                                                   "Use ovh_vrack_cloudproject resource instead"),
}


def build_registry(registry: Optional[ResourceRegistry] = None) -> ResourceRegistry:
    """
    Register every OVH resource and data source.

    Args:
        registry: Registry to fill; a new one is created when omitted

    Returns:
        The filled registry
    """
    if registry is None:
        registry = ResourceRegistry()

    for name, handler in DATA_SOURCES.items():
        registry.register_data_source(name, handler)
    for name, handler in RESOURCES.items():
        registry.register_resource(name, handler)

    logger.debug(
        f"Registered {len(RESOURCES)} resources and {len(DATA_SOURCES)} data sources"
    )
    return registry
