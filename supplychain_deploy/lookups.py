import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

RPC_ENDPOINT_OUTPUT = "ethereum-rpc-endpoint"
ADMIN_SITE_OUTPUT = "admin-site"


def rpc_endpoint(outputs: Dict[str, Any]) -> str | None:
    return outputs.get(RPC_ENDPOINT_OUTPUT)


def find_vnet_name(network_client: Any, resource_group: str, prefix: str | None = None) -> str | None:
    """Name of the consortium virtual network in the resource group.

    Prefers a network whose name starts with ``prefix``; falls back to the
    first network listed.
    """
    names = [vnet.name for vnet in network_client.virtual_networks.list(resource_group)]
    if not names:
        logger.warning("No virtual network found in resource group '%s'", resource_group)
        return None
    if prefix:
        for name in names:
            if name.startswith(prefix):
                return name
    return names[0]


def web_app_url(web_client: Any, resource_group: str, app_name: str) -> str:
    app = web_client.web_apps.get(resource_group, app_name)
    return f"https://{app.default_host_name}"


def storage_connection_string(storage_client: Any, resource_group: str, account_name: str) -> str:
    keys = storage_client.storage_accounts.list_keys(resource_group, account_name)
    key = keys.keys[0].value
    return (
        f"DefaultEndpointsProtocol=https;AccountName={account_name};"
        f"AccountKey={key};EndpointSuffix=core.windows.net"
    )
