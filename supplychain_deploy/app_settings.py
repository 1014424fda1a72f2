import logging
from typing import Any, Dict

from .contract import ContractResult

logger = logging.getLogger(__name__)

GAS = "4700000"


def merge_settings(current: Dict[str, str] | None, updates: Dict[str, Any]) -> Dict[str, str]:
    merged = dict(current or {})
    merged.update(updates)
    return merged


def api_settings(
    contract: ContractResult,
    password: str | None,
    rpc_url: str | None,
    storage_connection: str | None,
) -> Dict[str, Any]:
    return {
        "ContractAddress": contract.contract_address,
        "AccountAddress": contract.account_address,
        "AccountPassword": password,
        "Gas": GAS,
        "RpcEndpoint": rpc_url,
        "StorageConnectionString": storage_connection,
    }


def web_settings(api_url: str, admin_site_url: str | None) -> Dict[str, Any]:
    return {
        "ApiEndpoint": api_url,
        "BlockchainAdminSite": admin_site_url,
    }


def patch_app_settings(
    web_client: Any,
    resource_group: str,
    app_name: str,
    slot: str,
    updates: Dict[str, Any],
) -> Dict[str, str]:
    """Merge ``updates`` into the slot's app settings and write the whole set back.

    Last write wins; changes made to the slot between the read and the write
    are overwritten.
    """
    current = web_client.web_apps.list_application_settings_slot(resource_group, app_name, slot)
    merged = merge_settings(current.properties, updates)

    web_client.web_apps.update_application_settings_slot(
        resource_group,
        app_name,
        slot,
        {"properties": merged},
    )
    logger.info("Updated %d app settings on %s/%s (%s)", len(updates), app_name, slot, ", ".join(updates))
    return merged
