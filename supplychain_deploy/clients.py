import logging
from dataclasses import dataclass
from typing import Any

from azure.identity import DefaultAzureCredential
from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.resource.subscriptions import SubscriptionClient
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.web import WebSiteManagementClient

logger = logging.getLogger(__name__)


@dataclass
class AzureClients:
    subscription_id: str
    resource: Any
    web: Any
    storage: Any
    network: Any


def authenticate(subscription_id: str, credential: Any = None) -> AzureClients:
    """Log in, select the subscription and build the management clients for it.

    The subscription is resolved once up front so a wrong id fails before any
    resource is touched.
    """
    if credential is None:
        credential = DefaultAzureCredential(exclude_interactive_browser_credential=False)

    subscription = SubscriptionClient(credential).subscriptions.get(subscription_id)
    logger.info("Using subscription '%s' (%s)", subscription.display_name, subscription_id)

    return AzureClients(
        subscription_id=subscription_id,
        resource=ResourceManagementClient(credential, subscription_id),
        web=WebSiteManagementClient(credential, subscription_id),
        storage=StorageManagementClient(credential, subscription_id),
        network=NetworkManagementClient(credential, subscription_id),
    )
