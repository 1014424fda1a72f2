import logging
from typing import Any, Iterable

logger = logging.getLogger(__name__)

REQUIRED_PROVIDERS = (
    "Microsoft.Compute",
    "Microsoft.Network",
    "Microsoft.Storage",
    "Microsoft.Web",
    "Microsoft.Insights",
)


def register_providers(resource_client: Any, namespaces: Iterable[str] = REQUIRED_PROVIDERS) -> None:
    # Registration is idempotent on the platform side; errors propagate.
    for namespace in namespaces:
        logger.info("Registering resource provider %s", namespace)
        resource_client.providers.register(namespace)
