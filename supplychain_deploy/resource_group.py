import logging
from typing import Any, Callable

from .errors import MissingInputError

logger = logging.getLogger(__name__)


def ensure_resource_group(
    resource_client: Any,
    name: str,
    region: str | None = None,
    interactive: bool = False,
    prompt: Callable[[str], str] = input,
) -> bool:
    """Create the resource group unless it already exists.

    Returns True when a group was created. A missing region is asked for once
    in interactive mode and is an error otherwise.
    """
    if resource_client.resource_groups.check_existence(name):
        logger.info("Using existing resource group '%s'", name)
        return False

    if not region:
        if not interactive:
            raise MissingInputError(
                f"Resource group '{name}' does not exist and no location was given; "
                "pass --location or run with --interactive"
            )
        logger.info("Resource group '%s' does not exist. To create a new resource group, please enter a location.", name)
        region = prompt("resourceGroupLocation: ").strip()
        if not region:
            raise MissingInputError(f"No location entered for resource group '{name}'")

    logger.info("Creating resource group '%s' in location '%s'", name, region)
    resource_client.resource_groups.create_or_update(name, {"location": region})
    return True
