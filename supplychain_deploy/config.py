import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import MissingInputError

DEFAULT_CONSORTIUM_TEMPLATE = "etheriumConsertiumTemplate.json"
DEFAULT_CONSORTIUM_PARAMETERS = "etheriumConsertiumParameters.json"
DEFAULT_SUPPLY_CHAIN_TEMPLATE = "supplyChainTemplate.json"
DEFAULT_SUPPLY_CHAIN_PARAMETERS = "supplyChainParameters.json"

DEFAULT_SLOT = "staging"
DEFAULT_CONTRACT_DEPLOYER = "node deploy.js"
DEFAULT_READINESS_TIMEOUT = 180.0


def get_env(name: str, default: str | None = None, required: bool = False) -> str:
    value = os.getenv(name, default)
    if required and not value:
        raise MissingInputError(f"Environment variable {name} is required")
    return value or ""


@dataclass
class DeployConfig:
    """Everything a single deployment run needs, passed explicitly to each step."""

    subscription_id: str
    resource_group: str
    deployment_name: str
    location: str | None = None
    consortium_template: Path = Path(DEFAULT_CONSORTIUM_TEMPLATE)
    consortium_parameters: Path = Path(DEFAULT_CONSORTIUM_PARAMETERS)
    supply_chain_template: Path = Path(DEFAULT_SUPPLY_CHAIN_TEMPLATE)
    supply_chain_parameters: Path = Path(DEFAULT_SUPPLY_CHAIN_PARAMETERS)
    slot: str = DEFAULT_SLOT
    api_app_name: str | None = None
    web_app_name: str | None = None
    storage_account: str | None = None
    contract_dir: Path = Path("contracts")
    contract_deployer: List[str] = field(default_factory=lambda: DEFAULT_CONTRACT_DEPLOYER.split())
    contract_result_file: Path | None = None
    readiness_timeout: float = DEFAULT_READINESS_TIMEOUT
    interactive: bool = False

    def __post_init__(self) -> None:
        missing = [
            label
            for label, value in (
                ("subscription id", self.subscription_id),
                ("resource group name", self.resource_group),
                ("deployment name", self.deployment_name),
            )
            if not value
        ]
        if missing:
            raise MissingInputError(f"Missing required input: {', '.join(missing)}")

    @property
    def consortium_deployment_name(self) -> str:
        return f"{self.deployment_name}-consortium"

    @property
    def supply_chain_deployment_name(self) -> str:
        return f"{self.deployment_name}-supplychain"
