"""Sequential deployment of the supply-chain application.

Each step is recorded in a :class:`DeploymentReport`. Steps are either fatal
(the exception propagates after being recorded) or recoverable (the failure
is recorded, the report is marked partial and the steps that need the
missing data are skipped).
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from azure.core.exceptions import AzureError

from . import app_settings, lookups
from .clients import AzureClients
from .config import DeployConfig
from .contract import ContractResult, deploy_contract
from .errors import DeployError, MissingInputError, NodeNotReadyError
from .parameters import ACCOUNT_PASSWORD, NAME_PREFIX, parameter_value, rewrite_parameters
from .providers import register_providers
from .readiness import wait_for_node
from .resource_group import ensure_resource_group
from .templates import deploy_template

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
FAILED = "failed"
SKIPPED = "skipped"

RECOVERABLE_ERRORS = (DeployError, AzureError)


@dataclass
class StepResult:
    name: str
    status: str
    detail: str = ""


@dataclass
class DeploymentReport:
    steps: List[StepResult] = field(default_factory=list)
    outputs: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, status: str, detail: str = "") -> None:
        self.steps.append(StepResult(name, status, detail))
        log = logger.error if status == FAILED else logger.info
        log("Step '%s' %s%s", name, status, f": {detail}" if detail else "")

    def status_of(self, name: str) -> str | None:
        for step in self.steps:
            if step.name == name:
                return step.status
        return None

    @property
    def partial(self) -> bool:
        return any(step.status == FAILED for step in self.steps)


def _fatal(report: DeploymentReport, name: str, func: Callable[[], Any]) -> Any:
    try:
        result = func()
    except Exception as exc:
        report.record(name, FAILED, str(exc))
        raise
    report.record(name, SUCCEEDED)
    return result


def _recoverable(report: DeploymentReport, name: str, func: Callable[[], Any]) -> tuple[bool, Any]:
    try:
        result = func()
    except RECOVERABLE_ERRORS as exc:
        report.record(name, FAILED, str(exc))
        return False, None
    report.record(name, SUCCEEDED)
    return True, result


def run_deployment(
    config: DeployConfig,
    clients: AzureClients,
    prompt: Callable[[str], str] = input,
    sleep: Callable[[float], None] = time.sleep,
    session: Any = None,
) -> DeploymentReport:
    report = DeploymentReport()
    rg = config.resource_group

    _fatal(report, "register-providers", lambda: register_providers(clients.resource))

    created = _fatal(
        report,
        "resource-group",
        lambda: ensure_resource_group(
            clients.resource, rg, config.location, interactive=config.interactive, prompt=prompt
        ),
    )
    report.outputs["resourceGroupCreated"] = created

    consortium_outputs = _fatal(
        report,
        "consortium-deployment",
        lambda: deploy_template(
            clients.resource,
            rg,
            config.consortium_deployment_name,
            config.consortium_template,
            config.consortium_parameters,
        ),
    )
    report.outputs["consortium"] = consortium_outputs

    name_prefix = password = None
    if config.consortium_parameters.exists():
        name_prefix = parameter_value(config.consortium_parameters, NAME_PREFIX)
        password = parameter_value(config.consortium_parameters, ACCOUNT_PASSWORD)

    if config.consortium_parameters.exists() and config.supply_chain_parameters.exists():
        def rewrite() -> None:
            vnet_name = lookups.find_vnet_name(clients.network, rg, name_prefix)
            rewrite_parameters(config.consortium_parameters, config.supply_chain_parameters, vnet_name)

        _fatal(report, "rewrite-parameters", rewrite)
    else:
        report.record("rewrite-parameters", SKIPPED, "parameter files not found")

    supply_chain_ok, supply_chain_outputs = _recoverable(
        report,
        "supply-chain-deployment",
        lambda: deploy_template(
            clients.resource,
            rg,
            config.supply_chain_deployment_name,
            config.supply_chain_template,
            config.supply_chain_parameters,
        ),
    )
    supply_chain_outputs = supply_chain_outputs or {}
    report.outputs["supplyChain"] = supply_chain_outputs

    rpc_url = lookups.rpc_endpoint(consortium_outputs)

    def wait() -> int:
        if not rpc_url:
            raise NodeNotReadyError(f"Consortium deployment has no '{lookups.RPC_ENDPOINT_OUTPUT}' output")
        return wait_for_node(rpc_url, timeout=config.readiness_timeout, session=session, sleep=sleep)

    _fatal(report, "node-readiness", wait)

    def contract_step() -> ContractResult:
        if not password:
            raise MissingInputError(
                f"No '{ACCOUNT_PASSWORD}' in {config.consortium_parameters}; cannot unlock the deployer account"
            )
        result = deploy_contract(
            config.contract_deployer,
            config.contract_dir,
            rpc_url,
            password,
            result_file=config.contract_result_file,
        )
        if not result.succeeded:
            raise DeployError(result.error)
        return result

    contract_ok, contract = _recoverable(report, "contract-deployment", contract_step)
    if contract_ok:
        report.outputs["accountAddress"] = contract.account_address
        report.outputs["contractAddress"] = contract.contract_address

    if not supply_chain_ok:
        report.record("api-app-settings", SKIPPED, "supply-chain deployment failed")
        report.record("web-app-settings", SKIPPED, "supply-chain deployment failed")
        return report

    def resolve_app_names() -> tuple[str, str]:
        api = config.api_app_name or supply_chain_outputs.get("apiAppName")
        web = config.web_app_name or supply_chain_outputs.get("webAppName")
        if name_prefix:
            api = api or f"{name_prefix}-api"
            web = web or f"{name_prefix}-web"
        if not api or not web:
            raise MissingInputError(
                "Web app names are unknown; pass --api-app-name and --web-app-name "
                "or set namePrefix in the consortium parameters"
            )
        return api, web

    names_ok, names = _recoverable(report, "resolve-app-names", resolve_app_names)
    if not names_ok:
        report.record("api-app-settings", SKIPPED, "web app names unknown")
        report.record("web-app-settings", SKIPPED, "web app names unknown")
        return report
    api_app, web_app = names

    if contract_ok:
        def patch_api() -> Dict[str, str]:
            storage_account = config.storage_account or supply_chain_outputs.get("storageAccountName")
            storage_connection = (
                lookups.storage_connection_string(clients.storage, rg, storage_account) if storage_account else None
            )
            updates = app_settings.api_settings(contract, password, rpc_url, storage_connection)
            return app_settings.patch_app_settings(clients.web, rg, api_app, config.slot, updates)

        _fatal(report, "api-app-settings", patch_api)
    else:
        report.record("api-app-settings", SKIPPED, "contract deployment failed")

    def patch_web() -> Dict[str, str]:
        api_url = lookups.web_app_url(clients.web, rg, api_app)
        updates = app_settings.web_settings(api_url, consortium_outputs.get(lookups.ADMIN_SITE_OUTPUT))
        return app_settings.patch_app_settings(clients.web, rg, web_app, config.slot, updates)

    _fatal(report, "web-app-settings", patch_web)
    return report
