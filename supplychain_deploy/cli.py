import argparse
import json
import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from azure.core.exceptions import AzureError
from dotenv import load_dotenv

from .clients import authenticate
from .config import (
    DEFAULT_CONSORTIUM_PARAMETERS,
    DEFAULT_CONSORTIUM_TEMPLATE,
    DEFAULT_CONTRACT_DEPLOYER,
    DEFAULT_READINESS_TIMEOUT,
    DEFAULT_SLOT,
    DEFAULT_SUPPLY_CHAIN_PARAMETERS,
    DEFAULT_SUPPLY_CHAIN_TEMPLATE,
    DeployConfig,
    get_env,
)
from .errors import DeployError
from .orchestrator import FAILED, run_deployment

logger = logging.getLogger("supplychain_deploy")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_PARTIAL = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Deploy the blockchain supply-chain application to Azure",
    )
    parser.add_argument(
        "--subscription-id",
        default=get_env("AZURE_SUBSCRIPTION_ID"),
        help="Azure subscription id (env: AZURE_SUBSCRIPTION_ID).",
    )
    parser.add_argument(
        "--resource-group",
        default=get_env("RESOURCE_GROUP_NAME"),
        help="Resource group to deploy into (env: RESOURCE_GROUP_NAME).",
    )
    parser.add_argument(
        "--location",
        default=get_env("RESOURCE_GROUP_LOCATION") or None,
        help="Location used when the resource group has to be created (env: RESOURCE_GROUP_LOCATION).",
    )
    parser.add_argument(
        "--deployment-name",
        default=get_env("DEPLOYMENT_NAME"),
        help="Base name for both template deployments (env: DEPLOYMENT_NAME).",
    )
    parser.add_argument("--consortium-template", type=Path, default=Path(DEFAULT_CONSORTIUM_TEMPLATE))
    parser.add_argument("--consortium-parameters", type=Path, default=Path(DEFAULT_CONSORTIUM_PARAMETERS))
    parser.add_argument("--supply-chain-template", type=Path, default=Path(DEFAULT_SUPPLY_CHAIN_TEMPLATE))
    parser.add_argument("--supply-chain-parameters", type=Path, default=Path(DEFAULT_SUPPLY_CHAIN_PARAMETERS))
    parser.add_argument(
        "--slot",
        default=get_env("WEBAPP_SLOT", DEFAULT_SLOT),
        help=f"Deployment slot whose app settings are patched (default: {DEFAULT_SLOT}).",
    )
    parser.add_argument("--api-app-name", default=get_env("API_APP_NAME") or None)
    parser.add_argument("--web-app-name", default=get_env("WEB_APP_NAME") or None)
    parser.add_argument("--storage-account", default=get_env("STORAGE_ACCOUNT_NAME") or None)
    parser.add_argument(
        "--contract-dir",
        type=Path,
        default=Path(get_env("CONTRACT_DIR", "contracts")),
        help="Working directory of the contract deployer (default: contracts).",
    )
    parser.add_argument(
        "--contract-deployer",
        default=get_env("CONTRACT_DEPLOYER", DEFAULT_CONTRACT_DEPLOYER),
        help=f"Command that deploys the contract (default: '{DEFAULT_CONTRACT_DEPLOYER}').",
    )
    parser.add_argument(
        "--contract-result-file",
        type=Path,
        default=None,
        help="File the contract deployer writes its JSON result to, instead of printing it.",
    )
    parser.add_argument(
        "--readiness-timeout",
        type=float,
        default=DEFAULT_READINESS_TIMEOUT,
        help="Seconds to wait for the blockchain node to start mining (default: 180).",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for missing inputs instead of failing.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=get_env("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DeployConfig:
    return DeployConfig(
        subscription_id=args.subscription_id,
        resource_group=args.resource_group,
        deployment_name=args.deployment_name,
        location=args.location,
        consortium_template=args.consortium_template,
        consortium_parameters=args.consortium_parameters,
        supply_chain_template=args.supply_chain_template,
        supply_chain_parameters=args.supply_chain_parameters,
        slot=args.slot,
        api_app_name=args.api_app_name,
        web_app_name=args.web_app_name,
        storage_account=args.storage_account,
        contract_dir=args.contract_dir,
        contract_deployer=shlex.split(args.contract_deployer),
        contract_result_file=args.contract_result_file,
        readiness_timeout=args.readiness_timeout,
        interactive=args.interactive,
    )


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_arguments(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    try:
        config = build_config(args)
        clients = authenticate(config.subscription_id)
        report = run_deployment(config, clients)
    except (DeployError, AzureError, OSError, ValueError) as exc:
        logger.error("Deployment aborted: %s", exc)
        return EXIT_FAILED

    print(json.dumps(report.outputs, indent=2))

    if report.partial:
        failed = [step.name for step in report.steps if step.status == FAILED]
        logger.warning("Deployment completed with failures in: %s", ", ".join(failed))
        return EXIT_PARTIAL
    logger.info("Deployment completed successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
