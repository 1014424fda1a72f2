import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .errors import ContractDeploymentError

logger = logging.getLogger(__name__)

CONTRACT_NAME = "SupplyChain"
RESULT_FILE_ENV = "CONTRACT_RESULT_FILE"


@dataclass
class ContractResult:
    account_address: str | None = None
    contract_address: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def build_contract_command(
    deployer: Sequence[str],
    rpc_url: str,
    password: str,
    contract_name: str = CONTRACT_NAME,
) -> List[str]:
    return [*deployer, contract_name, rpc_url, password]


def format_command(command: Sequence[str], secrets: Sequence[str] = ()) -> str:
    return " ".join("***" if arg in secrets else arg for arg in command)


def run_contract_deployer(
    command: List[str],
    cwd: Path,
    result_file: Path | None = None,
    secrets: Sequence[str] = (),
) -> str:
    """Run the external deployer and return its combined stdout/stderr text."""
    env = dict(os.environ)
    if result_file is not None:
        # A file left by an earlier run must not be read as this run's result
        result_file.unlink(missing_ok=True)
        env[RESULT_FILE_ENV] = str(result_file)

    logger.info("Running contract deployer: %s", format_command(command, secrets))
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            env=env,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ContractDeploymentError(
            f"Command '{command[0]}' could not be executed ({exc.strerror or 'file not found'}). "
            "Ensure it is installed and available on PATH."
        ) from exc

    output = completed.stdout or ""
    output_for_log = output
    for secret in secrets:
        if secret:
            output_for_log = output_for_log.replace(secret, "***")
    logger.debug("Contract deployer exited with %s:\n%s", completed.returncode, output_for_log)
    return output


def _result_from_payload(payload: Any) -> ContractResult:
    if not isinstance(payload, dict):
        return ContractResult(error=f"Deployer output is not a JSON object: {payload!r}")
    if payload.get("error"):
        return ContractResult(error=str(payload["error"]))
    missing = [key for key in ("accountAddress", "contractAddress") if not payload.get(key)]
    if missing:
        return ContractResult(error=f"Deployer output is missing {', '.join(missing)}")
    return ContractResult(
        account_address=payload.get("accountAddress"),
        contract_address=payload.get("contractAddress"),
    )


def parse_contract_output(text: str) -> ContractResult:
    """Read the JSON object the deployer prints at the end of its output."""
    start = text.rfind("{")
    if start == -1:
        return ContractResult(error="No JSON object found in contract deployer output")

    try:
        payload = json.loads(text[start:])
    except json.JSONDecodeError as exc:
        return ContractResult(error=f"Could not parse contract deployer output: {exc}")
    return _result_from_payload(payload)


def read_result_file(result_file: Path) -> ContractResult | None:
    if not result_file.exists() or result_file.stat().st_size == 0:
        return None
    with result_file.open("r", encoding="utf-8") as f:
        try:
            payload: Dict[str, Any] = json.load(f)
        except json.JSONDecodeError as exc:
            return ContractResult(error=f"Could not parse {result_file}: {exc}")
    return _result_from_payload(payload)


def deploy_contract(
    deployer: Sequence[str],
    cwd: Path,
    rpc_url: str,
    password: str,
    result_file: Path | None = None,
) -> ContractResult:
    command = build_contract_command(deployer, rpc_url, password)
    output = run_contract_deployer(command, cwd, result_file=result_file, secrets=[password])

    result = read_result_file(result_file) if result_file is not None else None
    if result is None:
        result = parse_contract_output(output)

    if result.succeeded:
        logger.info(
            "Contract deployed at %s from account %s", result.contract_address, result.account_address
        )
    else:
        logger.error("Contract deployment failed: %s", result.error)
    return result
