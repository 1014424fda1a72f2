import json
import logging
from pathlib import Path
from typing import Any

from .templates import load_json

logger = logging.getLogger(__name__)

NAME_PREFIX = "namePrefix"
ACCOUNT_PASSWORD = "ethereumAccountPsswd"
VNET_NAME = "vnetName"

# Parameters carried over unchanged from the consortium parameter file.
COPIED_PARAMETERS = (NAME_PREFIX, ACCOUNT_PASSWORD)


def _unwrap(entry: Any) -> Any:
    if isinstance(entry, dict):
        return entry.get("value")
    return entry


def parameter_value(path: Path, name: str) -> Any:
    return _unwrap(load_json(path).get("parameters", {}).get(name))


def rewrite_parameters(source_path: Path, target_path: Path, vnet_name: str | None) -> dict:
    """Copy the shared consortium values into the supply-chain parameter file.

    The target file is overwritten in place. Fields missing from the source are
    written as null.
    """
    source = load_json(source_path)
    target = load_json(target_path)

    source_parameters = source.get("parameters", {})
    target_parameters = target.setdefault("parameters", {})

    updates = {name: _unwrap(source_parameters.get(name)) for name in COPIED_PARAMETERS}
    updates[VNET_NAME] = vnet_name

    for name, value in updates.items():
        if value is None:
            logger.warning("Parameter '%s' has no value; writing null to %s", name, target_path)
        entry = target_parameters.get(name)
        if isinstance(entry, dict):
            entry["value"] = value
        else:
            target_parameters[name] = {"value": value}

    with target_path.open("w", encoding="utf-8") as f:
        json.dump(target, f, indent=2)
        f.write("\n")

    logger.info("Updated %s in %s", ", ".join(updates), target_path)
    return target
