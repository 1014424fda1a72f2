import json
import logging
from pathlib import Path
from typing import Any, Dict

from azure.core.exceptions import HttpResponseError
from azure.mgmt.resource.resources.models import DeploymentMode

from .errors import TemplateDeploymentError

logger = logging.getLogger(__name__)


def load_json(file_path: Path) -> Dict[str, Any]:
    with file_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_parameters(file_path: Path) -> Dict[str, Dict[str, Any]]:
    raw = load_json(file_path)
    # Accept both a full parameter file and a bare { name: value } mapping
    parameters_raw = raw.get("parameters", raw)

    # Convert parameters into ARM expected shape { name: { value } }
    return {
        k: ({"value": v["value"]} if isinstance(v, dict) and "value" in v else {"value": v})
        for k, v in parameters_raw.items()
    }


def flatten_outputs(outputs: Dict[str, Any] | None) -> Dict[str, Any]:
    resolved: Dict[str, Any] = {}
    for key, value in (outputs or {}).items():
        if isinstance(value, dict) and "value" in value:
            resolved[key] = value["value"]
        else:
            resolved[key] = value
    return resolved


def deploy_template(
    resource_client: Any,
    resource_group: str,
    deployment_name: str,
    template_path: Path,
    parameters_path: Path | None = None,
) -> Dict[str, Any]:
    """Deploy a template into the resource group and wait for it to finish.

    The parameter file is used only when it exists; otherwise the template
    defaults apply. Returns the deployment outputs as ``{name: value}``.
    """
    if not template_path.exists():
        raise TemplateDeploymentError(deployment_name, f"Template not found at {template_path}")

    try:
        template = load_json(template_path)
        properties: Dict[str, Any] = {
            "mode": DeploymentMode.incremental,
            "template": template,
        }

        if parameters_path is not None and parameters_path.exists():
            logger.info("Deploying '%s' with parameter file %s", deployment_name, parameters_path)
            properties["parameters"] = load_parameters(parameters_path)
        else:
            logger.info("Deploying '%s' with template defaults", deployment_name)
    except (OSError, ValueError, AttributeError) as exc:
        raise TemplateDeploymentError(deployment_name, f"Could not read template files: {exc}") from exc

    try:
        deployment = resource_client.deployments.begin_create_or_update(
            resource_group,
            deployment_name,
            {"properties": properties},
        ).result()
    except HttpResponseError as exc:
        raise TemplateDeploymentError(deployment_name, exc.message or str(exc)) from exc

    outputs = flatten_outputs(deployment.properties.outputs)
    logger.info("Deployment '%s' finished with outputs: %s", deployment_name, ", ".join(sorted(outputs)) or "(none)")
    return outputs
