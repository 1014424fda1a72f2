import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from supplychain_deploy.clients import AzureClients


def write_parameters(path: Path, values: dict) -> Path:
    document = {
        "$schema": "https://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json#",
        "contentVersion": "1.0.0.0",
        "parameters": {name: {"value": value} for name, value in values.items()},
    }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def deployment_result(outputs: dict) -> MagicMock:
    """Poller whose result() carries ARM-style outputs."""
    poller = MagicMock()
    poller.result.return_value.properties.outputs = {
        name: {"type": "String", "value": value} for name, value in outputs.items()
    }
    return poller


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(
        json.dumps(
            {
                "$schema": "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#",
                "contentVersion": "1.0.0.0",
                "resources": [],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def consortium_parameters(tmp_path):
    return write_parameters(
        tmp_path / "etheriumConsertiumParameters.json",
        {
            "namePrefix": "scdemo",
            "ethereumAccountPsswd": "s3cret-pass",
            "ethereumAccountPassphrase": "passphrase",
            "numMiningNodesRegion1": 2,
        },
    )


@pytest.fixture
def supply_chain_parameters(tmp_path):
    return write_parameters(
        tmp_path / "supplyChainParameters.json",
        {
            "namePrefix": "",
            "ethereumAccountPsswd": "",
            "vnetName": "",
            "appServiceSku": "S1",
            "storageAccountType": "Standard_LRS",
        },
    )


@pytest.fixture
def mock_clients():
    return AzureClients(
        subscription_id="00000000-0000-0000-0000-000000000000",
        resource=MagicMock(),
        web=MagicMock(),
        storage=MagicMock(),
        network=MagicMock(),
    )
