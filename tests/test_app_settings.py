"""Tests for app settings merging and slot updates."""

from unittest.mock import MagicMock

from supplychain_deploy.app_settings import (
    GAS,
    api_settings,
    merge_settings,
    patch_app_settings,
    web_settings,
)
from supplychain_deploy.contract import ContractResult


class TestMergeSettings:
    def test_prior_keys_survive_and_updates_win(self):
        current = {"WEBSITE_NODE_DEFAULT_VERSION": "8.11.1", "ContractAddress": "0xOLD"}
        updates = {"ContractAddress": "0xNEW", "Gas": GAS}

        merged = merge_settings(current, updates)

        assert merged == {"WEBSITE_NODE_DEFAULT_VERSION": "8.11.1", "ContractAddress": "0xNEW", "Gas": GAS}
        assert current["ContractAddress"] == "0xOLD"

    def test_empty_current(self):
        assert merge_settings(None, {"a": "1"}) == {"a": "1"}


class TestSettingBuilders:
    def test_api_settings_keys(self):
        contract = ContractResult(account_address="0xAA", contract_address="0xBB")

        settings = api_settings(contract, "pw", "http://node:8545", "DefaultEndpointsProtocol=https;...")

        assert settings == {
            "ContractAddress": "0xBB",
            "AccountAddress": "0xAA",
            "AccountPassword": "pw",
            "Gas": "4700000",
            "RpcEndpoint": "http://node:8545",
            "StorageConnectionString": "DefaultEndpointsProtocol=https;...",
        }

    def test_web_settings_keys(self):
        assert web_settings("https://api.azurewebsites.net", "http://admin") == {
            "ApiEndpoint": "https://api.azurewebsites.net",
            "BlockchainAdminSite": "http://admin",
        }


class TestPatchAppSettings:
    def test_reads_and_writes_same_slot(self):
        web = MagicMock()
        web.web_apps.list_application_settings_slot.return_value.properties = {
            "KEEP_ME": "yes",
            "RpcEndpoint": "http://old",
        }

        merged = patch_app_settings(web, "rg-supply", "scdemo-api", "staging", {"RpcEndpoint": "http://new"})

        web.web_apps.list_application_settings_slot.assert_called_once_with("rg-supply", "scdemo-api", "staging")
        web.web_apps.update_application_settings_slot.assert_called_once_with(
            "rg-supply",
            "scdemo-api",
            "staging",
            {"properties": {"KEEP_ME": "yes", "RpcEndpoint": "http://new"}},
        )
        assert merged == {"KEEP_ME": "yes", "RpcEndpoint": "http://new"}

    def test_slot_without_settings(self):
        web = MagicMock()
        web.web_apps.list_application_settings_slot.return_value.properties = None

        merged = patch_app_settings(web, "rg", "app", "staging", {"ApiEndpoint": "https://api"})

        assert merged == {"ApiEndpoint": "https://api"}
