"""Storage account encryption status tool."""

import logging
from typing import Dict, Any, Optional

from azure_tools.clients import AzureClients
from azure_tools.constants import Ecosystem
from azure_tools.interfaces import AzureToolBase
from azure_tools.plugin import register_tool

ENCRYPTION_ON = "Encryption BLOB: Turned On"
ENCRYPTION_OFF = "Encryption BLOB: Turned Off"


def is_blob_encryption_enabled(account) -> bool:
    """Read encryption.services.blob.enabled; any missing level counts as disabled."""
    encryption = getattr(account, "encryption", None)
    services = getattr(encryption, "services", None)
    blob = getattr(services, "blob", None)
    return bool(getattr(blob, "enabled", None) or False)


def describe_blob_encryption(account) -> str:
    return ENCRYPTION_ON if is_blob_encryption_enabled(account) else ENCRYPTION_OFF


@register_tool(ecosystem=Ecosystem.MICROSOFT)
class StorageEncryptionTool(AzureToolBase):
    """Reports whether the Blob service of a storage account is encrypted.

    The caller needs read access to the storage account through Azure
    Resource Manager.
    """

    def __init__(self, azure_clients: Optional[AzureClients] = None):
        super().__init__(azure_clients)
        self.logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "check_storage_encryption"

    @property
    def description(self) -> str:
        return "Checks if Storage Account has encryption enabled"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "subscription_id": {
                    "type": "string",
                    "description": "The subscription ID that contains the storage account",
                },
                "resource_group": {
                    "type": "string",
                    "description": "The resource group that contains the storage account",
                },
                "storage_account_name": {
                    "type": "string",
                    "description": "The name of the storage account to check",
                },
            },
            "required": ["subscription_id", "resource_group", "storage_account_name"],
        }

    async def check_storage_encryption(
        self, subscription_id: str, resource_group: str, storage_account_name: str
    ) -> str:
        """Look up the storage account and describe its blob encryption state."""
        async with self.clients.storage_management_client(subscription_id) as client:
            account = await client.storage_accounts.get_properties(
                resource_group, storage_account_name
            )
        status = describe_blob_encryption(account)
        self.logger.info(
            f"{subscription_id}/{resource_group}/{storage_account_name}: {status}"
        )
        return status

    async def execute_tool(self, arguments: Dict[str, Any]) -> str:
        """Execute the tool with the provided arguments."""
        return await self.check_storage_encryption(
            subscription_id=self.require_argument(arguments, "subscription_id", "Subscription ID"),
            resource_group=self.require_argument(arguments, "resource_group", "Resource group"),
            storage_account_name=self.require_argument(
                arguments, "storage_account_name", "Storage account name"
            ),
        )
