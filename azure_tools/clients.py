"""
Shared Azure SDK clients.

One credential and one client per data-plane service are built lazily and
reused by every tool invocation. The management client is scoped to a
subscription, so it is handed out per call.
"""
import logging
from typing import Optional

from azure.identity.aio import ClientSecretCredential, DefaultAzureCredential
from azure.monitor.query.aio import LogsQueryClient
from azure.storage.blob.aio import BlobServiceClient
from azure.mgmt.storage.aio import StorageManagementClient

from config import env
from config.types import AzureParameters

logger = logging.getLogger(__name__)


class AzureClients:
    """Holder for the credential and SDK clients used by the tools."""

    def __init__(self, parameters: Optional[AzureParameters] = None):
        self.parameters = parameters or env.get_azure_parameters()
        self._credential = None
        self._logs_client: Optional[LogsQueryClient] = None
        self._blob_service_client: Optional[BlobServiceClient] = None

    def get_credential(self):
        """
        Return the async token credential.

        A service principal is used when tenant, client id and secret are all
        configured; otherwise DefaultAzureCredential walks its usual chain
        (environment, managed identity, Azure CLI, ...).
        """
        if self._credential is not None:
            return self._credential

        params = self.parameters
        if params.has_service_principal():
            logger.info(
                f"Using service principal credential (client id {params.client_id})"
            )
            self._credential = ClientSecretCredential(
                tenant_id=params.tenant_id,
                client_id=params.client_id,
                client_secret=params.client_secret,
            )
        else:
            logger.info("Using DefaultAzureCredential")
            self._credential = DefaultAzureCredential()
        return self._credential

    def get_logs_client(self) -> LogsQueryClient:
        """Return the Log Analytics query client."""
        if self._logs_client is None:
            kwargs = {}
            if self.parameters.log_analytics_endpoint:
                kwargs["endpoint"] = self.parameters.log_analytics_endpoint
            self._logs_client = LogsQueryClient(self.get_credential(), **kwargs)
        return self._logs_client

    def get_blob_service_client(self) -> BlobServiceClient:
        """
        Return the blob service client.

        Raises:
            ValueError: If neither a connection string nor an account URL is configured
        """
        if self._blob_service_client is not None:
            return self._blob_service_client

        params = self.parameters
        if params.storage_connection_string:
            logger.info("Creating blob service client from connection string")
            self._blob_service_client = BlobServiceClient.from_connection_string(
                params.storage_connection_string
            )
        elif params.storage_account_url:
            logger.info(f"Creating blob service client for {params.storage_account_url}")
            self._blob_service_client = BlobServiceClient(
                account_url=params.storage_account_url,
                credential=self.get_credential(),
            )
        else:
            raise ValueError(
                "Blob storage is not configured. "
                "Set AZURE_STORAGE_ACCOUNT_URL or AZURE_STORAGE_CONNECTION_STRING in your .env file."
            )
        return self._blob_service_client

    def storage_management_client(self, subscription_id: str) -> StorageManagementClient:
        """Return a new management client for the subscription; use it as an async context manager."""
        return StorageManagementClient(self.get_credential(), subscription_id)

    def get_default_workspace_id(self) -> Optional[str]:
        return self.parameters.log_analytics_workspace_id

    async def close(self) -> None:
        """Close every client that was opened."""
        if self._logs_client is not None:
            await self._logs_client.close()
            self._logs_client = None
        if self._blob_service_client is not None:
            await self._blob_service_client.close()
            self._blob_service_client = None
        if self._credential is not None:
            await self._credential.close()
            self._credential = None


_azure_clients: Optional[AzureClients] = None


def get_azure_clients() -> AzureClients:
    """Return the process-wide clients, creating them on first use."""
    global _azure_clients
    if _azure_clients is None:
        _azure_clients = AzureClients()
    return _azure_clients
