"""Tests for the shared Azure SDK clients."""

import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from azure_tools.clients import AzureClients
from config.types import AzureParameters


@pytest.fixture
def service_principal():
    return AzureParameters(
        tenant_id="tenant",
        client_id="client",
        client_secret="secret",
        storage_account_url="https://account.blob.core.windows.net",
        log_analytics_workspace_id="ws-default",
    )


@patch("azure_tools.clients.ClientSecretCredential")
@patch("azure_tools.clients.DefaultAzureCredential")
def test_service_principal_credential(mock_default, mock_secret, service_principal):
    clients = AzureClients(service_principal)

    credential = clients.get_credential()

    assert credential is mock_secret.return_value
    mock_secret.assert_called_once_with(
        tenant_id="tenant", client_id="client", client_secret="secret"
    )
    mock_default.assert_not_called()
    assert clients.get_credential() is credential


@patch("azure_tools.clients.ClientSecretCredential")
@patch("azure_tools.clients.DefaultAzureCredential")
def test_default_credential_without_secret(mock_default, mock_secret):
    clients = AzureClients(AzureParameters(tenant_id="tenant", client_id="client"))

    assert clients.get_credential() is mock_default.return_value
    mock_secret.assert_not_called()


@patch("azure_tools.clients.DefaultAzureCredential")
@patch("azure_tools.clients.LogsQueryClient")
def test_logs_client_endpoint(mock_logs, mock_default):
    clients = AzureClients(AzureParameters(log_analytics_endpoint="https://api.loganalytics.us/v1"))

    assert clients.get_logs_client() is mock_logs.return_value
    assert clients.get_logs_client() is mock_logs.return_value
    mock_logs.assert_called_once_with(
        mock_default.return_value, endpoint="https://api.loganalytics.us/v1"
    )


@patch("azure_tools.clients.BlobServiceClient")
def test_blob_client_prefers_connection_string(mock_blob):
    clients = AzureClients(
        AzureParameters(
            storage_connection_string="UseDevelopmentStorage=true",
            storage_account_url="https://ignored",
        )
    )

    assert clients.get_blob_service_client() is mock_blob.from_connection_string.return_value
    mock_blob.from_connection_string.assert_called_once_with("UseDevelopmentStorage=true")
    mock_blob.assert_not_called()


@patch("azure_tools.clients.ClientSecretCredential")
@patch("azure_tools.clients.BlobServiceClient")
def test_blob_client_from_account_url(mock_blob, mock_secret, service_principal):
    clients = AzureClients(service_principal)

    clients.get_blob_service_client()

    mock_blob.assert_called_once_with(
        account_url="https://account.blob.core.windows.net",
        credential=mock_secret.return_value,
    )


def test_blob_client_not_configured():
    with pytest.raises(ValueError, match="Blob storage is not configured"):
        AzureClients(AzureParameters()).get_blob_service_client()


@patch("azure_tools.clients.ClientSecretCredential")
@patch("azure_tools.clients.StorageManagementClient")
def test_management_client_per_subscription(mock_mgmt, mock_secret, service_principal):
    clients = AzureClients(service_principal)

    clients.storage_management_client("sub-1")

    mock_mgmt.assert_called_once_with(mock_secret.return_value, "sub-1")
    assert clients.get_default_workspace_id() == "ws-default"


@pytest.mark.asyncio
async def test_close_closes_opened_clients():
    clients = AzureClients(AzureParameters())
    logs_client = MagicMock(close=AsyncMock())
    credential = MagicMock(close=AsyncMock())
    clients._logs_client = logs_client
    clients._credential = credential

    await clients.close()

    logs_client.close.assert_awaited_once()
    credential.close.assert_awaited_once()
    assert clients._logs_client is None
    assert clients._credential is None
