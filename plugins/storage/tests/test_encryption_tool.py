"""
Tests for the StorageEncryptionTool class in plugins/storage/encryption_tool.py.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, AsyncMock

from azure.core.exceptions import ResourceNotFoundError

from ..encryption_tool import (
    StorageEncryptionTool,
    describe_blob_encryption,
    ENCRYPTION_ON,
    ENCRYPTION_OFF,
)


def make_account(enabled):
    blob = SimpleNamespace(enabled=enabled)
    return SimpleNamespace(encryption=SimpleNamespace(services=SimpleNamespace(blob=blob)))


@pytest.mark.parametrize(
    "account, expected",
    [
        (make_account(True), ENCRYPTION_ON),
        (make_account(False), ENCRYPTION_OFF),
        (make_account(None), ENCRYPTION_OFF),
        (SimpleNamespace(encryption=SimpleNamespace(services=SimpleNamespace(blob=None))), ENCRYPTION_OFF),
        (SimpleNamespace(encryption=SimpleNamespace(services=None)), ENCRYPTION_OFF),
        (SimpleNamespace(encryption=None), ENCRYPTION_OFF),
    ],
)
def test_describe_blob_encryption(account, expected):
    assert describe_blob_encryption(account) == expected


@pytest.fixture
def mock_management_client():
    client = MagicMock()
    client.storage_accounts.get_properties = AsyncMock(return_value=make_account(True))
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


@pytest.fixture
def tool(mock_management_client):
    clients = MagicMock()
    clients.storage_management_client.return_value = mock_management_client
    return StorageEncryptionTool(azure_clients=clients)


@pytest.mark.asyncio
async def test_check_storage_encryption(tool, mock_management_client):
    result = await tool.check_storage_encryption("sub-1", "rg-1", "account1")

    assert result == "Encryption BLOB: Turned On"
    tool.clients.storage_management_client.assert_called_once_with("sub-1")
    mock_management_client.storage_accounts.get_properties.assert_awaited_once_with(
        "rg-1", "account1"
    )
    mock_management_client.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_storage_encryption_error_propagates(tool, mock_management_client):
    mock_management_client.storage_accounts.get_properties.side_effect = ResourceNotFoundError("not found")

    with pytest.raises(ResourceNotFoundError):
        await tool.check_storage_encryption("sub-1", "rg-1", "missing")


@pytest.mark.asyncio
async def test_execute_tool_requires_arguments(tool):
    with pytest.raises(ValueError, match="Resource group cannot be null or empty"):
        await tool.execute_tool({"subscription_id": "sub-1", "storage_account_name": "a"})

    tool.clients.storage_management_client.assert_not_called()
