"""Azure Blob Storage text download tool."""

import logging
from typing import Dict, Any, Optional

from azure_tools.clients import AzureClients
from azure_tools.constants import Ecosystem
from azure_tools.interfaces import AzureToolBase
from azure_tools.plugin import register_tool
from plugins.storage.text_decoding import decode_blob_text

DEFAULT_ENCODING = "utf8"


@register_tool(ecosystem=Ecosystem.MICROSOFT)
class BlobTextTool(AzureToolBase):
    """Downloads a blob from the configured storage account and returns it as text."""

    def __init__(self, azure_clients: Optional[AzureClients] = None):
        super().__init__(azure_clients)
        self.logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "fetch_blob_text"

    @property
    def description(self) -> str:
        return "Downloads the content of a text file from Azure Blob Storage and returns it as a string."

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "container_name": {
                    "type": "string",
                    "description": "The name of the container that holds the blob",
                },
                "blob_name": {
                    "type": "string",
                    "description": "The name of the blob to download",
                },
                "encoding": {
                    "type": "string",
                    "description": "Text encoding: 'utf8' (default), 'utf-8' or 'ascii'. Anything else falls back to UTF-8.",
                    "default": DEFAULT_ENCODING,
                    "nullable": True,
                },
            },
            "required": ["container_name", "blob_name"],
        }

    async def fetch_blob_text(
        self,
        container_name: str,
        blob_name: str,
        encoding: Optional[str] = DEFAULT_ENCODING,
    ) -> str:
        """Download a blob and decode its content.

        Raises:
            ValueError: If the container or blob name is empty
        """
        if not container_name:
            raise ValueError("Container name cannot be null or empty.")
        if not blob_name:
            raise ValueError("Blob name cannot be null or empty.")

        blob = self.clients.get_blob_service_client().get_blob_client(
            container=container_name, blob=blob_name
        )
        downloader = await blob.download_blob()
        data = await downloader.readall()
        self.logger.info(
            f"Downloaded {len(data)} bytes from {container_name}/{blob_name}"
        )
        return decode_blob_text(data, encoding)

    async def execute_tool(self, arguments: Dict[str, Any]) -> str:
        """Execute the tool with the provided arguments."""
        return await self.fetch_blob_text(
            container_name=self.require_argument(arguments, "container_name", "Container name"),
            blob_name=self.require_argument(arguments, "blob_name", "Blob name"),
            encoding=arguments.get("encoding", DEFAULT_ENCODING),
        )
