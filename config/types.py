from typing import Optional
from pydantic import BaseModel


class AzureParameters(BaseModel):
    """Model representing the Azure connection parameters"""

    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    storage_account_url: Optional[str] = None
    storage_connection_string: Optional[str] = None
    log_analytics_workspace_id: Optional[str] = None
    log_analytics_endpoint: Optional[str] = None

    def has_service_principal(self) -> bool:
        """Whether all service principal credentials are present"""
        return bool(self.tenant_id and self.client_id and self.client_secret)
