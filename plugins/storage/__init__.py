"""Azure Storage plugin.

Provides the fetch_blob_text and check_storage_encryption tools.
"""

from .text_decoding import EncodingSelector, decode_blob_text
from .blob_tool import BlobTextTool
from .encryption_tool import StorageEncryptionTool, describe_blob_encryption

__all__ = [
    "EncodingSelector",
    "decode_blob_text",
    "BlobTextTool",
    "StorageEncryptionTool",
    "describe_blob_encryption",
]
