"""
Adapters package - External service connections.
HTTP clients for the chat completion API and the hosted object storage, and
text recognition for lab report images.
"""

from adapters.llm_adapter import LLMClient, get_llm_client
from adapters.ocr_adapter import OCRReader, get_ocr_reader
from adapters.storage_adapter import StorageClient, get_storage_client

__all__ = [
    "LLMClient",
    "get_llm_client",
    "OCRReader",
    "get_ocr_reader",
    "StorageClient",
    "get_storage_client",
]
