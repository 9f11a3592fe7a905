"""Blob storage for consultation photos."""

from .azure_blob import AzureBlobPhotoStore, photo_blob_name

__all__ = ["AzureBlobPhotoStore", "photo_blob_name"]
