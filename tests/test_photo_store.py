"""Tests for the Azure Blob photo store."""

from unittest.mock import MagicMock, patch

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from consultations.storage.azure_blob import AzureBlobPhotoStore, photo_blob_name

ACCOUNT_URL = "https://acct.blob.core.windows.net/photos"


def make_container():
    """Mock ContainerClient whose blob clients report a URL for their name."""
    container = MagicMock()
    container.blobs = []

    def get_blob_client(name):
        blob = MagicMock()
        blob.url = f"{ACCOUNT_URL}/{name}"
        container.blobs.append((name, blob))
        return blob

    container.get_blob_client.side_effect = get_blob_client
    return container


class TestBlobName:
    def test_format(self):
        assert photo_blob_name("oak.jpg", now_ms=1773583200000) == "photo-1773583200000-oak.jpg"

    def test_uses_current_time(self):
        with patch("consultations.storage.azure_blob.time.time", return_value=1700000000.5):
            assert photo_blob_name("a.png") == "photo-1700000000500-a.png"


class TestAzureBlobPhotoStore:
    def test_requires_connection_string(self):
        with pytest.raises(ValueError):
            AzureBlobPhotoStore("")

    def test_builds_container_from_connection_string(self):
        with patch("consultations.storage.azure_blob.BlobServiceClient") as service_cls:
            AzureBlobPhotoStore("UseDevelopmentStorage=true", container_name="photos")
        service_cls.from_connection_string.assert_called_once_with("UseDevelopmentStorage=true")
        service_cls.from_connection_string.return_value.get_container_client.assert_called_once_with(
            "photos"
        )

    async def test_uploads_in_order(self):
        container = make_container()
        store = AzureBlobPhotoStore(container_client=container)

        urls = await store.upload_photos(
            [("one.jpg", b"1"), ("two.jpg", b"22"), ("three.jpg", b"333")]
        )

        assert len(urls) == 3
        for url, suffix in zip(urls, ["-one.jpg", "-two.jpg", "-three.jpg"]):
            assert url.startswith(f"{ACCOUNT_URL}/photo-")
            assert url.endswith(suffix)
        for (name, blob), data in zip(container.blobs, [b"1", b"22", b"333"]):
            blob.upload_blob.assert_called_once_with(data)

    async def test_no_files(self):
        store = AzureBlobPhotoStore(container_client=make_container())
        assert await store.upload_photos([]) == []

    async def test_first_failure_aborts(self):
        container = make_container()
        original = container.get_blob_client.side_effect

        def failing_second(name):
            blob = original(name)
            if name.endswith("-bad.jpg"):
                blob.upload_blob.side_effect = RuntimeError("network down")
            return blob

        container.get_blob_client.side_effect = failing_second
        store = AzureBlobPhotoStore(container_client=container)

        with pytest.raises(RuntimeError):
            await store.upload_photos([("ok.jpg", b"1"), ("bad.jpg", b"2"), ("never.jpg", b"3")])
        assert [name.split("-", 2)[2] for name, _ in container.blobs] == ["ok.jpg", "bad.jpg"]
