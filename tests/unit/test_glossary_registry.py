"""
Unit tests for the glossary registry client.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from adapters.glossary_registry import GlossaryRegistry, is_valid_glossary_name, to_glossary_info
from conftest import PARENT, AsyncPager, sdk_glossary
from core.errors import (
    DeletionError,
    FileNotFound,
    ProviderError,
    RegistrationError,
    StorageError,
    UnsupportedFormat,
)


def completed_operation(error=None):
    operation = MagicMock()
    operation.result = AsyncMock(side_effect=error) if error else AsyncMock(return_value=None)
    return operation


class TestGlossaryRegistry:
    """Test Storage and Translation calls made by the registry."""

    @pytest.fixture
    def storage_client(self):
        return MagicMock()

    @pytest.fixture
    def translation_client(self):
        client = MagicMock()
        client.create_glossary = AsyncMock(return_value=completed_operation())
        client.delete_glossary = AsyncMock(return_value=completed_operation())
        client.list_glossaries = AsyncMock(return_value=AsyncPager([]))
        return client

    @pytest.fixture
    def registry(self, credential, storage_client, translation_client):
        return GlossaryRegistry(credential, storage_client, translation_client)

    @pytest.fixture
    def glossary_csv(self, tmp_path):
        path = tmp_path / "terms.csv"
        path.write_text("hello,привет\n", encoding="utf-8")
        return path

    def test_parent_is_location_scoped(self, registry):
        assert registry.parent == PARENT
        assert registry.glossary_path("tech") == f"{PARENT}/glossaries/tech"

    @pytest.mark.asyncio
    async def test_list_buckets(self, registry, storage_client):
        storage_client.list_buckets.return_value = [SimpleNamespace(name="alpha"), SimpleNamespace(name="beta")]
        assert await registry.list_buckets() == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_list_buckets_failure(self, registry, storage_client):
        storage_client.list_buckets.side_effect = google_exceptions.Forbidden("storage.buckets.list denied")
        with pytest.raises(StorageError) as exc_info:
            await registry.list_buckets()
        assert exc_info.value.message == "Failed to list buckets: storage.buckets.list denied"

    @pytest.mark.asyncio
    async def test_upload_rejects_unsupported_extension_before_network(self, registry, storage_client, tmp_path):
        path = tmp_path / "terms.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(UnsupportedFormat):
            await registry.upload_file(path, "alpha")
        storage_client.bucket.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, registry, storage_client, tmp_path):
        with pytest.raises(FileNotFound):
            await registry.upload_file(tmp_path / "absent.csv", "alpha")
        storage_client.bucket.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_csv(self, registry, storage_client, glossary_csv):
        uri = await registry.upload_file(glossary_csv, "alpha")

        assert uri == "gs://alpha/glossaries/terms.csv"
        storage_client.bucket.assert_called_once_with("alpha")
        storage_client.bucket.return_value.blob.assert_called_once_with("glossaries/terms.csv")
        blob = storage_client.bucket.return_value.blob.return_value
        blob.upload_from_filename.assert_called_once_with(str(glossary_csv), content_type="text/csv")

    @pytest.mark.asyncio
    async def test_upload_tsv_extension_is_case_insensitive(self, registry, storage_client, tmp_path):
        path = tmp_path / "TERMS.TSV"
        path.write_text("a\tb\n", encoding="utf-8")
        assert await registry.upload_file(path, "alpha") == "gs://alpha/glossaries/TERMS.TSV"
        blob = storage_client.bucket.return_value.blob.return_value
        assert blob.upload_from_filename.call_args.kwargs["content_type"] == "text/tab-separated-values"

    @pytest.mark.asyncio
    async def test_upload_failure(self, registry, storage_client, glossary_csv):
        blob = storage_client.bucket.return_value.blob.return_value
        blob.upload_from_filename.side_effect = google_exceptions.NotFound("bucket alpha does not exist")
        with pytest.raises(StorageError) as exc_info:
            await registry.upload_file(glossary_csv, "alpha")
        assert "bucket alpha does not exist" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_upload_invalid_bucket_name(self, registry, storage_client, glossary_csv):
        """The SDK validates bucket names locally and raises ValueError."""
        storage_client.bucket.side_effect = ValueError("Bucket names must start and end with a number or letter.")
        with pytest.raises(StorageError) as exc_info:
            await registry.upload_file(glossary_csv, "bad-bucket-")
        assert exc_info.value.message == (
            "Failed to upload file to Google Storage: Bucket names must start and end with a number or letter."
        )

    @pytest.mark.asyncio
    async def test_register_waits_for_operation(self, registry, translation_client):
        path = await registry.register("tech", "en", "ru", "gs://alpha/glossaries/terms.csv")

        assert path == f"{PARENT}/glossaries/tech"
        kwargs = translation_client.create_glossary.call_args.kwargs
        assert kwargs["parent"] == PARENT
        glossary = kwargs["glossary"]
        assert glossary.name == path
        assert glossary.language_pair.source_language_code == "en"
        assert glossary.language_pair.target_language_code == "ru"
        assert glossary.input_config.gcs_source.input_uri == "gs://alpha/glossaries/terms.csv"
        translation_client.create_glossary.return_value.result.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_remote_error(self, registry, translation_client):
        translation_client.create_glossary.return_value = completed_operation(
            google_exceptions.InvalidArgument("Glossary file has no entries")
        )
        with pytest.raises(RegistrationError) as exc_info:
            await registry.register("tech", "en", "ru", "gs://alpha/glossaries/terms.csv")
        assert exc_info.value.message == "Failed to create glossary: Glossary file has no entries"

    @pytest.mark.asyncio
    async def test_register_error_payload_with_details(self, registry, translation_client):
        class OperationError(Exception):
            def __init__(self):
                super().__init__()
                self.details = "Glossary already exists"

        translation_client.create_glossary.side_effect = OperationError()
        with pytest.raises(RegistrationError) as exc_info:
            await registry.register("tech", "en", "ru", "gs://alpha/glossaries/terms.csv")
        assert exc_info.value.message.endswith("Glossary already exists")

    @pytest.mark.asyncio
    async def test_list_projects_glossaries(self, registry, translation_client):
        translation_client.list_glossaries.return_value = AsyncPager(
            [
                sdk_glossary("tech", entries=12, display_name="Tech terms"),
                SimpleNamespace(name=f"{PARENT}/glossaries/bare"),
            ]
        )

        glossaries = await registry.list()

        translation_client.list_glossaries.assert_awaited_once_with(parent=PARENT)
        assert [g.display_name for g in glossaries] == ["Tech terms", "bare"]
        assert glossaries[0].entry_count == 12
        assert (glossaries[1].source_language_code, glossaries[1].target_language_code) == ("", "")
        assert glossaries[1].entry_count == 0

    @pytest.mark.asyncio
    async def test_list_failure(self, registry, translation_client):
        translation_client.list_glossaries.side_effect = google_exceptions.PermissionDenied("denied")
        with pytest.raises(ProviderError):
            await registry.list()

    @pytest.mark.asyncio
    async def test_delete_waits_for_operation(self, registry, translation_client):
        name = f"{PARENT}/glossaries/tech"
        await registry.delete(name)
        translation_client.delete_glossary.assert_awaited_once_with(name=name)
        translation_client.delete_glossary.return_value.result.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_failure(self, registry, translation_client):
        translation_client.delete_glossary.side_effect = google_exceptions.NotFound("no such glossary")
        with pytest.raises(DeletionError) as exc_info:
            await registry.delete(f"{PARENT}/glossaries/tech")
        assert "no such glossary" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_upload_and_create(self, registry, translation_client, glossary_csv):
        path = await registry.upload_and_create(glossary_csv, "alpha", "tech", "en", "ru")
        assert path == f"{PARENT}/glossaries/tech"
        glossary = translation_client.create_glossary.call_args.kwargs["glossary"]
        assert glossary.input_config.gcs_source.input_uri == "gs://alpha/glossaries/terms.csv"

    @pytest.mark.asyncio
    async def test_upload_and_create_leaves_upload_on_registration_failure(
        self, registry, storage_client, translation_client, glossary_csv
    ):
        """No compensating delete: the uploaded object stays in the bucket."""
        translation_client.create_glossary.side_effect = google_exceptions.InternalServerError("boom")
        with pytest.raises(RegistrationError):
            await registry.upload_and_create(glossary_csv, "alpha", "tech", "en", "ru")

        blob = storage_client.bucket.return_value.blob.return_value
        blob.upload_from_filename.assert_called_once()
        blob.delete.assert_not_called()


class TestGlossaryHelpers:
    """Test module-level helpers."""

    @pytest.mark.parametrize("name, valid", [("tech", True), ("Tech_v2-final", True), ("", False), ("with space", False), ("a/b", False)])
    def test_glossary_name(self, name, valid):
        assert is_valid_glossary_name(name) is valid

    def test_to_glossary_info_derives_display_name(self):
        info = to_glossary_info(SimpleNamespace(name=f"{PARENT}/glossaries/legal", display_name=None))
        assert info.display_name == "legal"
        assert info.name == f"{PARENT}/glossaries/legal"
