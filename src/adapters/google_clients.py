"""Builders for the Google Cloud SDK clients.

The registry and the translator receive ready clients built here from the
loaded service-account credential.
"""

from __future__ import annotations

from google.cloud import storage, translate_v3
from google.oauth2 import service_account

from core.domain.models import Credential

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def build_google_credentials(credential: Credential) -> service_account.Credentials:
    return service_account.Credentials.from_service_account_info(
        credential.raw,
        scopes=[CLOUD_PLATFORM_SCOPE],
    )


def build_storage_client(credential: Credential) -> storage.Client:
    """Cloud Storage client (blocking SDK; callers run it off the event loop)."""

    return storage.Client(
        project=credential.project_id,
        credentials=build_google_credentials(credential),
    )


def build_translation_client(credential: Credential) -> translate_v3.TranslationServiceAsyncClient:
    """Translation v3 async client.

    Must be created inside a running event loop (grpc.aio channel).
    """

    return translate_v3.TranslationServiceAsyncClient(
        credentials=build_google_credentials(credential),
    )
