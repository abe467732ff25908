"""Shared fixtures: store catalog documents and a recording event sink."""

import pytest

from store_app_importer.models.manifest import IconAsset


def catalog_document(
    package_identifier="Publisher.App",
    scopes=("system", "user"),
    versions=("1.0.0", "2.0.0"),
    support_url="support.example.com",
    privacy_url="https://example.com/privacy",
):
    """Manifest service response with every version sharing one installer list."""
    return {
        "Data": {
            "PackageIdentifier": package_identifier,
            "Versions": [
                {
                    "PackageVersion": version,
                    "DefaultLocale": {
                        "PackageName": f"App {version}",
                        "Publisher": "Publisher Inc.",
                        "ShortDescription": "An example application",
                        "PublisherSupportUrl": support_url,
                        "PrivacyUrl": privacy_url,
                    },
                    "Installers": [{"Scope": scope, "Architecture": "x64"} for scope in scopes],
                }
                for version in versions
            ],
        }
    }


class RecordingSink:
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)

    def kinds(self):
        return [e.kind for e in self.events]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def icon():
    return IconAsset(source_url="https://store-images.example.com/icon.png", content=b"\x89PNG-bytes")
