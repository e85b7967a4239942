"""Pytest bootstrap configuration.

Gateway settings are provided through the environment before any module
that instantiates them is imported.
"""
import os
from pathlib import Path

os.environ.setdefault("PALMPAY_APP_ID", "L240000000001")
os.environ.setdefault("PALMPAY_COUNTRY_CODE", "NG")

import pytest


FIXTURES = Path(__file__).parent / "payments" / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def palmpay_settings(fixtures_dir):
    from core.settings import PalmPaySettings

    return PalmPaySettings(
        app_id="L240000000001",
        country_code="NG",
        base_url="https://gateway.test",
        private_key_path=str(fixtures_dir / "app_private_key.pem"),
        public_key_path=str(fixtures_dir / "app_public_key.pem"),
    )


@pytest.fixture
def key_store(palmpay_settings):
    from infrastructure.external.payments.keys import KeyStore

    return KeyStore(palmpay_settings)


@pytest.fixture
def private_key(key_store):
    return key_store.load_private_key()


@pytest.fixture
def public_key(key_store):
    return key_store.load_public_key_for_upload()
