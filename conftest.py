import pytest


@pytest.fixture(autouse=True)
def _registry_test_settings(settings):
    # Session auth over plain http in the test client
    settings.SECURE_SSL_REDIRECT = False
    settings.SESSION_COOKIE_SECURE = False
    settings.CSRF_COOKIE_SECURE = False

    # Notifications are opted into per test
    settings.WORKFLOW_EMAIL_NOTIFICATIONS = False
    settings.REGISTRY_STALE_CLAIM_HOURS = 24
