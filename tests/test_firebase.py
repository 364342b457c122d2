from unittest.mock import patch

from academia.core import firebase


def test_existing_app_is_reused():
    sentinel = object()
    firebase.get_firebase_app.cache_clear()
    try:
        with patch.object(firebase.firebase_admin, "get_app", return_value=sentinel), patch.object(
            firebase.firebase_admin, "initialize_app"
        ) as initialize:
            assert firebase.get_firebase_app() is sentinel
            initialize.assert_not_called()
    finally:
        firebase.get_firebase_app.cache_clear()


def test_credentials_from_json_env(monkeypatch):
    monkeypatch.setenv("FIREBASE_CREDENTIALS_JSON", '{"type": "service_account"}')
    with patch.object(firebase.credentials, "Certificate") as certificate:
        firebase._credentials_from_env()
    certificate.assert_called_once_with({"type": "service_account"})
