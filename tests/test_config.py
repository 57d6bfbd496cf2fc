import unittest
from unittest.mock import patch, MagicMock
from google.api_core.exceptions import NotFound

from src.functions.scc_notifier import config, secret_store
from src.functions.scc_notifier.errors import SecretAccessError

BASE_ENV = {
    "GCP_ORGANIZATION_ID": "987654321",
    "PD_INTEGRATION_KEY": "integration-key",
}


class TestNotifierSettings(unittest.TestCase):

    def test_from_env_defaults(self):
        settings = config.NotifierSettings.from_env(BASE_ENV)

        self.assertEqual(settings.organization_id, "987654321")
        self.assertEqual(settings.integration_key, "integration-key")
        self.assertIsNone(settings.api_token)
        self.assertEqual(settings.events_api_url, "https://events.pagerduty.com/v2/enqueue")
        self.assertEqual(settings.request_timeout, 10.0)
        self.assertEqual(settings.redacted_fields, ("Environment_Variables",))

    def test_from_env_overrides(self):
        env = dict(BASE_ENV, PD_API_TOKEN="tok", PD_REQUEST_TIMEOUT="2.5",
                   PD_EVENTS_API_URL="https://pd.example/enqueue",
                   REDACTED_FIELDS="Environment_Variables, Password ,")
        settings = config.NotifierSettings.from_env(env)

        self.assertEqual(settings.api_token, "tok")
        self.assertEqual(settings.request_timeout, 2.5)
        self.assertEqual(settings.events_api_url, "https://pd.example/enqueue")
        self.assertEqual(settings.redacted_fields, ("Environment_Variables", "Password"))

    def test_validate_missing_values(self):
        settings = config.NotifierSettings.from_env({"GCP_ORGANIZATION_ID": ""})
        with self.assertRaises(ValueError) as ctx:
            settings.validate()
        self.assertIn("GCP_ORGANIZATION_ID", str(ctx.exception))
        self.assertIn("PD_INTEGRATION_KEY", str(ctx.exception))

    @patch('src.functions.scc_notifier.config.secret_store.access_secret')
    def test_load_settings_resolves_secrets(self, mock_access_secret):
        mock_access_secret.side_effect = lambda name, client=None: f"value-of-{name.split('/')[3]}"
        env = {
            "GCP_ORGANIZATION_ID": "987654321",
            "PD_INTEGRATION_KEY_SECRET": "projects/p/secrets/pd-key/versions/latest",
            "PD_API_TOKEN_SECRET": "projects/p/secrets/pd-token/versions/latest",
        }

        settings = config.load_settings(env)

        self.assertEqual(settings.integration_key, "value-of-pd-key")
        self.assertEqual(settings.api_token, "value-of-pd-token")
        self.assertEqual(mock_access_secret.call_count, 2)

    @patch('src.functions.scc_notifier.config.secret_store.access_secret')
    def test_load_settings_without_secrets(self, mock_access_secret):
        settings = config.load_settings(BASE_ENV)

        mock_access_secret.assert_not_called()
        self.assertEqual(settings.integration_key, "integration-key")


class TestAccessSecret(unittest.TestCase):

    def test_returns_decoded_payload(self):
        client = MagicMock()
        client.access_secret_version.return_value.payload.data = b"s3cr3t"

        value = secret_store.access_secret("projects/p/secrets/pd-key/versions/1", client=client)

        self.assertEqual(value, "s3cr3t")
        client.access_secret_version.assert_called_once_with(
            request={"name": "projects/p/secrets/pd-key/versions/1"}
        )

    def test_api_error_raises_secret_access_error(self):
        client = MagicMock()
        client.access_secret_version.side_effect = NotFound("secret not found")

        with self.assertRaises(SecretAccessError):
            secret_store.access_secret("projects/p/secrets/missing/versions/1", client=client)

    @patch('src.functions.scc_notifier.secret_store.secretmanager.SecretManagerServiceClient')
    def test_creates_client_when_not_given(self, mock_client_cls):
        mock_client_cls.return_value.access_secret_version.return_value.payload.data = b"abc"

        self.assertEqual(secret_store.access_secret("projects/p/secrets/k/versions/1"), "abc")
        mock_client_cls.assert_called_once()


if __name__ == "__main__":
    unittest.main()
