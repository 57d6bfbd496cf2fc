import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
from dotenv import load_dotenv

from . import secret_store
from .pagerduty import EVENTS_API_URL, DEFAULT_TIMEOUT_SECONDS
from .redaction import REDACTED_FIELDS

# Load environment variables from .env file
load_dotenv()


def _parse_fields(raw_value):
    """Splits a comma-separated field list, ignoring blanks."""
    if raw_value is None:
        return REDACTED_FIELDS
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True)
class NotifierSettings:
    """Everything create_pd_event needs from the deployment environment."""
    organization_id: Optional[str]
    integration_key: Optional[str]
    api_token: Optional[str] = None
    integration_key_secret: Optional[str] = None
    api_token_secret: Optional[str] = None
    events_api_url: str = EVENTS_API_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    redacted_fields: Tuple[str, ...] = field(default=REDACTED_FIELDS)

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            organization_id=env.get("GCP_ORGANIZATION_ID"),
            integration_key=env.get("PD_INTEGRATION_KEY"),
            api_token=env.get("PD_API_TOKEN"),
            integration_key_secret=env.get("PD_INTEGRATION_KEY_SECRET"),
            api_token_secret=env.get("PD_API_TOKEN_SECRET"),
            events_api_url=env.get("PD_EVENTS_API_URL") or EVENTS_API_URL,
            request_timeout=float(env.get("PD_REQUEST_TIMEOUT") or DEFAULT_TIMEOUT_SECONDS),
            redacted_fields=_parse_fields(env.get("REDACTED_FIELDS")),
        )

    def resolve_secrets(self, client=None):
        """Returns a copy with credentials read from Secret Manager where a secret name is set."""
        updates = {}
        if self.integration_key_secret:
            updates["integration_key"] = secret_store.access_secret(self.integration_key_secret, client=client)
        if self.api_token_secret:
            updates["api_token"] = secret_store.access_secret(self.api_token_secret, client=client)
        return replace(self, **updates) if updates else self

    def validate(self):
        missing = []
        if not self.organization_id:
            missing.append("GCP_ORGANIZATION_ID")
        if not self.integration_key:
            missing.append("PD_INTEGRATION_KEY (or PD_INTEGRATION_KEY_SECRET)")
        if missing:
            raise ValueError(
                f"Please set {', '.join(missing)} "
                "environment variables (e.g., in a .env file)"
            )
        return self


def load_settings(environ=None, secret_client=None):
    """Reads, resolves and validates settings for one invocation."""
    settings = NotifierSettings.from_env(environ)
    return settings.resolve_secrets(client=secret_client).validate()
