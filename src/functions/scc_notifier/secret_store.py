"""Reads notifier credentials from Google Cloud Secret Manager."""

import logging
from google.cloud import secretmanager
from google.api_core.exceptions import GoogleAPIError

from .errors import SecretAccessError

logger = logging.getLogger(__name__)


def access_secret(secret_version_name, client=None):
    """Returns the payload of a secret version as text.

    Args:
        secret_version_name (str): Full resource name, e.g.
            'projects/my-project/secrets/pd-integration-key/versions/latest'.
        client (secretmanager.SecretManagerServiceClient, optional): Reused if given.

    Returns:
        str: The decoded secret value.
    """
    if client is None:
        client = secretmanager.SecretManagerServiceClient()

    logger.info(f"Reading secret {secret_version_name}")
    try:
        response = client.access_secret_version(request={"name": secret_version_name})
    except GoogleAPIError as e:
        logger.error(f"Secret Manager error for {secret_version_name}: {e}")
        raise SecretAccessError(f"Could not read secret {secret_version_name}: {e}") from e

    return response.payload.data.decode("UTF-8")
