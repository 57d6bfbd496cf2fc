# Cloud Function forwarding Security Command Center findings to PagerDuty
import base64
import binascii
import json
import logging
import requests
import functions_framework

from . import config
from .errors import InvalidPayload, PayloadDecodeError, DeliveryFailed
from .pagerduty import PagerDutyClient
from .payload import build_scc_url, create_event_payload
from .redaction import clean_sensitive_information

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _message_data(message):
    """Returns the base64 data of a Pub/Sub message given as a dict or an object."""
    if message is None:
        return None
    if isinstance(message, dict):
        return message.get('data')
    return getattr(message, 'data', None)


def decode_message(message):
    """Decodes the Pub/Sub message body and returns the SCC finding it carries.

    Raises:
        InvalidPayload: if the message has no data, the data has no finding,
            or the finding (or its sourceProperties) is not an object.
        PayloadDecodeError: if the data is not base64-encoded UTF-8 JSON.
    """
    data = _message_data(message)
    if not data:
        raise InvalidPayload("Bad request payload")

    try:
        decoded = json.loads(base64.b64decode(data).decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadDecodeError(f"Bad request payload. Could not decode data: {e}") from e

    if not isinstance(decoded, dict) or decoded.get('finding') is None:
        raise InvalidPayload('Bad request payload. Missing attribute "finding"')

    finding = decoded['finding']
    if not isinstance(finding, dict):
        raise InvalidPayload('Bad request payload. Attribute "finding" must be an object')

    source_properties = finding.get('sourceProperties')
    if source_properties is not None and not isinstance(source_properties, dict):
        raise InvalidPayload('Bad request payload. Attribute "finding.sourceProperties" must be an object')

    return finding


def create_pd_event(message, context, settings=None, client=None):
    """Background Cloud Function triggered by the SCC notification Pub/Sub topic.

    Args:
        message (dict): The Pub/Sub message. Its 'data' holds the base64 JSON notification.
        context: Event metadata. Not used.
        settings (config.NotifierSettings, optional): Loaded from the environment when omitted.
        client (PagerDutyClient, optional): Built from settings when omitted.

    Returns:
        The PagerDuty API response.

    Raises:
        InvalidPayload: bad or incomplete message. Nothing is sent.
        DeliveryFailed: PagerDuty rejected the event or could not be reached.
    """
    logger.info("New message received.")

    logger.info("Parsing message")
    finding = decode_message(message)

    logger.info("Getting PagerDuty credentials.")
    if settings is None:
        settings = config.load_settings()
    if client is None:
        client = PagerDutyClient(
            api_token=settings.api_token,
            events_url=settings.events_api_url,
            timeout=settings.request_timeout,
        )

    logger.info("Creating PagerDuty incident")
    payload = create_event_payload(
        category=finding.get('category'),
        name=finding.get('name'),
        source_properties=clean_sensitive_information(
            finding.get('sourceProperties'), settings.redacted_fields
        ),
        integration_key=settings.integration_key,
        scc_url=build_scc_url(settings.organization_id),
    )

    try:
        response = client.send_event(payload)
    except requests.exceptions.RequestException as e:
        logger.error(f"PagerDuty event creation failed for {payload['dedup_key']}: {e}", exc_info=True)
        raise DeliveryFailed(str(e)) from e

    logger.info(f"PagerDuty response: {response}")
    return response


@functions_framework.cloud_event
def handle_scc_notification(cloud_event):
    """CloudEvent entry point for Pub/Sub triggers (2nd gen functions)."""
    message = (cloud_event.data or {}).get('message')
    return create_pd_event(message, cloud_event)


# --- Local Testing ---
if __name__ == "__main__":
    sample_notification = {
        "finding": {
            "category": "MALWARE",
            "name": "organizations/123/sources/456/findings/789",
            "sourceProperties": {
                "Environment_Variables": "SECRET=1",
                "Region": "us-central1",
            },
        }
    }
    mock_message = {
        'data': base64.b64encode(json.dumps(sample_notification).encode('utf-8')).decode('ascii'),
    }

    print("Sending sample finding to PagerDuty...")
    result = create_pd_event(mock_message, None)
    print(f"\nResult: {result}")
