# Builds PagerDuty Events API v2 payloads from SCC findings
import datetime
from urllib.parse import quote, unquote

SCC_CONSOLE_URL = "https://console.cloud.google.com/security/command-center/findings"

# Console view filters shown when opening the link from PagerDuty
SCC_VIEW_PARAMS = (
    "orgonly=true&supportedpurview=organizationId&view_type=vt_finding_type"
    "&vt_finding_type=All&columns=category,sourceProperties.ProjectId,securityMarks.marks"
)

EVENT_SEVERITY = "warning"
EVENT_COMPONENT = "gcloud"
EVENT_ACTION = "trigger"
EVENT_CLIENT = "GCP Security Command Center"
FINDING_LINK_TEXT = "Finding Details"


def build_scc_url(organization_id):
    """Console URL listing the organization's findings."""
    return f"{SCC_CONSOLE_URL}?authuser=0&organizationId={organization_id}&{SCC_VIEW_PARAMS}"


def build_finding_details_url(scc_url, name):
    """Console URL pointing at a single finding.

    The finding name may arrive percent-encoded, so it is decoded first and
    then encoded as one query value.
    """
    resource_id = quote(unquote(name or ""), safe="")
    return f"{scc_url}&resourceId={resource_id}"


def create_event_payload(category, name, source_properties, integration_key, scc_url):
    """Creates the PagerDuty event for a finding.

    Args:
        category (str): SCC finding category, e.g. 'MALWARE'.
        name (str): Full finding resource name. Used as the dedup key.
        source_properties (dict): Already redacted finding properties.
        integration_key (str): PagerDuty routing key.
        scc_url (str): Console URL from build_scc_url().

    Returns:
        dict: The Events API v2 request body.
    """
    finding_details_url = build_finding_details_url(scc_url, name)
    return {
        "payload": {
            "summary": f"GCP Security Finding - {category}",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "severity": EVENT_SEVERITY,
            "source": finding_details_url,
            "component": EVENT_COMPONENT,
            "custom_details": source_properties,
        },
        "routing_key": integration_key,
        "dedup_key": name,
        "event_action": EVENT_ACTION,
        "client": EVENT_CLIENT,
        "client_url": scc_url,
        "links": [
            {
                "href": finding_details_url,
                "text": FINDING_LINK_TEXT,
            }
        ],
    }
