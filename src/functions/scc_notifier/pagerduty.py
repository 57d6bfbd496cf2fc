"""Minimal PagerDuty Events API v2 client."""

import logging
import requests

EVENTS_API_URL = "https://events.pagerduty.com/v2/enqueue"
DEFAULT_TIMEOUT_SECONDS = 10

logger = logging.getLogger(__name__)


class PagerDutyClient:
    """Sends events to PagerDuty. Errors from requests propagate to the caller.

    Without a session each event is a standalone requests.post call, so the
    client holds no open connections between invocations.
    """

    def __init__(self, api_token=None, events_url=EVENTS_API_URL,
                 timeout=DEFAULT_TIMEOUT_SECONDS, session=None):
        self.api_token = api_token
        self.events_url = events_url
        self.timeout = timeout
        self.session = session

    def _headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.api_token:
            headers['Authorization'] = f"Token token={self.api_token}"
        return headers

    def send_event(self, payload):
        """POSTs one event and returns the API response body.

        Raises:
            requests.exceptions.RequestException: on network errors or a non-2xx status.
        """
        logger.info(f"Sending event to {self.events_url} (dedup_key: {payload.get('dedup_key')})")
        http = self.session or requests
        response = http.post(
            self.events_url,
            json=payload,
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            return response.text
