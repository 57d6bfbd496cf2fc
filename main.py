# main.py - Cloud Functions entry point for the SCC to PagerDuty notifier

# Import the functions Cloud Functions will call from the module within the src package
from src.functions.scc_notifier.main import create_pd_event, handle_scc_notification

# create_pd_event(event, context) is the Pub/Sub background function entry point.
# handle_scc_notification(cloud_event) is the CloudEvent entry point for 2nd gen functions.
__all__ = ["create_pd_event", "handle_scc_notification"]

# Logging configuration is handled in src/functions/scc_notifier/main.py
