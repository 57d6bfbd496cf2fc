# Removal of sensitive values from SCC finding sourceProperties

REDACTED_VALUE = "<redacted>"

# Fields that must never reach PagerDuty. Extend here (or via REDACTED_FIELDS env var).
REDACTED_FIELDS = ("Environment_Variables",)


def clean_sensitive_information(source_properties, fields=REDACTED_FIELDS):
    """Return a copy of source_properties with every field in `fields` set to the redaction marker.

    Fields are added when absent, so the marker is always present in the result.
    The input mapping is left untouched.
    """
    cleaned = dict(source_properties or {})
    for field in fields:
        cleaned[field] = REDACTED_VALUE
    return cleaned
