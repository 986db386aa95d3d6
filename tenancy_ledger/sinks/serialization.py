"""Shared serialization utilities for sinks."""

import json
from typing import Any

from tenancy_ledger.models import Event
from tenancy_ledger.store.codec import to_document


def event_to_dict(event: Event) -> dict[str, Any]:
    """Convert an event envelope to a JSON-safe dict."""
    return to_document(event)


def event_to_json(event: Event, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(event_to_dict(event), indent=2, ensure_ascii=False)
    return json.dumps(event_to_dict(event), ensure_ascii=False)


def topic_for(event: Event, prefix: str) -> str:
    """Topic per entity: ``tenant.assigned`` -> ``<prefix>.tenant``."""
    entity = event.event_type.split(".", 1)[0]
    return f"{prefix}.{entity}" if prefix else entity
