"""Parse fault-extraction payloads into validated fault report items.

The extraction step may answer in several shapes:
- ``{"faults": [ {...}, ... ]}`` (current)
- a single fault object ``{"fault_code": "03", ...}`` (older prompts)
- a bare list of fault objects

Entries without a usable code or duration are skipped.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from src.common.models import FaultReportItem

logger = logging.getLogger(__name__)


def _raw_entries(payload: object) -> list:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        faults = payload.get("faults")
        if isinstance(faults, list):
            return faults
        if isinstance(faults, dict):
            return [faults]
        if "fault_code" in payload or "code" in payload:
            return [payload]
    logger.warning("Unrecognized fault payload shape: %s", type(payload).__name__)
    return []


def parse_fault_payload(payload: object) -> list[FaultReportItem]:
    """Convert an extraction payload into FaultReportItems.

    Args:
        payload: Decoded JSON from the extraction step.

    Returns:
        Valid fault items, in payload order.
    """
    items: list[FaultReportItem] = []
    for entry in _raw_entries(payload):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object fault entry: %r", entry)
            continue
        try:
            items.append(FaultReportItem.model_validate(entry))
        except (ValidationError, ValueError, TypeError) as exc:
            logger.warning("Skipping invalid fault entry %r: %s", entry, exc)

    logger.info("Parsed %d fault(s) from extraction payload", len(items))
    return items
