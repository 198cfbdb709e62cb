import json
import logging
import os

from datetime import datetime
from typing import Any, Dict

import pandas as pd

from ocdg.objects.ocel.obj import OCEL, Event, Object

"""
    Importer for object-centric event logs in the OCEL 1.0 JSON format (.jsonocel).
    The log is expected to have passed the validator, structural problems only surface as ValueError.
"""

EVENTS = "ocel:events"
OBJECTS = "ocel:objects"

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime:
    """
    Parses an OCEL timestamp into a naive datetime in UTC.

    Timestamps with an offset are converted to UTC, timestamps without one are taken as UTC.

    Raises:
        ValueError: If the value is no parsable timestamp
    """
    if not isinstance(value, str):
        raise ValueError(f"'{value}' is no timestamp string")
    timestamp = pd.to_datetime(value, utc=True)
    if pd.isna(timestamp):
        raise ValueError(f"'{value}' is no timestamp")
    return timestamp.tz_convert(None).to_pydatetime()


def _to_event(event_id: str, raw: Dict[str, Any]) -> Event:
    try:
        return Event(
            id=str(event_id),
            timestamp=parse_timestamp(raw["ocel:timestamp"]),
            activity=str(raw["ocel:activity"]),
            omap=tuple(str(oid) for oid in raw["ocel:omap"]),
            vmap=dict(raw.get("ocel:vmap", {})),
        )
    except KeyError as e:
        raise ValueError(f"Event '{event_id}' misses the field {e}")


def _to_object(object_id: str, raw: Dict[str, Any]) -> Object:
    if "ocel:type" not in raw:
        raise ValueError(f"Object '{object_id}' misses the field 'ocel:type'")
    return Object(id=str(object_id), type=str(raw["ocel:type"]), attributes=dict(raw.get("ocel:ovmap", {})))


def import_ocel(filepath: str) -> OCEL:
    """
    Imports an OCEL 1.0 JSON log.

    Args:
        filepath: Path to the .jsonocel file

    Returns:
        OCEL: The log with its events and objects, omaps keep the order of the file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is no OCEL 1.0 JSON log
    """
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"No log found at '{filepath}'")

    with open(filepath, encoding="utf-8") as f:
        try:
            content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"'{filepath}' is no valid JSON: {e}")
        except UnicodeDecodeError as e:
            raise ValueError(f"'{filepath}' is no UTF-8 text: {e.reason}")

    if not isinstance(content, dict) or EVENTS not in content or OBJECTS not in content:
        raise ValueError(f"'{filepath}' is no OCEL 1.0 JSON log")

    events = [_to_event(eid, raw) for eid, raw in content[EVENTS].items()]
    objects = [_to_object(oid, raw) for oid, raw in content[OBJECTS].items()]

    ocel = OCEL(events, objects)
    logger.debug(f"Imported {len(ocel.events)} events and {len(ocel.objects)} objects from {filepath}.")
    return ocel
