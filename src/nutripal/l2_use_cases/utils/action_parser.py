"""Detect the structured log-meal action inside assistant text."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from nutripal.l1_entities.bridge_outcome import ActionPayload

log = logging.getLogger('nutripal.bridge')


def parse_action(text: str) -> ActionPayload | None:
    """Return the action if *text* is strict JSON of the log_meal shape, else None.

    Prose, other JSON, and JSON with an invalid meal (negative macros, unknown
    meal type) all count as a plain reply.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict) or data.get('action') != 'log_meal' or not isinstance(data.get('meal'), dict):
        return None
    try:
        return ActionPayload.model_validate(data)
    except ValidationError as e:
        log.warning('log_meal action with invalid meal, treating as text: %s', e)
        return None
