"""
Raw schema decoder.

Turns provider response bytes into the permissive intermediate models of
sharingan.models.raw. Missing optional fields never fail decoding; malformed
JSON or a missing mandatory field raises DecodeError with a bounded sample of
the offending body.
"""

import json
import logging
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from sharingan.exceptions import DecodeError
from sharingan.models.raw import (
    RawScoreboard,
    RawTeamDirectory,
    RawTeamSchedule,
    present_fields,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode(raw: bytes, model: Type[ModelT], stage: str) -> ModelT:
    """Parse JSON bytes and validate them against an envelope model.

    Args:
        raw: Response body as received
        model: Intermediate envelope model
        stage: Name of the decode stage, reported on failure

    Returns:
        Validated envelope

    Raises:
        DecodeError: If the body is not JSON or lacks mandatory fields
    """
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid JSON: {e}", stage=stage, raw=raw) from e

    if not isinstance(payload, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(payload).__name__}",
            stage=stage,
            raw=raw,
        )

    try:
        envelope = model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(
            f"Envelope does not match {model.__name__}: {e.error_count()} error(s)",
            stage=stage,
            raw=raw,
        ) from e

    logger.debug(f"{stage}: decoded fields {present_fields(envelope)}")
    return envelope


def decode_scoreboard(raw: bytes) -> RawScoreboard:
    """Decode a scoreboard response envelope."""
    return _decode(raw, RawScoreboard, "scoreboard")


def decode_team_directory(raw: bytes) -> RawTeamDirectory:
    """Decode a team directory (teams listing) response."""
    return _decode(raw, RawTeamDirectory, "team directory")


def decode_team_schedule(raw: bytes) -> RawTeamSchedule:
    """Decode a team schedule response.

    The team block of this endpoint carries a different set of optional
    fields than the directory; which ones arrived is logged for diagnosis.
    """
    schedule = _decode(raw, RawTeamSchedule, "team schedule")
    if schedule.team is not None:
        logger.debug(f"team schedule: team fields {present_fields(schedule.team)}")
    return schedule
