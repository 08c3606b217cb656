"""Services for the Sharingan scores tool."""

from sharingan.services.classifier import ClassifiedMatches, classify, classify_filtered
from sharingan.services.pipeline import ScoreboardPipeline, TeamPipeline
from sharingan.services.team_resolver import resolve_team

__all__ = [
    "ClassifiedMatches",
    "classify",
    "classify_filtered",
    "ScoreboardPipeline",
    "TeamPipeline",
    "resolve_team",
]
