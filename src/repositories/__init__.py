"""HTTP-backed implementations of the carry-check collaborators."""

from repositories.bungie import BungieRepository
from repositories.guardian_gg import GuardianGGRepository
from repositories.trials_report import TrialsReportRepository

__all__ = [
    "BungieRepository",
    "GuardianGGRepository",
    "TrialsReportRepository",
]
