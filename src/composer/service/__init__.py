"""Application services: startup sequencing and page composition."""

from composer.service.composition_service import CompositionService
from composer.service.startup_service import StartupSequencer

__all__ = ["CompositionService", "StartupSequencer"]
