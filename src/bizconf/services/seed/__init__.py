"""Seed transformer: research outputs into a confidence-wrapped site seed."""

from bizconf.services.seed.models import (
    SECTION_NAMES,
    PlacesResult,
    RawResearch,
    SeedDocument,
    SeedProvenance,
    UserInputs,
)
from bizconf.services.seed.transformer import SEED_VERSION, build_seed

__all__ = [
    "SECTION_NAMES",
    "SEED_VERSION",
    "PlacesResult",
    "RawResearch",
    "SeedDocument",
    "SeedProvenance",
    "UserInputs",
    "build_seed",
]
