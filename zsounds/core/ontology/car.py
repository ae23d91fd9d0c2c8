"""Car context for sound selection queries."""

from pydantic import BaseModel, ConfigDict, Field


# Car type tags the game reports for locomotives. Hosts can replace this set
# through Settings.known_car_types.
DEFAULT_CAR_TYPES: tuple[str, ...] = (
    "LocoShunter",
    "LocoDiesel",
    "LocoSteamHeavy",
    "LocoSteamHeavyBlue",
    "LocoRailbus",
    "DE2",
    "DE6",
    "DH4",
    "DM3",
    "S060",
    "S282",
    "BE2",
)


class CarContext(BaseModel):
    """The car a rule tree is evaluated against.

    Example:
        {
            "car_type": "DE6",
            "car_id": "8f14e45f-ceea-467f-a8f2-0c4a3b1e5d21"
        }
    """

    model_config = ConfigDict(frozen=True)

    car_type: str = Field(..., description="Car type tag, e.g. 'DE6'")
    car_id: str = Field("", description="Opaque identifier used for attribute lookups")
