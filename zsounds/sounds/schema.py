"""Sound definitions and the per-car sound set they are applied to."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class SoundType(str, Enum):
    """Slots a locomotive exposes for replacement audio."""
    HORN_HIT = "HornHit"
    HORN_LOOP = "HornLoop"
    BELL = "Bell"
    COMPRESSOR = "Compressor"
    ENGINE_STARTUP = "EngineStartup"
    ENGINE_LOOP = "EngineLoop"
    ENGINE_SHUTDOWN = "EngineShutdown"
    TRACTION_MOTORS = "TractionMotors"

    @classmethod
    def lookup(cls, name: str) -> SoundType | None:
        """Case-insensitive lookup of a configuration tag."""
        return _SOUND_TYPES.get(name.lower())


_SOUND_TYPES = {t.value.lower(): t for t in SoundType}


class SoundDefinition(BaseModel):
    """A named sound: the clip(s) to use for one slot and how to play them.

    Configuration keys are camelCase (``minPitch``); ``filename`` is accepted
    as shorthand for a single-entry ``filenames``. Unknown keys are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")

    name: str = Field(..., description="Registry name of this sound")
    type: SoundType = Field(..., description="Slot this sound fills")
    filenames: list[str] = Field(..., min_length=1, description="Clip files, relative to the config")
    pitch: float | None = Field(None, gt=0, description="Playback pitch multiplier")
    min_pitch: float | None = Field(None, gt=0, description="Lowest pitch for looped engine clips")
    max_pitch: float | None = Field(None, gt=0, description="Highest pitch for looped engine clips")
    fade_start: float | None = Field(None, ge=0, description="Throttle at which the clip fades in")
    fade_width: float | None = Field(None, ge=0, description="Throttle range of the fade")

    @model_validator(mode="before")
    @classmethod
    def _expand_filename(cls, data: Any) -> Any:
        if isinstance(data, dict) and "filename" in data:
            data = dict(data)
            filename = data.pop("filename")
            data.setdefault("filenames", [filename])
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            sound_type = SoundType.lookup(value)
            if sound_type is None:
                raise ValueError(f"Unknown sound type {value!r}")
            return sound_type
        return value

    @model_validator(mode="after")
    def _check_pitch_range(self) -> SoundDefinition:
        if self.min_pitch is not None and self.max_pitch is not None:
            if self.min_pitch > self.max_pitch:
                raise ValueError(
                    f"minPitch {self.min_pitch} is greater than maxPitch {self.max_pitch}"
                )
        return self

    def apply(self, sound_set: SoundSet) -> None:
        """Write this sound into its slot, replacing whatever was there."""
        sound_set[self.type] = self


class SoundSet:
    """Sounds selected for one car, keyed by slot."""

    def __init__(self):
        self._sounds: dict[SoundType, SoundDefinition] = {}

    def __getitem__(self, sound_type: SoundType) -> SoundDefinition:
        return self._sounds[sound_type]

    def __setitem__(self, sound_type: SoundType, sound: SoundDefinition) -> None:
        self._sounds[sound_type] = sound

    def __contains__(self, sound_type: object) -> bool:
        return sound_type in self._sounds

    def __len__(self) -> int:
        return len(self._sounds)

    def __iter__(self) -> Iterator[SoundType]:
        return iter(self._sounds)

    def __repr__(self) -> str:
        return f"SoundSet({self.names()!r})"

    def get(self, sound_type: SoundType) -> SoundDefinition | None:
        return self._sounds.get(sound_type)

    def items(self) -> list[tuple[SoundType, SoundDefinition]]:
        return list(self._sounds.items())

    def names(self) -> dict[str, str]:
        """Slot name -> sound name, for logging and display."""
        return {sound_type.value: sound.name for sound_type, sound in self._sounds.items()}
