"""Report schemas.

The report is built once and returned immutable all the way down: models
are frozen, location and value lists are tuples, and the category maps are
read-only mapping proxies. Location-style findings enforce
``present == bool(locations)`` at construction time, and nothing can change
either side afterwards.
"""

from types import MappingProxyType
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class FeatureStat(BaseModel):
    """A scalar stat in the ``general`` category."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name, e.g. 'Media Type'")
    found: Union[int, float, tuple[str, ...]] = Field(
        ..., description="Count, size in MB, or distinct values"
    )


class Finding(BaseModel):
    """Presence flag plus supporting locations for one feature."""

    model_config = ConfigDict(frozen=True)

    present: bool
    locations: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _present_matches_locations(self) -> "Finding":
        if self.present != bool(self.locations):
            raise ValueError(
                f"present={self.present} contradicts {len(self.locations)} locations"
            )
        return self

    @classmethod
    def from_locations(cls, locations: Any) -> "Finding":
        locations = tuple(locations)
        return cls(present=bool(locations), locations=locations)


class FileSizeResult(BaseModel):
    """Definition size before and after dereferencing, in MB."""

    raw: float
    dereferenced: float


class OASAnalysis(BaseModel):
    """Feature-usage report for one API definition."""

    model_config = ConfigDict(frozen=True)

    general: Mapping[str, FeatureStat] = Field(default_factory=lambda: MappingProxyType({}))
    openapi: Mapping[str, Finding] = Field(default_factory=lambda: MappingProxyType({}))
    readme: Mapping[str, Finding] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("general", "openapi", "readme", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("general")
    def _serialize_general(self, value: Mapping[str, FeatureStat]) -> dict[str, FeatureStat]:
        return dict(value)

    @field_serializer("openapi", "readme")
    def _serialize_findings(self, value: Mapping[str, Finding]) -> dict[str, Finding]:
        return dict(value)
