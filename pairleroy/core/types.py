"""Domain models for the board core: tiles, combos, placements, junctions."""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# An index into the 4-slot palette; hex values belong to the renderer.
Color = int

# One color per hex edge, indexed by direction 0..5.
OrientedEdges = tuple[int, ...]

EDGE_COUNT = 6
UNITS_PER_TILE = 3


class TileType(IntEnum):
    """Tile kind; the value is also the number of distinct colors it carries."""

    MONO = 1
    BI = 2
    TRI = 3


class Tile(BaseModel):
    """Axial hex coordinate. Index in the grid list is the tile index."""

    model_config = ConfigDict(frozen=True)

    q: int
    r: int
    s: int

    @model_validator(mode="after")
    def _check_cube(self) -> Tile:
        if self.q + self.r + self.s != 0:
            raise ValueError(f"q + r + s must be 0, got ({self.q}, {self.r}, {self.s})")
        return self

    @classmethod
    def axial(cls, q: int, r: int) -> Tile:
        return cls(q=q, r=r, s=-q - r)

    @property
    def key(self) -> tuple[int, int]:
        return (self.q, self.r)


# --- Combos ---

class MonoCombo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[TileType.MONO] = TileType.MONO
    color: Color = Field(ge=0)

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.color,)

    @property
    def units(self) -> tuple[int, ...]:
        return (3,)


class BiCombo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[TileType.BI] = TileType.BI
    major: Color = Field(ge=0)
    minor: Color = Field(ge=0)

    @model_validator(mode="after")
    def _check_distinct(self) -> BiCombo:
        if self.major == self.minor:
            raise ValueError(f"bi combo needs two distinct colors, got {self.major} twice")
        return self

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.major, self.minor)

    @property
    def units(self) -> tuple[int, ...]:
        return (2, 1)


class TriCombo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[TileType.TRI] = TileType.TRI
    first: Color = Field(ge=0)
    second: Color = Field(ge=0)
    third: Color = Field(ge=0)

    @model_validator(mode="after")
    def _check_distinct(self) -> TriCombo:
        if len({self.first, self.second, self.third}) != 3:
            raise ValueError(
                f"tri combo needs three distinct colors, got {self.colors}"
            )
        return self

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.first, self.second, self.third)

    @property
    def units(self) -> tuple[int, ...]:
        return (1, 1, 1)


Combo = Annotated[Union[MonoCombo, BiCombo, TriCombo], Field(discriminator="type")]


def make_combo(tile_type: TileType, colors: tuple[Color, ...] | list[Color]) -> MonoCombo | BiCombo | TriCombo:
    """Build the combo variant for ``tile_type`` from an ordered color list."""
    if tile_type == TileType.MONO:
        (color,) = colors
        return MonoCombo(color=color)
    if tile_type == TileType.BI:
        major, minor = colors
        return BiCombo(major=major, minor=minor)
    first, second, third = colors
    return TriCombo(first=first, second=second, third=third)


# --- Board records ---

class Placement(BaseModel):
    """A combo committed to a tile under one rotation."""

    model_config = ConfigDict(frozen=True)

    tile_index: int
    combo: Combo
    rotation_step: int
    edges: OrientedEdges


class Junction(BaseModel):
    """A grid vertex shared by three tiles."""

    model_config = ConfigDict(frozen=True)

    key: tuple[int, int]  # rounded vertex position
    x: float
    y: float
    tiles: tuple[int, int, int]
    entries: tuple[tuple[int, int], ...]  # (tile_index, vertex_index) incidences
