"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation. Pydantic models enforce field types
at runtime and generate the JSON Schema shown in /docs.

HOW: One model per response shape. Request fields are multipart form
fields declared on the endpoints themselves.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Size field names match the header dump keys (p, s, m, v1, v2, c)
- Response models never expose internal dataclasses directly
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from neo_converter.core.ir import HeaderInfo, SectionSizes


class SectionSizesModel(BaseModel):
    """Padded section sizes from the header size table, in bytes."""

    p: int = Field(description="Program ROM section size.")
    s: int = Field(description="Sprite (S) ROM section size.")
    m: int = Field(description="Fix (M) ROM section size.")
    v1: int = Field(description="Voice bank 1 size.")
    v2: int = Field(description="Voice bank 2 size (0 for single-bank games).")
    c: int = Field(description="Interleaved color-tile (C) section size.")

    @classmethod
    def from_sizes(cls, sizes: SectionSizes) -> "SectionSizesModel":
        return cls(**sizes.as_dict())


class HeaderResponse(BaseModel):
    """Parsed .neo header.

    RULES:
    - genre is the genre name ("Other" for unknown codes)
    - ngh is the hex rendering of the stored value, "" when unset
    """

    name: str = Field(description="Game name.")
    manufacturer: str = Field(description="Manufacturer.")
    year: int = Field(description="Release year.")
    genre: str = Field(description="Genre name.")
    screenshot: int = Field(description="Screenshot index, 0 for none.")
    ngh: str = Field(description="NGH number as written on the board, e.g. '95'.")
    version: int = Field(description="Header format version.")
    sizes: SectionSizesModel = Field(description="Section sizes from the size table.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "name": "King of Fighters '94",
                "manufacturer": "SNK",
                "year": 1994,
                "genre": "Fighting",
                "screenshot": 0,
                "ngh": "55",
                "version": 1,
                "sizes": {
                    "p": 2097152, "s": 131072, "m": 131072,
                    "v1": 4194304, "v2": 0, "c": 16777216,
                },
            }
        ]
    }}

    @classmethod
    def from_header(cls, info: HeaderInfo) -> "HeaderResponse":
        return cls(
            name=info.name,
            manufacturer=info.manufacturer,
            year=info.year,
            genre=info.genre,
            screenshot=info.screenshot,
            ngh=info.ngh,
            version=info.version,
            sizes=SectionSizesModel.from_sizes(info.sizes),
        )


class GenreInfo(BaseModel):
    """One entry of the genre table."""

    name: str = Field(description="Genre name accepted by POST /conversions.")
    code: int = Field(description="Code stored in the header.")


class GenreListResponse(BaseModel):
    genres: List[GenreInfo] = Field(description="All known genres in code order.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
