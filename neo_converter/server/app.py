"""FastAPI application with conversion and header-inspection routes.

WHY: External clients need an HTTP API to turn an uploaded ROM set into a
.neo file and to inspect an existing .neo header. FastAPI provides
automatic OpenAPI documentation and multipart form handling.

HOW: POST /conversions takes a .zip ROM set plus metadata form fields and
returns the .neo bytes directly. POST /headers takes a .neo file and
returns its parsed header as JSON. GET /genres and GET /health are
informational.

RULES:
- Upload size is capped at MAX_UPLOAD_BYTES (413 beyond it)
- Invalid metadata (unknown genre, name > 33 or manufacturer > 17
  characters) and unreadable archives are 400 errors
- Size table values are echoed in X-Neo-*-Size response headers
- Conversion endpoints are sync handlers; FastAPI runs them in its
  threadpool so the CPU-bound build does not block the event loop
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from urllib.parse import quote
from typing import Annotated, BinaryIO, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from neo_converter import __version__
from neo_converter.config import (
    API_HOST,
    API_PORT,
    DEFAULT_GENRE,
    DEFAULT_MANUFACTURER,
    MAX_MANUFACTURER_LENGTH,
    MAX_NAME_LENGTH,
    MAX_UPLOAD_BYTES,
)
from neo_converter.core.container import assemble_container, parse_year
from neo_converter.core.errors import NeoFormatError, TruncatedInputError
from neo_converter.core.genres import GENRES, genre_code
from neo_converter.core.header import parse_header
from neo_converter.core.ir import GameMetadata
from neo_converter.core.source_files import default_game_name, load_rom_archive
from neo_converter.server.models import (
    ErrorResponse,
    GenreInfo,
    GenreListResponse,
    HeaderResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=".neo Converter API",
    description=(
        "REST API for converting Neo Geo ROM sets (uploaded as .zip) into "
        ".neo container files, and for inspecting .neo headers."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read_upload(stream: BinaryIO) -> bytes:
    """Read an upload, rejecting anything over MAX_UPLOAD_BYTES with 413."""
    content = stream.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail="Upload exceeds {} bytes".format(MAX_UPLOAD_BYTES),
        )
    return content


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name.

    Header values go out as Latin-1, so the raw name can only appear
    percent-encoded in ``filename*``.
    """
    fallback = "".join(c if " " <= c <= "~" else "_" for c in filename)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return "attachment; filename=\"{}\"; filename*=UTF-8''{}".format(
        fallback, quote(filename, safe="")
    )


def _validate_metadata(
    name: str,
    manufacturer: str,
    genre: str,
) -> int:
    """Check field limits and resolve the genre code, raising 400 on failure."""
    if len(name) > MAX_NAME_LENGTH:
        raise HTTPException(
            status_code=400,
            detail="Game name can not be longer than {} characters".format(MAX_NAME_LENGTH),
        )
    if len(manufacturer) > MAX_MANUFACTURER_LENGTH:
        raise HTTPException(
            status_code=400,
            detail="Manufacturer name can not be longer than {} characters".format(
                MAX_MANUFACTURER_LENGTH
            ),
        )
    code = genre_code(genre)
    if code is None:
        raise HTTPException(
            status_code=400,
            detail="Genre must be one of: {}".format(", ".join(GENRES)),
        )
    return code


# ---------------------------------------------------------------------------
# Endpoints: Conversions
# ---------------------------------------------------------------------------


@app.post(
    "/conversions",
    tags=["conversions"],
    summary="Convert a ROM set to .neo",
    description=(
        "Upload a .zip containing the ROM files of one game (p1, s1, m1, v1, "
        "c1..c8, ...) together with its metadata. Returns the .neo file."
    ),
    response_class=Response,
    responses={
        200: {"content": {"application/octet-stream": {}}, "description": "The .neo file"},
        400: {"model": ErrorResponse, "description": "Invalid archive or metadata"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
    },
)
def create_conversion(
    file: Annotated[
        UploadFile,
        File(description=".zip archive containing the game's ROM files"),
    ],
    name: Annotated[
        Optional[str],
        Form(description="Game name, up to 33 characters. Defaults to the archive name."),
    ] = None,
    manufacturer: Annotated[
        str,
        Form(description="Manufacturer, up to 17 characters."),
    ] = DEFAULT_MANUFACTURER,
    year: Annotated[
        Optional[str],
        Form(description="Release year. Defaults to the current year."),
    ] = None,
    genre: Annotated[
        str,
        Form(description="Genre name, see GET /genres."),
    ] = DEFAULT_GENRE,
    ngh: Annotated[
        Optional[str],
        Form(description="NGH number as written on the board, e.g. '95'."),
    ] = None,
    screenshot: Annotated[
        Optional[str],
        Form(description="Screenshot index. Defaults to none (0)."),
    ] = None,
) -> Response:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "rom.zip").name
    game_name = name if name else default_game_name(filename)
    genre_value = _validate_metadata(game_name, manufacturer, genre)

    content = _read_upload(file.file)
    try:
        files = load_rom_archive(io.BytesIO(content))
    except zipfile.BadZipFile:
        raise HTTPException(status_code=400, detail="Upload is not a valid .zip archive")
    except RuntimeError as exc:
        # Encrypted members (RuntimeError) or unsupported compression (NotImplementedError)
        raise HTTPException(status_code=400, detail="Upload could not be extracted: {}".format(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    metadata = GameMetadata(
        name=game_name,
        manufacturer=manufacturer,
        year=parse_year(year),
        genre=genre_value,
        screenshot=screenshot,
        ngh=ngh,
    )

    try:
        container = assemble_container(metadata, files)
    except NeoFormatError as exc:
        logger.exception("Conversion failed for %s", filename)
        raise HTTPException(status_code=400, detail=str(exc))

    sizes = container.sizes
    logger.info("Converted %s (%d files, %d bytes)", filename, len(files), len(container))
    return Response(
        content=container.to_bytes(),
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": _content_disposition(default_game_name(filename) + ".neo"),
            "X-Neo-P-Size": str(sizes.program),
            "X-Neo-S-Size": str(sizes.sprite),
            "X-Neo-M-Size": str(sizes.fix),
            "X-Neo-V1-Size": str(sizes.voice1),
            "X-Neo-V2-Size": str(sizes.voice2),
            "X-Neo-C-Size": str(sizes.color_tile),
        },
    )


# ---------------------------------------------------------------------------
# Endpoints: Headers
# ---------------------------------------------------------------------------


@app.post(
    "/headers",
    response_model=HeaderResponse,
    tags=["headers"],
    summary="Parse a .neo header",
    description="Upload a .neo file (or just its first 4 KiB) and get the parsed header.",
    responses={
        400: {"model": ErrorResponse, "description": "File too short to hold a header"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
    },
)
def read_header(
    file: Annotated[
        UploadFile,
        File(description=".neo file to inspect"),
    ],
) -> HeaderResponse:
    content = _read_upload(file.file)
    try:
        info = parse_header(content)
    except TruncatedInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return HeaderResponse.from_header(info)


# ---------------------------------------------------------------------------
# Endpoints: Info
# ---------------------------------------------------------------------------


@app.get(
    "/genres",
    response_model=GenreListResponse,
    tags=["info"],
    summary="List genres",
    description="Genre names accepted by POST /conversions and their header codes.",
)
async def list_genres() -> GenreListResponse:
    return GenreListResponse(
        genres=[GenreInfo(name=name, code=code) for name, code in GENRES.items()]
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the neo-converter-api console script."""
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
