from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def rows_response(rows: list[dict[str, Any]]) -> JSONResponse:
    # Row dicts keep the column order the store returned.
    # NUMERIC columns go out as exact strings, never as floats.
    content = jsonable_encoder(rows, custom_encoder={Decimal: str})
    return JSONResponse(status_code=200, content=content)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
