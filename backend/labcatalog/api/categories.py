from fastapi import APIRouter, Depends

from ..db import Database, QueryFailure
from ..logging import get_logger
from .deps import get_database
from .responses import error_response, rows_response

router = APIRouter()
logger = get_logger(__name__)

LIST_CATEGORIES_SQL = "SELECT * FROM categories ORDER BY position ASC"


@router.get("/categories")
async def list_categories(database: Database = Depends(get_database)):
    result = await database.fetch_all(LIST_CATEGORIES_SQL)
    if isinstance(result, QueryFailure):
        logger.error("Error fetching categories: %s", result.error)
        return error_response(500, "Server error")
    return rows_response(result.rows)
