from fastapi import APIRouter, Query

from dankpos.database.client import ilike
from dankpos.dependencies.dbDependencies import tenant_db_dependency

strains_router = APIRouter(prefix="/strains", tags=["Strains"])

STRAIN_COLUMNS = "name,type,thc_level,description"


@strains_router.get("/search")
async def search_strains(
    db: tenant_db_dependency,
    query: str = Query(""),
    limit: int = Query(7, ge=1, le=100),
):
    """Case-insensitive name search for the add-item autocomplete."""
    # PostgREST reserves * as the ilike wildcard
    term = query.replace("*", "").strip()
    return await db.select(
        "strains",
        columns=STRAIN_COLUMNS,
        filters={"name": ilike(f"*{term}*")},
        limit=limit,
    )
