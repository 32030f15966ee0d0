from fastapi import APIRouter, Depends, File, UploadFile

from gameswap.config import config
from gameswap.logic.imports.pipeline import validate_field_csv
from gameswap.models.slots import ImportSummary
from gameswap.routes.auth import (
    Identity,
    admin_guard,
    league_scope,
    require_member,
)
from gameswap.routes.models import ImportSummaryResponse
from gameswap.sql.fields import upsert_field
from gameswap.sql.memberships import membership_store
from gameswap.utils.csv_mini import read_csv_text
from gameswap.utils.id_types import LeagueId
from gameswap.utils.logging import logger

router = APIRouter(prefix=config.api_prefix)


@router.post("/import/fields", response_model=ImportSummaryResponse)
async def import_fields(
    file: UploadFile = File(...),
    league_id: LeagueId = Depends(league_scope),
    identity: Identity = Depends(admin_guard),
) -> ImportSummaryResponse:
    await require_member(membership_store, identity.user_id, league_id)

    validated = validate_field_csv(read_csv_text(await file.read()))
    for validated_row in validated.rows:
        await upsert_field(league_id, validated_row.value)

    summary = ImportSummary(
        upserted=len(validated.rows),
        rejected=validated.summary.rejected,
        skipped=validated.summary.skipped,
        errors=validated.summary.errors,
    )
    logger.info(
        "Imported fields: league_id=%s upserted=%s rejected=%s skipped=%s",
        league_id,
        summary.upserted,
        summary.rejected,
        summary.skipped,
    )
    return ImportSummaryResponse(data=summary)
