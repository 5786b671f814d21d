"""Assets API: the catalogue of tradeable assets per instrument."""

from fastapi import APIRouter, Depends

from journal.api.deps import get_current_user
from journal.models.enums import Instrument
from journal.utils.constants import assets_for_instrument

router = APIRouter(prefix="/api/assets", tags=["assets"], dependencies=[Depends(get_current_user)])


@router.get("/instruments")
def list_instruments():
    return [instrument.value for instrument in Instrument]


@router.get("")
def list_assets(instrument: str):
    """Assets offered for an instrument; unknown instruments have none."""
    return assets_for_instrument(instrument)
