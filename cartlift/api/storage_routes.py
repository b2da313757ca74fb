"""CartLift — Saved Calculation API Routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from cartlift.database import get_session
from cartlift.core.logging import get_logger
from cartlift.models.input_models import CalculatorInputs
from cartlift.storage.key_value import SqlKeyValueStore
from cartlift.storage.saved_calculations import SavedCalculations

logger = get_logger("api.storage")

router = APIRouter(prefix="/saved", tags=["Saved Calculations"])


class SaveRequest(BaseModel):
    name: str
    inputs: CalculatorInputs


def get_saved_calculations(session: Session = Depends(get_session)) -> SavedCalculations:
    """Dependency — saved calculations over the SQL key-value store."""
    return SavedCalculations(SqlKeyValueStore(session))


@router.get("")
async def list_saved(saved: SavedCalculations = Depends(get_saved_calculations)):
    calculations = saved.list()
    return {
        "status": "success",
        "count": len(calculations),
        "results": [c.model_dump(mode="json") for c in calculations],
    }


@router.post("")
async def save(request: SaveRequest, saved: SavedCalculations = Depends(get_saved_calculations)):
    try:
        calculation = saved.save(request.name, request.inputs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "success", "saved": calculation.model_dump(mode="json")}


@router.get("/autosave")
async def load_autosave(saved: SavedCalculations = Depends(get_saved_calculations)):
    inputs = saved.load_autosave()
    if inputs is None:
        return {"status": "no_data", "message": "No auto-saved data found"}
    return {"status": "success", "inputs": inputs.model_dump(mode="json")}


@router.put("/autosave")
async def autosave(inputs: CalculatorInputs, saved: SavedCalculations = Depends(get_saved_calculations)):
    saved.autosave(inputs)
    return {"status": "success"}


@router.get("/{index}")
async def load(index: int, saved: SavedCalculations = Depends(get_saved_calculations)):
    inputs = saved.load(index)
    if inputs is None:
        raise HTTPException(status_code=404, detail=f"No saved calculation at {index}")
    return {"status": "success", "inputs": inputs.model_dump(mode="json")}


@router.delete("/{index}")
async def delete(index: int, saved: SavedCalculations = Depends(get_saved_calculations)):
    if not saved.delete(index):
        raise HTTPException(status_code=404, detail=f"No saved calculation at {index}")
    logger.info(f"Deleted saved calculation {index}", extra={"endpoint": "/saved"})
    return {"status": "success"}
