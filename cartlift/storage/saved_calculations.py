"""CartLift — Saved Calculations & Autosave.

Named input sets are kept as one JSON list under a single key; the autosave
slot is a separate key holding one input set.
"""

from typing import List, Optional

from pydantic import TypeAdapter

from cartlift.config import settings
from cartlift.core.logging import get_logger
from cartlift.models.analysis_models import SavedCalculation
from cartlift.models.input_models import CalculatorInputs
from cartlift.storage.key_value import KeyValueStore

logger = get_logger("storage.saved")

_saved_list = TypeAdapter(List[SavedCalculation])


class SavedCalculations:
    """Save / load / delete named calculations through an injected store."""

    def __init__(
        self,
        store: KeyValueStore,
        list_key: str = settings.saved_calculations_key,
        autosave_key: str = settings.autosave_key,
    ):
        self.store = store
        self.list_key = list_key
        self.autosave_key = autosave_key

    def list(self) -> List[SavedCalculation]:
        raw = self.store.get(self.list_key)
        if not raw:
            return []
        return _saved_list.validate_json(raw)

    def _write(self, calculations: List[SavedCalculation]) -> None:
        self.store.set(self.list_key, _saved_list.dump_json(calculations).decode())

    def save(self, name: str, inputs: CalculatorInputs) -> SavedCalculation:
        """Append a named copy of ``inputs``. Names need not be unique."""
        if not name.strip():
            raise ValueError("Please enter a name for this calculation")
        calculation = SavedCalculation(name=name.strip(), inputs=inputs.model_copy(deep=True))
        self._write(self.list() + [calculation])
        logger.info(f"Saved calculation {calculation.name}")
        return calculation

    def load(self, index: int) -> Optional[CalculatorInputs]:
        calculations = self.list()
        if not 0 <= index < len(calculations):
            return None
        return calculations[index].inputs

    def find(self, name: str) -> Optional[CalculatorInputs]:
        """Most recently saved calculation with this name."""
        for calculation in reversed(self.list()):
            if calculation.name == name:
                return calculation.inputs
        return None

    def delete(self, index: int) -> bool:
        calculations = self.list()
        if not 0 <= index < len(calculations):
            return False
        removed = calculations.pop(index)
        self._write(calculations)
        logger.info(f"Deleted calculation {removed.name}")
        return True

    def autosave(self, inputs: CalculatorInputs) -> None:
        self.store.set(self.autosave_key, inputs.model_dump_json())

    def load_autosave(self) -> Optional[CalculatorInputs]:
        raw = self.store.get(self.autosave_key)
        if not raw:
            return None
        return CalculatorInputs.model_validate_json(raw)
