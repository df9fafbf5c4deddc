from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Protocol, Tuple

from .errors import UnknownCriterionError
from .types import CriterionMeta, CriterionResult

class CriterionEvaluator(Protocol):
    def __call__(self, d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult: ...

@dataclass
class CriterionRegistry:
    _criteria: Dict[str, Tuple[CriterionEvaluator, CriterionMeta]]

    def get(self, name: str) -> CriterionEvaluator:
        return self._entry(name)[0]

    def meta(self, name: str) -> CriterionMeta:
        return self._entry(name)[1]

    def _entry(self, name: str) -> Tuple[CriterionEvaluator, CriterionMeta]:
        if name not in self._criteria:
            raise UnknownCriterionError(f"Unknown criterion '{name}'. Available: {sorted(self._criteria)}")
        return self._criteria[name]

    def __contains__(self, name: object) -> bool:
        return name in self._criteria

    def list(self) -> List[str]:
        return list(self._criteria.keys())

    def register(
        self,
        name: str,
        evaluator: CriterionEvaluator,
        meta: CriterionMeta,
        *,
        overwrite: bool = False,
    ) -> None:
        if (not overwrite) and (name in self._criteria):
            raise KeyError(f"Criterion '{name}' already exists. Use overwrite=True to replace.")
        self._criteria[name] = (evaluator, meta)
