from __future__ import annotations
from calhijri.core.engine import CriterionRegistry
from calhijri.engines.criteria import EVALUATORS
from calhijri.engines.specs import CRITERIA, CRITERION_IDS

def build_registry() -> CriterionRegistry:
    criteria = {}
    for name in CRITERION_IDS:
        criteria[name] = (EVALUATORS[name], CRITERIA[name])
    return CriterionRegistry(criteria)
