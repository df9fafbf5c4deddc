"""Registry and conjunction-table bootstrap (import side-effect)."""
from .api import set_conjunction_table, set_registry
from .attributes import standard as _standard  # noqa: F401
from .bootstrap import build_registry
from .reference.new_moons import load_conjunction_table

set_registry(build_registry())
set_conjunction_table(load_conjunction_table())
