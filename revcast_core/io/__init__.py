from revcast_core.io.config import (  # noqa: F401
    load_scenario_adjustment,
    load_simulation_request,
    parse_scenario_adjustment,
    parse_simulation_request,
)
from revcast_core.io.payload import response_payload, result_to_json  # noqa: F401

__all__ = [
    "load_scenario_adjustment",
    "load_simulation_request",
    "parse_scenario_adjustment",
    "parse_simulation_request",
    "response_payload",
    "result_to_json",
]
