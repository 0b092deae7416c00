from .aggregate_scenario import AggregateScenario
from .projection_scenario import ProjectionScenario

__all__ = [
    "AggregateScenario",
    "ProjectionScenario",
]
