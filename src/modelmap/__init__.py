"""
modelmap - dependency graph and execution ordering for spreadsheet models.

Workbooks become nodes whose ports are the variables listed on their INPUTS
and OUTPUTS sheets; wiring outputs to inputs yields an execution rank per node.
"""

__version__ = "0.1.0"

# Global config
from modelmap.config.singleton import get_config, set_config

# Graph engine
from modelmap.core import (
    Direction,
    Edge,
    Graph,
    GraphStore,
    Node,
    PortRef,
    PortSet,
    Ranked,
    RankResult,
    Unorderable,
    UnorderableReason,
    ValidationFailure,
    compute_ranks,
    find_cycles,
    layers,
    suggest_connections,
    validate,
)

# Exceptions
from modelmap.exceptions import (
    ConfigurationError,
    IngestionError,
    ModelMapError,
    WorkbookParseError,
    WorkbookReadError,
)

# Ingestion
from modelmap.ingestion import IngestionResult, parse_workbook, parse_workbook_async

# Session and presentation
from modelmap.session import ModelSession

# Logging utilities
from modelmap.utils.logging import get_logger, setup_logging, setup_logging_from_config
from modelmap.views import NodeView, rank_badge

__all__ = [
    # Graph engine
    "GraphStore",
    "Graph",
    "Node",
    "Edge",
    "PortRef",
    "PortSet",
    "Direction",
    "Ranked",
    "Unorderable",
    "UnorderableReason",
    "RankResult",
    "ValidationFailure",
    "compute_ranks",
    "find_cycles",
    "layers",
    "validate",
    "suggest_connections",
    # Ingestion
    "IngestionResult",
    "parse_workbook",
    "parse_workbook_async",
    # Session
    "ModelSession",
    "NodeView",
    "rank_badge",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Config
    "get_config",
    "set_config",
    # Exceptions
    "ModelMapError",
    "ConfigurationError",
    "IngestionError",
    "WorkbookReadError",
    "WorkbookParseError",
]
