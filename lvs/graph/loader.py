import json
import os
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from lvs.exceptions import ErrorCode, LvsError
from lvs.sockets.node_kinds import format_validation_error

from .classes import Graph

logger = structlog.get_logger()


def graph_from_dict(raw: Mapping[str, Any], path: str = "<memory>") -> Graph:
    """Validates an already decoded graph payload."""
    if not isinstance(raw, Mapping):
        raise LvsError(ErrorCode.GRAPH_SCHEMA_MISMATCH, path=path, details="the top level must be an object with 'nodes' and 'edges'")
    try:
        return Graph.model_validate(raw)
    except ValidationError as e:
        raise LvsError(ErrorCode.GRAPH_SCHEMA_MISMATCH, path=path, details=format_validation_error(e))


def load_graph(path: str) -> Graph:
    """Reads a saved editor graph from disk."""
    abs_path = os.path.abspath(path)
    if not os.path.isfile(abs_path):
        raise LvsError(ErrorCode.GRAPH_FILE_NOT_FOUND, path=path)

    with open(abs_path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LvsError(ErrorCode.GRAPH_INVALID_JSON, path=path, details=str(e))

    graph = graph_from_dict(raw, path)
    logger.debug("graph_loaded", path=abs_path, nodes=len(graph.nodes), edges=len(graph.edges))
    return graph
