from .analyzer import DEFAULT_DOCUMENT, GraphAnalyzer, analyze_graph
from .classes import EdgeIssue, Graph, GraphEdge, GraphNode, GraphReport, NodeReport
from .loader import graph_from_dict, load_graph
