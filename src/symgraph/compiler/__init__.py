"""
Compiler Package.

Defines the canonical, index-addressed graph representation, the lowering
from symbolic graphs into it, and the algorithms that prefer array
addressing: backward-pass synthesis and shape inference.
"""

from symgraph.compiler.static_graph import StaticEntry, StaticGraph, StaticNode, to_static_graph

__all__ = ["StaticEntry", "StaticGraph", "StaticNode", "to_static_graph"]
