"""Parent-reference index over Argo CD resource trees."""

from rolloutscope.graph.index import GraphIndex

__all__ = ["GraphIndex"]
