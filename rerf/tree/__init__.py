"""Growth of single randomized oblique trees."""

from rerf.tree.builder import Tree, TreeBuilder, build_tree
from rerf.tree.sampling import draw_sample

__all__ = ["Tree", "TreeBuilder", "build_tree", "draw_sample"]
