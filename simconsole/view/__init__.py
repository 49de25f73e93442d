"""Read-only helpers for views rendering store state."""

from simconsole.view.tree import object_to_tree_view_data

__all__ = ["object_to_tree_view_data"]
