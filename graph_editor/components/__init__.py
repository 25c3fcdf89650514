"""
Reusable UI Components
"""

from .edge_label_dialog import render_edge_label_dialog
from .label_input import render_label_input

__all__ = ['render_edge_label_dialog', 'render_label_input']
