"""Backends for form view generation (markup and code samples)."""

from .markup_generator import render_markup
from .code_samples import Target, ANCHORS, anchor_for, render

__all__ = ["Target", "ANCHORS", "anchor_for", "render", "render_markup"]
