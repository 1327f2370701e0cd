"""Rendering surfaces for commitscope views."""
