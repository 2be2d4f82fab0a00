"""
Parcel Calendar Display Module

Plain-text rendering of computed calendar views for the terminal.
"""

from .text_view import render

__all__ = ['render']
