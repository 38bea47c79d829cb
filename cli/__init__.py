"""CLI package for Library Desk"""
from .main import cli

__all__ = ['cli']
