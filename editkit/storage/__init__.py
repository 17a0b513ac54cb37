"""
Object storage backends for overlay retrieval.
"""
from .local import LocalObjectFetcher
from .http import HttpObjectFetcher

__all__ = ['LocalObjectFetcher', 'HttpObjectFetcher']
