# ABOUTME: Extraction layer: wiki API access and infobox HTML mining
# ABOUTME: Pipeline Stage 1: Wikipedia -> raw infobox HTML -> identifier records

from .base import WikiInfoboxesError

__all__ = [
    "WikiInfoboxesError",
]
