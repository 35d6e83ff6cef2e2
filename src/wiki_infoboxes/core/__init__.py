# ABOUTME: Business logic and orchestration layer
# ABOUTME: Raw page acquisition, infobox parsing and per-template update runs

"""
Core Layer: Business logic and workflow orchestration

This layer handles:
- Domain records for raw pages and parsed identifiers
- Full and incremental acquisition of raw infobox HTML
- Parsing raw pages into identifier records
- Per-template update runs with snapshot archiving

Data Flow: extraction/ wiki access -> records -> persistence/ snapshots
"""

from .models import IdentifierRecord, PageRecord, ParsedPageRecord

# Import services on-demand to avoid circular imports
# Use: from wiki_infoboxes.core.service import InfoboxUpdateService

__all__ = [
    "IdentifierRecord",
    "PageRecord",
    "ParsedPageRecord",
]
