"""Core package for CiteAnchor.

This package provides the host-independent citation engine:

- **patterns**: PatternLibrary building the citation regular expressions
- **citation_parser**: CitationParser splitting bracket contents into components
- **bibliography_indexer**: BibliographyIndexer anchoring numbered entries
- **citation_scanner**: MatchCursor and CitationScanner for forward scanning
- **validation_gate**: ValidationGate detecting orphan citations
- **link_binder**: LinkBinder linking components to their anchors
- **field_recovery**: FieldRecoveryMatcher restoring reference manager fields
- **linker**: CitationLinker orchestrating a complete run
- **host**: the collaborator interfaces a document host implements
"""

from core.linker import CitationLinker

__all__ = [
    "CitationLinker",
]
