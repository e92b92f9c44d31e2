"""
RESPLICE - Relevance-Scored Placement of Learned Impact in Curriculum vitae Entries

A heuristic resume tailoring engine that takes a document's plain-text extraction
plus caller-supplied "technology -> achievement bullet" groups, and decides which
bullets to keep, which sections they belong to, and where to splice them back in.

Architecture:
- Intake Context: Request validation and section segmentation
- Targeting Context: Relevance scoring, extraction planning, bullet distribution
- Rendering Context: Line edits, paragraph-stream rebuild, previews, document codec
"""

__version__ = "0.1.0"
