"""Document browser: virtualized directory listing view-model.

Subpackages:
- model: immutable documents, load results and mime helpers
- view_model: row model, thumbnails, display state, selection, orchestration
- sources: external collaborators (query/thumbnail/preference/delete) and the
  local-filesystem implementations
"""
