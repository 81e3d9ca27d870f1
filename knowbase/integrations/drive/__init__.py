"""Google Drive integration for manual document templates."""
