"""User interfaces for codepreview."""
