"""
Shared test infrastructure for tsoverride.

Modules:
- file_utils: creating files and directories
- members: building engine model objects straight from source text,
  without a parser
- tree_sitter_utils: availability check for the TypeScript grammar
"""
