"""Application layer: token lifecycle, media resolution and command handlers."""
