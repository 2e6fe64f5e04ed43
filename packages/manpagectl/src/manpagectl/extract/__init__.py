"""Block reference extraction."""

from .blocks import BlockDoc, collect_block_docs, declared_blocks, render_blocks_markdown, write_blocks_markdown

__all__ = ["BlockDoc", "collect_block_docs", "declared_blocks", "render_blocks_markdown", "write_blocks_markdown"]
