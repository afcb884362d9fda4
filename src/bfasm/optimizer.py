"""
Peephole optimizer for the Brainfuck AST.

Adjacent operators of the same kind are packed into one run (`+++` becomes
Operator(ADD, 3)). Packing is local to one nesting level:
  - a loop body is optimized on its own
  - a loop resets the run, so nothing merges across it
  - '.' and ',' are never merged, each I/O event keeps its own node

Nothing else is rewritten: `+-` stays two nodes and loops are never removed.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .grammar import IO_TOKENS, Expression, Loop, Operator

logger = logging.getLogger(__name__)


def optimize_ast(ast: List[Expression]) -> List[Expression]:
    """Merge runs in place. Returns `ast` itself."""
    merged = _optimize_level(ast)
    logger.debug("optimizer merged %d nodes", merged)
    return ast


def _optimize_level(nodes: List[Expression]) -> int:
    prev: Optional[Operator] = None
    # indices of nodes folded into their predecessor
    removed: List[int] = []
    merged = 0

    for idx, node in enumerate(nodes):
        if isinstance(node, Loop):
            merged += _optimize_level(node.body)
            prev = None
            continue

        if prev is not None and node.kind not in IO_TOKENS and node.kind is prev.kind:
            prev.count += node.count
            removed.append(idx)
            continue

        prev = node

    for idx in reversed(removed):
        del nodes[idx]
    return merged + len(removed)
