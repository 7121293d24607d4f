"""Reply threading: flat comment list to a forest of CommentNode."""

from collections.abc import Sequence
from uuid import UUID

from champions.core.modules.comment.models import Comment, CommentNode


def build_comment_tree(comments: Sequence[Comment]) -> list[CommentNode]:
    """Nest comments under their parents, preserving input order at every level.

    `comments` is expected in ascending `created_at` order. All nodes are
    indexed before any is attached, so a child listed before its parent still
    lands under it. A comment whose parent is missing becomes a root.
    """
    nodes = [CommentNode.model_validate(comment.model_dump()) for comment in comments]
    by_id: dict[UUID, CommentNode] = {node.id: node for node in nodes}

    roots: list[CommentNode] = []
    parents: dict[UUID, CommentNode] = {}
    for node in nodes:
        parent = by_id.get(node.parent_id) if node.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
            parents[node.id] = parent

    _promote_unreachable(nodes, roots, parents)
    return roots


def _promote_unreachable(nodes: list[CommentNode], roots: list[CommentNode], parents: dict[UUID, CommentNode]) -> None:
    """Break parent cycles so every comment stays in the forest.

    A node caught in a cycle is detached from its parent and becomes a root,
    earliest first. Roots keep input order.
    """
    reached: set[UUID] = set()
    for root in roots:
        _mark(root, reached)
    if len(reached) == len(nodes):
        return

    position = {node.id: index for index, node in enumerate(nodes)}
    for node in nodes:
        if node.id in reached:
            continue
        parent = parents.pop(node.id)
        parent.children[:] = [child for child in parent.children if child is not node]
        roots.append(node)
        _mark(node, reached)
    roots.sort(key=lambda root: position[root.id])


def _mark(node: CommentNode, reached: set[UUID]) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        reached.add(current.id)
        stack.extend(child for child in current.children if child.id not in reached)


def count_nodes(forest: Sequence[CommentNode]) -> int:
    """Total number of comments in a forest."""
    total = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.children)
    return total
