"""
Hierarchy Builder.

Turns the flat folder list into a tree for display.
"""

from collections.abc import Iterable, Iterator

from notekeeper.organizer.entities import Folder, FolderNode


def build_hierarchy(folders: Iterable[Folder]) -> list[FolderNode]:
    """
    Build the folder tree.

    Every folder appears exactly once: at the root when it has no parent,
    under its parent otherwise. A folder whose parent is not in the list
    is promoted to the root. Input order is kept among siblings.

    Args:
        folders: Flat folder collection

    Returns:
        Root nodes, each carrying its children recursively
    """
    folders = list(folders)
    nodes = {
        folder.id: FolderNode(**folder.model_dump(exclude={"children"}), children=[])
        for folder in folders
    }

    roots: list[FolderNode] = []
    for folder in folders:
        node = nodes[folder.id]
        parent = nodes.get(folder.parent_id) if folder.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


def iter_tree(nodes: Iterable[FolderNode], depth: int = 0) -> Iterator[tuple[int, FolderNode]]:
    """Yield (depth, node) pairs depth-first, parents before children."""
    for node in nodes:
        yield depth, node
        yield from iter_tree(node.children, depth + 1)


def descendant_ids(folders: Iterable[Folder], folder_id: int) -> set[int]:
    """Ids of every folder below `folder_id`, cycle safe."""
    children: dict[int, list[int]] = {}
    for folder in folders:
        if folder.parent_id is not None:
            children.setdefault(folder.parent_id, []).append(folder.id)

    found: set[int] = set()
    stack = list(children.get(folder_id, []))
    while stack:
        current = stack.pop()
        if current in found or current == folder_id:
            continue
        found.add(current)
        stack.extend(children.get(current, []))
    return found
