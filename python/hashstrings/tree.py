'''Flattening of a sorted record list into a pointer-free binary search tree.

    How to search the table (this is what `findHash` in libhashstrings.h does):

      1. Start with index = 0.
      2. While index != LEAF:

         2.1. If the node's hash equals the query, its `target` is the answer.
         2.2. Otherwise continue with `lower` if the query is smaller, else `higher`.

      3. The query is not in the table.

    Nodes are numbered in pre-order, so every child sits at a larger index than
    its parent and the root is always at index 0.

'''
import collections
import logging

from .errors import CapacityError, CollisionError, HashStringsError

log = logging.getLogger(__name__)

# Upper limit on the contents of the data type used to store node indices + 1.
INDEX_LIMIT = 1 << 16  # uint16_t
LEAF        = INDEX_LIMIT - 1

TreeNode = collections.namedtuple('TreeNode', 'hash text target lower higher')
_LOWER   = TreeNode._fields.index('lower')
_HIGHER  = TreeNode._fields.index('higher')


def sort_records(records):
    '''[HashRecord] -> [HashRecord] ordered by hash, without exact duplicates.'''
    ordered = []
    for record in sorted(records, key=lambda r: r.hash):
        if ordered and ordered[-1].hash == record.hash:
            if ordered[-1] == record:
                log.debug('dropping duplicate alias "%s"', record.text)
                continue
            raise CollisionError(ordered[-1], record)
        ordered.append(record)
    return ordered


def build_tree(records):
    '''[HashRecord] -> [TreeNode]

        Each contiguous range `[offset, offset + length)` of the sorted records
        becomes the node at `offset + length // 2`, with the part to its left as
        the lower subtree and the part to its right as the higher one.

    '''
    ordered = sort_records(records)
    if len(ordered) > LEAF:
        raise CapacityError('too many keywords: {} (at most {})'.format(len(ordered), LEAF))

    nodes = []
    stack = [(0, len(ordered), None, None)] if ordered else []
    while stack:
        offset, length, parent, slot = stack.pop()
        split = length // 2
        index = len(nodes)
        record = ordered[offset + split]
        nodes.append([record.hash, record.text, record.target, LEAF, LEAF])
        if parent is not None:
            nodes[parent][slot] = index
        # lower half is popped first, so its whole subtree is numbered before the higher one
        if length - split - 1 > 0:
            stack.append((offset + split + 1, length - split - 1, index, _HIGHER))
        if split > 0:
            stack.append((offset, split, index, _LOWER))
    return [TreeNode(*node) for node in nodes]


def find(nodes, hash: int) -> int:
    '''Index of the node holding `hash`, or LEAF.'''
    index = 0 if nodes else LEAF
    while index != LEAF:
        node = nodes[index]
        if hash == node.hash:
            return index
        index = node.lower if hash < node.hash else node.higher
    return LEAF


def check_tree(nodes):
    '''Raise HashStringsError unless `nodes` is a pre-order numbered search tree covering every node.'''
    seen = set()
    stack = [(0, -1, 1 << 64)] if nodes else []
    while stack:
        index, low, high = stack.pop()
        if index in seen:
            raise HashStringsError('node {} reachable twice'.format(index))
        seen.add(index)
        node = nodes[index]
        if not low < node.hash < high:
            raise HashStringsError('node {} out of order'.format(index))
        for child, lo, hi in ((node.lower, low, node.hash), (node.higher, node.hash, high)):
            if child != LEAF:
                if not index < child < len(nodes):
                    raise HashStringsError('node {} has a bad child {}'.format(index, child))
                stack.append((child, lo, hi))
    if len(seen) != len(nodes):
        raise HashStringsError('unreachable nodes in the tree')
