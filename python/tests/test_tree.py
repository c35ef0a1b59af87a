'''Tests for the flat search tree.

These check shape guarantees (search order, pre-order numbering) and that every
record can be found again by walking the tree from index 0.
'''

import random

import pytest

from hashstrings.errors import CapacityError, CollisionError, HashStringsError
from hashstrings.hasher import HashRecord
from hashstrings.tree import LEAF, TreeNode, build_tree, check_tree, find, sort_records


def make_records(hashes):
    return [HashRecord(h, 'w{}'.format(i), i + 1) for i, h in enumerate(hashes)]


def random_hashes(rng, count):
    '''`count` distinct 64-bit hashes; the largest possible one is always included.'''
    hashes = [(1 << 64) - 1]
    seen = set(hashes)
    while len(hashes) < count:
        h = rng.getrandbits(64)
        if h not in seen:
            seen.add(h)
            hashes.append(h)
    return hashes


def subtree_hashes(nodes, index):
    if index == LEAF:
        return []
    node = nodes[index]
    return subtree_hashes(nodes, node.lower) + [node.hash] + subtree_hashes(nodes, node.higher)


class TestBuildTree:
    '''Tests for build_tree.'''

    def test_empty(self):
        assert build_tree([]) == []

    def test_single(self):
        assert build_tree(make_records([7])) == [TreeNode(7, 'w0', 1, LEAF, LEAF)]

    def test_three(self):
        nodes = build_tree(make_records([30, 10, 20]))
        assert nodes == [
            TreeNode(20, 'w2', 3, 1, 2),
            TreeNode(10, 'w1', 2, LEAF, LEAF),
            TreeNode(30, 'w0', 1, LEAF, LEAF),
        ]

    def test_four_uses_upper_median(self):
        nodes = build_tree(make_records([1, 2, 3, 4]))
        assert [(n.hash, n.lower, n.higher) for n in nodes] == [
            (3, 1, 3),
            (2, 2, LEAF),
            (1, LEAF, LEAF),
            (4, LEAF, LEAF),
        ]

    def test_seven_is_complete(self):
        nodes = build_tree(make_records(range(7)))
        assert [n.hash for n in nodes] == [3, 1, 0, 2, 5, 4, 6]
        assert all(n.lower == n.higher == LEAF for n in nodes if n.hash % 2 == 0)

    @pytest.mark.parametrize('count', list(range(1, 34)) + [100, 257, 1000])
    def test_invariants(self, count):
        rng = random.Random(count)
        records = make_records(random_hashes(rng, count))
        nodes = build_tree(records)

        assert len(nodes) == count
        check_tree(nodes)
        # in-order walk gives the sorted hashes
        assert subtree_hashes(nodes, 0) == sorted(r.hash for r in records)
        for i, node in enumerate(nodes):
            assert all(h < node.hash for h in subtree_hashes(nodes, node.lower))
            assert all(h > node.hash for h in subtree_hashes(nodes, node.higher))
            assert node.lower == LEAF or node.lower > i
            assert node.higher == LEAF or node.higher > i

    @pytest.mark.parametrize('count', [1, 2, 5, 64, 1000])
    def test_round_trip(self, count):
        rng = random.Random(-count)
        records = make_records(random_hashes(rng, count))
        nodes = build_tree(records)
        for record in records:
            i = find(nodes, record.hash)
            assert i != LEAF
            assert nodes[i].target == record.target
            assert nodes[i].text == record.text

    def test_depth_is_logarithmic(self):
        nodes = build_tree(make_records(range(1023)))

        def depth(index):
            if index == LEAF:
                return 0
            return 1 + max(depth(nodes[index].lower), depth(nodes[index].higher))

        assert depth(0) == 10

    def test_capacity(self):
        with pytest.raises(CapacityError):
            build_tree(make_records(range(LEAF + 1)))


class TestSortRecords:
    '''Tests for sort_records.'''

    def test_sorted(self):
        assert [r.hash for r in sort_records(make_records([5, 3, 9, 1]))] == [1, 3, 5, 9]

    def test_collision(self):
        records = [HashRecord(42, 'ab', 1), HashRecord(7, 'x', 2), HashRecord(42, 'ba', 3)]
        with pytest.raises(CollisionError) as info:
            sort_records(records)
        assert {info.value.first.text, info.value.second.text} == {'ab', 'ba'}
        assert 'ab' in str(info.value) and 'ba' in str(info.value)

    def test_same_text_different_target(self):
        with pytest.raises(CollisionError):
            build_tree([HashRecord(42, 'if', 1), HashRecord(42, 'if', 2)])

    def test_exact_duplicate_is_dropped(self):
        records = [HashRecord(42, 'if', 1), HashRecord(7, 'x', 2), HashRecord(42, 'if', 1)]
        assert sort_records(records) == [HashRecord(7, 'x', 2), HashRecord(42, 'if', 1)]


class TestFind:
    '''Tests for find and check_tree.'''

    def test_missing(self):
        nodes = build_tree(make_records([10, 20, 30]))
        for h in (0, 15, 25, 35, (1 << 64) - 1):
            assert find(nodes, h) == LEAF

    def test_empty(self):
        assert find([], 123) == LEAF

    def test_check_rejects_bad_order(self):
        nodes = [TreeNode(20, 'a', 1, 1, LEAF), TreeNode(30, 'b', 2, LEAF, LEAF)]
        with pytest.raises(HashStringsError):
            check_tree(nodes)

    def test_check_rejects_backward_child(self):
        nodes = [TreeNode(20, 'a', 1, LEAF, LEAF), TreeNode(10, 'b', 2, 0, LEAF)]
        with pytest.raises(HashStringsError):
            check_tree(nodes)

    def test_check_rejects_unreachable(self):
        nodes = [TreeNode(20, 'a', 1, LEAF, LEAF), TreeNode(30, 'b', 2, LEAF, LEAF)]
        with pytest.raises(HashStringsError) as info:
            check_tree(nodes)
        assert not isinstance(info.value, AssertionError)
        assert 'unreachable' in str(info.value)

    def test_random_hashes_cover_high_half(self):
        hashes = random_hashes(random.Random(1), 200)
        assert len(set(hashes)) == 200
        assert max(hashes) == (1 << 64) - 1
        assert all(0 <= h < 1 << 64 for h in hashes)
