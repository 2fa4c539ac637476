import itertools
from functools import cmp_to_key

from human_json import DEFAULT_PRIORITY_KEYS, KeyPriorityComparator


def test_priority_order():
    comparator = KeyPriorityComparator(["name", "version"])
    keys = ["z", "name", "version", "a"]
    assert comparator.sorted_keys(keys) == ["name", "version", "a", "z"]


def test_default_priority_keys():
    comparator = KeyPriorityComparator()
    assert comparator.priority_keys == DEFAULT_PRIORITY_KEYS
    keys = ["errors", "zebra", "date", "version", "value", "id", "name", "alpha"]
    assert comparator.sorted_keys(keys) == [
        "name",
        "id",
        "value",
        "version",
        "date",
        "errors",
        "alpha",
        "zebra",
    ]


def test_no_priority_keys():
    comparator = KeyPriorityComparator([])
    assert comparator.sorted_keys(["z", "custom", "a"]) == ["a", "custom", "z"]


def test_case_insensitive_priority():
    comparator = KeyPriorityComparator(["Name", "id"])
    assert comparator.rank("NAME") == 0
    assert comparator.rank("name") == 0
    assert comparator.rank("ID") == 1
    assert comparator.rank("other") is None
    # Original casing is kept
    assert comparator.sorted_keys(["b", "ID", "nAmE"]) == ["nAmE", "ID", "b"]


def test_case_insensitive_lexicographic():
    comparator = KeyPriorityComparator([])
    assert comparator.sorted_keys(["b", "C", "a"]) == ["a", "b", "C"]


def test_casing_tie_break():
    comparator = KeyPriorityComparator(["name"])
    assert comparator.sorted_keys(["b", "B"]) == ["B", "b"]
    assert comparator.sorted_keys(["B", "b"]) == ["B", "b"]
    assert comparator.sorted_keys(["name", "Name"]) == ["Name", "name"]
    assert comparator.compare("B", "b") < 0
    assert comparator.compare("b", "b") == 0


def test_compare():
    comparator = KeyPriorityComparator(["first", "second"])
    assert comparator.compare("first", "second") < 0
    assert comparator.compare("second", "first") > 0
    assert comparator.compare("second", "aaa") < 0
    assert comparator.compare("aaa", "first") > 0
    assert comparator.compare("aaa", "bbb") < 0


def test_duplicate_priority_keys():
    comparator = KeyPriorityComparator(["b", "a", "B"])
    assert comparator.rank("b") == 0
    assert comparator.sorted_keys(["a", "b"]) == ["b", "a"]


def test_total_order():
    comparator = KeyPriorityComparator(["name", "id"])
    keys = ["name", "Name", "id", "ID", "a", "A", "b", "_x", "10", "2"]

    for a, b in itertools.product(keys, repeat=2):
        # Antisymmetry
        assert comparator.compare(a, b) == -comparator.compare(b, a)
        if comparator.compare(a, b) == 0:
            assert a == b

    for a, b, c in itertools.product(keys, repeat=3):
        # Transitivity
        if comparator.compare(a, b) < 0 and comparator.compare(b, c) < 0:
            assert comparator.compare(a, c) < 0

    expected = comparator.sorted_keys(keys)
    for permutation in itertools.islice(itertools.permutations(keys), 200):
        assert comparator.sorted_keys(permutation) == expected
        assert sorted(permutation, key=cmp_to_key(comparator.compare)) == expected
