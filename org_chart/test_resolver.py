"""
Hierarchy Resolver — Tests

Covers:
  - Reference example (manager chain + unresolvable manager)
  - Sibling ordering (managers first, collated first names)
  - Cycle safety and fallback placement
  - Empty input / no root candidate sentinel
  - Duplicate emails (warn-and-overwrite, nobody dropped)
  - Records without email, secondary manager, case-insensitive emails
  - Root strategies and injectable manager predicate
  - Idempotence and input-order independence
  - Deep chains (no recursion limit)

Run:  py -3 -m org_chart.test_resolver
"""

from __future__ import annotations

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.classification import referenced_manager_predicate, title_keyword_predicate
from org_chart.hashing import canonical_hash
from org_chart.invariants import validate_tree
from org_chart.resolver import build_email_index, resolve
from org_chart.roots import email_root, most_directs_root, name_match_root
from org_chart.test_harness import emp, generate_directory


_pass = 0
_fail = 0


def _test(name, fn):
    global _pass, _fail
    try:
        fn()
        print(f"  [PASS] {name}")
        _pass += 1
    except Exception as exc:
        print(f"  [FAIL] {name}: {exc}")
        _fail += 1


def _by_id(result):
    return {n.node_id: n for n in result.root.iter_nodes()}


def _child_ids(node):
    return [c.node_id for c in node.children]


def _reference_directory():
    return [
        emp("ceo@x.com", None, "Plant Manager", "Fethi", "Chaouachi"),
        emp("m1@x.com", "ceo@x.com", "Manager", "Marc", "Roux"),
        emp("e1@x.com", "m1@x.com", "Engineer", "Emma", "Petit"),
        emp("orphan@x.com", "ghost@x.com", "Engineer", "Omar", "Haddad"),
    ]


# ---------------------------------------------------------------------------
# Reference example
# ---------------------------------------------------------------------------

def test_reference_example():
    records = _reference_directory()
    result = resolve(records)
    assert result.ok
    assert result.root.node_id == "ceo@x.com"
    assert _child_ids(result.root) == ["m1@x.com", "orphan@x.com"]
    nodes = _by_id(result)
    assert _child_ids(nodes["m1@x.com"]) == ["e1@x.com"]
    assert nodes["ceo@x.com"].depth == 0
    assert nodes["m1@x.com"].depth == 1
    assert nodes["orphan@x.com"].depth == 1
    assert nodes["e1@x.com"].depth == 2
    assert nodes["m1@x.com"].is_manager_like
    assert not nodes["e1@x.com"].is_manager_like
    assert nodes["e1@x.com"].placement == "managed"
    validate_tree(result, records)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def test_sibling_order_managers_first():
    ceo = emp("ceo@x.com", None, "CEO", "Zed", "Boss")
    people = [
        emp("dana@x.com", "ceo@x.com", "Engineer", "Dana"),
        emp("bob@x.com", "ceo@x.com", "Manager", "Bob", "Jones"),
        emp("carl@x.com", "ceo@x.com", "Engineer", "Carl"),
        emp("alice@x.com", "ceo@x.com", "Director", "Alice", "Smith"),
    ]
    expected = ["alice@x.com", "bob@x.com", "carl@x.com", "dana@x.com"]
    assert _child_ids(resolve([ceo] + people).root) == expected
    assert _child_ids(resolve(list(reversed(people)) + [ceo]).root) == expected
    assert _child_ids(resolve([people[2], ceo, people[0], people[3], people[1]]).root) == expected


def test_sibling_order_accent_insensitive():
    ceo = emp("ceo@x.com", None, "CEO", "Boss")
    people = [
        emp("zoe@x.com", "ceo@x.com", "Acheteur", "Zoé"),
        emp("elodie@x.com", "ceo@x.com", "Acheteur", "Élodie"),
        emp("eric@x.com", "ceo@x.com", "Acheteur", "eric"),
    ]
    assert _child_ids(resolve([ceo] + people).root) == [
        "elodie@x.com", "eric@x.com", "zoe@x.com",
    ]


def test_fallback_nodes_sorted_with_direct_reports():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("zack@x.com", "ceo@x.com", "Engineer", "Zack"),
        emp("anna@x.com", None, "Engineer", "Anna", manager2="zack@x.com"),
    ]
    result = resolve(records)
    assert _child_ids(result.root) == ["anna@x.com", "zack@x.com"]
    assert _by_id(result)["anna@x.com"].placement == "fallback"


# ---------------------------------------------------------------------------
# Cycles and fallback
# ---------------------------------------------------------------------------

def test_cycle_falls_back_to_root():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("a@x.com", "b@x.com", "Manager", "Anne"),
        emp("b@x.com", "a@x.com", "Manager", "Ben"),
    ]
    result = resolve(records)
    nodes = _by_id(result)
    assert _child_ids(result.root) == ["a@x.com", "b@x.com"]
    assert nodes["a@x.com"].placement == "fallback"
    assert nodes["b@x.com"].placement == "fallback"
    assert nodes["a@x.com"].children == []
    assert nodes["a@x.com"].depth == 1 and nodes["b@x.com"].depth == 1
    validate_tree(result, records)


def test_self_reference_falls_back():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("me@x.com", "me@x.com", "Manager", "Narcisse"),
    ]
    result = resolve(records)
    assert _child_ids(result.root) == ["me@x.com"]
    assert _by_id(result)["me@x.com"].placement == "fallback"


def test_reports_of_non_manager_fall_back():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("eng@x.com", "ceo@x.com", "Engineer", "Eve"),
        emp("intern@x.com", "eng@x.com", "Intern", "Ian"),
    ]
    result = resolve(records)
    nodes = _by_id(result)
    assert nodes["eng@x.com"].children == []
    assert nodes["intern@x.com"].depth == 1
    assert nodes["intern@x.com"].placement == "fallback"


def test_referenced_manager_predicate_descends():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("eng@x.com", "ceo@x.com", "Engineer", "Eve"),
        emp("intern@x.com", "eng@x.com", "Intern", "Ian"),
    ]
    result = resolve(records, is_manager_like=referenced_manager_predicate(records))
    nodes = _by_id(result)
    assert _child_ids(nodes["eng@x.com"]) == ["intern@x.com"]
    assert nodes["intern@x.com"].depth == 2


def test_secondary_manager_not_used_for_placement():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("m1@x.com", "ceo@x.com", "Manager", "Mia"),
        emp("m2@x.com", "ceo@x.com", "Manager", "Max"),
        emp("e1@x.com", "m1@x.com", "Engineer", "Eli", manager2="m2@x.com"),
    ]
    nodes = _by_id(resolve(records))
    assert _child_ids(nodes["m1@x.com"]) == ["e1@x.com"]
    assert nodes["m2@x.com"].children == []


def test_emails_case_insensitive():
    records = [
        emp("CEO@X.com", None, "CEO", "Boss"),
        emp("m1@x.com", " ceo@x.COM ", "Manager", "Mia"),
        emp("E1@x.com", "M1@X.COM", "Engineer", "Eli"),
    ]
    result = resolve(records)
    nodes = _by_id(result)
    assert result.root.node_id == "ceo@x.com"
    assert _child_ids(nodes["m1@x.com"]) == ["e1@x.com"]


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------

def test_empty_list_sentinel():
    result = resolve([])
    assert result.root is None
    assert result.is_empty
    assert not result.ok
    assert result.node_count == 0


def test_no_root_candidate_sentinel():
    records = [
        emp("a@x.com", "b@x.com", "Manager"),
        emp("b@x.com", "a@x.com", "Manager"),
    ]
    result = resolve(records)
    assert result.root is None
    assert result.reason == "no root candidate"
    validate_tree(result, records)


# ---------------------------------------------------------------------------
# Data quality
# ---------------------------------------------------------------------------

def test_duplicate_email_later_wins():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("dup@x.com", "ceo@x.com", "Engineer", "First"),
        emp("DUP@x.com", "ceo@x.com", "Manager", "Second"),
        emp("sub@x.com", "dup@x.com", "Engineer", "Sub"),
    ]
    index, warnings = build_email_index(records)
    assert index["dup@x.com"] == 2
    assert len(warnings) == 1

    result = resolve(records)
    nodes = _by_id(result)
    assert len(result.warnings) == 1
    assert result.node_count == 4
    assert "row-1" in nodes
    assert nodes["row-1"].record.first_name == "First"
    assert nodes["dup@x.com"].record.first_name == "Second"
    assert _child_ids(nodes["dup@x.com"]) == ["sub@x.com"]
    validate_tree(result, records)


def test_record_without_email_placed_under_root():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("m1@x.com", "ceo@x.com", "Manager", "Mia"),
        emp(None, "m1@x.com", "Engineer", "Nomail"),
        emp("", None, "Engineer", "Blank"),
    ]
    result = resolve(records)
    nodes = _by_id(result)
    assert result.node_count == 4
    assert nodes["row-2"].depth == 1
    assert nodes["row-2"].placement == "fallback"
    assert nodes["row-3"].placement == "fallback"
    assert nodes["m1@x.com"].children == []


def test_every_record_placed_exactly_once():
    for seed in (1, 7, 42, 99):
        records = generate_directory(seed, 150)
        result = resolve(records)
        assert result.ok
        positions = [n.position for n in result.root.iter_nodes()]
        assert sorted(positions) == list(range(len(records)))
        validate_tree(result, records)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def test_most_directs_root_prefers_largest_team():
    records = [
        emp("solo@x.com", None, "Consultant", "Solo"),
        emp("ceo@x.com", None, "CEO", "Zed"),
        emp("a@x.com", "ceo@x.com", "Engineer", "Ann"),
        emp("b@x.com", "ceo@x.com", "Engineer", "Bea"),
    ]
    assert most_directs_root(records) == 1
    result = resolve(records)
    assert result.root.node_id == "ceo@x.com"
    assert "solo@x.com" in _child_ids(result.root)


def test_name_match_root():
    records = [
        emp("board@x.com", None, "Board", "Board"),
        emp("fethi@x.com", "board@x.com", "Plant Manager", "Fethi", "Chaouachi"),
        emp("m1@x.com", "fethi@x.com", "Manager", "Mia"),
    ]
    result = resolve(records, root_strategy=name_match_root("fethi", "CHAOUACHI"))
    assert result.root.node_id == "fethi@x.com"
    assert _child_ids(result.root) == ["m1@x.com", "board@x.com"]


def test_email_root_and_missing():
    records = _reference_directory()
    assert resolve(records, root_strategy=email_root("M1@x.com")).root.node_id == "m1@x.com"
    missing = resolve(records, root_strategy=email_root("nobody@x.com"))
    assert missing.root is None


def test_custom_keywords():
    records = [
        emp("ceo@x.com", None, "CEO", "Boss"),
        emp("lead@x.com", "ceo@x.com", "Team Lead", "Lou"),
        emp("dev@x.com", "lead@x.com", "Developer", "Dev"),
    ]
    default = _by_id(resolve(records))
    assert default["lead@x.com"].children == []
    custom = _by_id(resolve(records, is_manager_like=title_keyword_predicate(["lead"])))
    assert _child_ids(custom["lead@x.com"]) == ["dev@x.com"]


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------

def test_idempotent():
    records = generate_directory(42, 120)
    assert canonical_hash(resolve(records).root) == canonical_hash(resolve(records).root)


def test_input_order_independent():
    records = _reference_directory() + [
        emp("m2@x.com", "ceo@x.com", "Responsable Achat", "Nadia"),
        emp("e2@x.com", "m2@x.com", "Acheteur", "Hugo"),
        emp("e3@x.com", "m2@x.com", "Acheteur", "Inès"),
    ]
    h1 = canonical_hash(resolve(records).root)
    h2 = canonical_hash(resolve(list(reversed(records))).root)
    assert h1 == h2


def test_deep_chain():
    depth = 1500
    records = [emp("m0@x.com", None, "Manager", "M0")]
    for i in range(1, depth):
        records.append(emp(f"m{i}@x.com", f"m{i - 1}@x.com", "Manager", f"M{i}"))
    result = resolve(records)
    nodes = _by_id(result)
    assert nodes[f"m{depth - 1}@x.com"].depth == depth - 1
    validate_tree(result, records)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def main():
    print("\n" + "=" * 60)
    print("  Hierarchy Resolver Tests")
    print("=" * 60 + "\n")

    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            _test(name, fn)

    print(f"\n  Results: {_pass} passed, {_fail} failed")
    sys.exit(0 if _fail == 0 else 1)


if __name__ == "__main__":
    main()
