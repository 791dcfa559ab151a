"""
Org Chart Kernel — Deterministic Test Harness

Record builders and a seeded random directory generator producing
messy-but-realistic input: dangling manager references, manager cycles,
rows without email, duplicate emails, inactive rows.

Run:  py -3 -m org_chart.test_harness
"""

from __future__ import annotations

import json
import random
import sys
import os
from typing import List, Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.domain_types import EmployeeRecord
from org_chart.engine import OrgChartEngine

_FIRST_NAMES = [
    "Alice", "Bruno", "Camille", "David", "Élodie", "Farid", "Gaëlle",
    "Hugo", "Inès", "Jules", "Karim", "Léa", "Mathis", "Nadia", "Omar",
    "Pauline", "Quentin", "Rania", "Samir", "Thaïs",
]
_LAST_NAMES = [
    "Bernard", "Chaouachi", "Dubois", "Durand", "Girard", "Haddad",
    "Lefèvre", "Martin", "Mercier", "Petit", "Roux", "Zribi",
]
_MANAGER_TITLES = ["Manager", "Responsable Achat", "Directeur Finance", "Chef d'équipe"]
_STAFF_TITLES = ["Engineer", "Technicien", "Comptable", "Acheteur", "Assistant"]
_DEPARTMENTS = ["Achat", "Finance", "Digitale", "Qualité", "Commerce"]


def emp(
    email: Optional[str],
    manager: Optional[str] = None,
    title: str = "",
    first: str = "",
    last: str = "",
    manager2: Optional[str] = None,
    department: str = "",
    status: Optional[str] = None,
) -> EmployeeRecord:
    """Compact EmployeeRecord builder for tests."""
    return EmployeeRecord(
        id=email or first,
        first_name=first,
        last_name=last,
        email=email,
        manager_email_1=manager,
        manager_email_2=manager2,
        job_title=title,
        department=department,
        status=status,
    )


def generate_directory(seed: int, size: int) -> List[EmployeeRecord]:
    """
    Seeded directory of ``size`` rows under one CEO.

    Roughly: a quarter managers, the rest staff; some references point at
    unknown emails, at later rows (forward references), or form cycles.
    """
    rng = random.Random(seed)
    records: List[EmployeeRecord] = [
        emp("ceo@example.com", title="Plant Manager", first="Fethi", last="Chaouachi",
            department="CEO"),
    ]
    emails = ["ceo@example.com"]
    managers = ["ceo@example.com"]

    for i in range(1, size):
        first = rng.choice(_FIRST_NAMES)
        last = rng.choice(_LAST_NAMES)
        is_manager = rng.random() < 0.25
        title = rng.choice(_MANAGER_TITLES if is_manager else _STAFF_TITLES)
        roll = rng.random()
        if roll < 0.05:
            email = None
        elif roll < 0.08 and len(emails) > 1:
            email = rng.choice(emails[1:]).upper()
        else:
            email = f"{first.lower()}.{last.lower()}.{i}@example.com"

        ref = rng.random()
        if ref < 0.06:
            manager = "ghost@example.com"
        elif ref < 0.10:
            manager = f"forward.{i + 1}@example.com"
        elif ref < 0.13:
            manager = None
        else:
            manager = rng.choice(managers)

        status = "inactif" if rng.random() < 0.03 else rng.choice([None, "actif"])
        records.append(emp(
            email, manager, title, first, last,
            manager2=rng.choice([None, None, "ceo@example.com"]),
            department=rng.choice(_DEPARTMENTS),
            status=status,
        ))
        if email:
            emails.append(email.lower())
            if is_manager:
                managers.append(email.lower())

    # A closed two-person cycle unreachable from the CEO
    records.append(emp("loop.a@example.com", "loop.b@example.com", "Manager", "Loop", "A"))
    records.append(emp("loop.b@example.com", "loop.a@example.com", "Manager", "Loop", "B"))
    return records


def main() -> None:
    engine = OrgChartEngine(active_only=False)
    for seed, size in [(42, 25), (42, 200), (99, 200), (123, 1000)]:
        chart = engine.build(generate_directory(seed, size))
        print(json.dumps({
            "seed": seed,
            "size": size,
            "nodes": len(chart.layout.nodes),
            "tree_hash": chart.tree_hash,
            "fallback_count": chart.diagnostics["fallback_count"],
            "max_depth": chart.diagnostics["max_depth"],
        }))


if __name__ == "__main__":
    main()
