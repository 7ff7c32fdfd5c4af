from __future__ import annotations

from collections import Counter
from typing import List

import pytest


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Parametrized ids double as case names; two cases sharing one is a typo."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    duplicates = sorted(nodeid for nodeid, n in counts.items() if n > 1)
    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
        raise pytest.UsageError(f"duplicate test ids:\n{lines}")
