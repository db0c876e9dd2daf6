"""Test setup for handbook_lint."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


HANDBOOK = """\
# Engineering Handbook

## Table of Contents

1. [SOLID Principles](#solid-principles)
2. [CI/CD](#cicd)
3. [Security](#security)

## SOLID Principles

Keep classes focused.

### Single Responsibility

```python
class Report:
    def render(self):
        return "ok"
```

## CI/CD

- [x] Run tests on every push
- [ ] Deploy on tag

```yaml
stages: [build, test]
```

## Security

See [SOLID](#solid-principles) and [checks](#ci-cd).
"""


@pytest.fixture
def handbook_text() -> str:
    """A small handbook with one broken link and one unchecked snippet language."""
    return HANDBOOK
