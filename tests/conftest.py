import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


class Spy:
    """Records how often ``fn`` was called and with what arguments."""

    def __init__(self) -> None:
        self.count = 0
        self.last_args: Optional[Tuple[Any, ...]] = None
        self.last_kwargs: Optional[Dict[str, Any]] = None

    def fn(self, *args: Any, **kwargs: Any) -> None:
        self.count += 1
        self.last_args = args
        self.last_kwargs = kwargs


@pytest.fixture(autouse=True)
def _configure_logging():
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture()
def make_spy() -> Callable[[], Spy]:
    return Spy
