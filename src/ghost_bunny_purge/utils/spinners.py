import contextlib
from typing import Iterator

import yaspin
from yaspin.core import Yaspin


@contextlib.contextmanager
def spinner(text: str = "", **kwargs) -> Iterator[Yaspin]:
    """Spinner that finishes with a check mark, or a cross if the block raised."""
    with yaspin.yaspin(text=text, timer=True, **kwargs) as sp:
        try:
            yield sp
        except Exception:
            sp.fail("[✘]")
            raise
        sp.ok("[✔]")
