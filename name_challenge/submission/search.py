"""
Name matching submission.

Contract:

setup(dataset_path):
- Called once before any search() call with the absolute path to the dataset CSV.
- Load, parse and index the dataset here.
- Time spent here is reported separately and does NOT count toward QPS.
- Optional: if not defined, the scorer skips it.

search(query):
- Input: query name string.
- Output: list of matching record ids from the dataset.
- Must return within the scorer's timeout (default 2000ms).

cleanup():
- Called once after all search() calls complete.
- Tear down resources (DB connections, temp files, ...).
- Optional: if not defined, the scorer skips it.

Any of the three may be a coroutine function.
"""

from typing import List


def setup(dataset_path: str) -> None:
    pass


def search(query: str) -> List[str]:
    return []


def cleanup() -> None:
    pass
