"""
Suite document loading and validation.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .errors import SuiteValidationError
from .models import DatasetName, TestSuite

logger = logging.getLogger(__name__)


def load_suite(
    path: Union[str, Path],
    expected_dataset: Optional[Union[DatasetName, str]] = None
) -> TestSuite:
    """Load a JSON suite document and validate it against the requested dataset."""
    logger.info(f"Loading suite from {path}")

    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Suite file not found: {path}")

    try:
        text = path_obj.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise SuiteValidationError(f"Cannot read suite {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SuiteValidationError(f"Error parsing suite {path}: {e}") from e

    suite = parse_suite(data, source=str(path))

    if expected_dataset is not None:
        expected = DatasetName(expected_dataset)
        if suite.dataset != expected:
            raise SuiteValidationError(
                f"Suite dataset mismatch: suite={suite.dataset.value}, arg={expected.value}")

    for case in suite.cases:
        # Only meaningful as a negative control; flag it in case it is a labeling slip
        if not case.expected_ids:
            logger.warning(f"Case '{case.id}' has 0 expected ids")

    logger.info(f"Loaded suite '{suite.name}' with {len(suite.cases)} cases")
    return suite


def parse_suite(data: object, source: str = "<suite>") -> TestSuite:
    """Validate an already-decoded suite document."""
    try:
        return TestSuite.model_validate(data)
    except ValidationError as e:
        raise SuiteValidationError(f"Invalid suite {source}:\n{e}") from e
