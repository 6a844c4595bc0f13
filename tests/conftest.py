"""
Pytest fixtures for the extraction tests.
"""

import pytest

from ixtract.parser.document import load_document
from tests.fixtures import INLINE_FILING


@pytest.fixture(params=["lxml", "html.parser"])
def backend(request) -> str:
    return request.param


@pytest.fixture
def inline_doc(backend):
    return load_document(INLINE_FILING, backend=backend)
