"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from resumebind.bindings import BindingStorage
from resumebind.fields import DataField, FieldKind


SAMPLE_TEMPLATE = """
<div class="resume">
  <h1>{{firstName}} {{surname}}</h1>
  <a href="mailto:{{email}}">{{email}}</a>
  <h2>[[FIELD:profession]]</h2>
  <ul>
    {{#each workExperience}}
    <li>{{jobTitle}} at {{employer}}</li>
    {{/each}}
  </ul>
  [[IF:photo]]
</div>
"""


@pytest_asyncio.fixture
async def binding_storage(tmp_path: Path) -> AsyncGenerator[BindingStorage, None]:
    """Create a binding storage backed by a temporary database."""
    storage = BindingStorage(tmp_path / "test_bindings.db")
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture
def sample_fields() -> list[DataField]:
    """A small field tree with a scalar, an object and a collection."""
    return [
        DataField(path="email", name="Email", description="Email address"),
        DataField(path="phone", name="Phone", description="Phone number"),
        DataField(
            path="workExperience",
            name="Work Experience",
            kind=FieldKind.ARRAY,
            description="Work experience history",
            children=[
                DataField(path="workExperience[].jobTitle", name="Job Title"),
                DataField(path="workExperience[].employer", name="Employer"),
            ],
        ),
    ]


@pytest.fixture
def sample_template() -> str:
    """Template markup using both token grammars."""
    return SAMPLE_TEMPLATE


# Configure pytest-asyncio
def pytest_configure(config):
    """Configure pytest with asyncio settings."""
    config.addinivalue_line("markers", "asyncio: mark test as async")
