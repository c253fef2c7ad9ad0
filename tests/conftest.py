import re
from pathlib import Path

import pytest

from openapi_to_node.builder import BuilderConfig
from openapi_to_node.collector import BaseOperationsCollector
from openapi_to_node.naming import DefaultOperationParser, DefaultResourceParser
from openapi_to_node.text import start_case

FIXTURES = Path(__file__).parent / "fixtures"


class CustomOperationParser(DefaultOperationParser):
    """``EntityController_list`` -> ``List``."""

    def name(self, operation, context):
        operation_id = "_".join(operation["operationId"].split("_")[1:]) or operation["operationId"]
        return start_case(operation_id)

    def value(self, operation, context):
        return self.name(operation, context)

    def action(self, operation, context):
        return operation.get("summary") or self.name(operation, context)

    def description(self, operation, context):
        return operation.get("description") or operation.get("summary") or ""


class CustomResourceParser(DefaultResourceParser):
    def value(self, tag):
        return start_case(re.sub(r"[^a-zA-Z0-9_-]", "", tag["name"]))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def custom_config() -> BuilderConfig:
    return BuilderConfig(operation=CustomOperationParser(), resource=CustomResourceParser())


@pytest.fixture
def custom_base_config() -> BuilderConfig:
    return BuilderConfig(
        operation=CustomOperationParser(),
        resource=CustomResourceParser(),
        collector=BaseOperationsCollector,
    )
