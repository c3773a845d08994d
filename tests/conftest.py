import copy
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

from fakes import disease_payload, farming_payload
from kisanai.dependencies import limiter
from kisanai.services.disease.constants import DEFAULT_DISEASE_RESULT


@pytest.fixture(autouse=True)
def no_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def disease_completion():
    return "```json\n" + json.dumps(disease_payload(), ensure_ascii=False) + "\n```"


@pytest.fixture
def farming_completion():
    return "Here is your report:\n" + json.dumps(farming_payload())


@pytest.fixture
def default_disease():
    return copy.deepcopy(DEFAULT_DISEASE_RESULT)
