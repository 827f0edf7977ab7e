import copy
import json

import pytest

FACT_PAYLOAD = {
    "used": False,
    "source": "api",
    "type": "cat",
    "deleted": False,
    "_id": "591f98803b90f7150a19c151",
    "__v": 0,
    "text": "Cats make about 100 different sounds.",
    "updatedAt": "2020-06-30T20:20:33.478Z",
    "createdAt": "2018-01-04T01:10:54.673Z",
    "status": {"verified": True, "sentCount": 1},
    "user": "5a9ac18c7478810ea6c06381",
}


@pytest.fixture
def fact_payload() -> dict:
    return copy.deepcopy(FACT_PAYLOAD)


@pytest.fixture
def fact_body(fact_payload) -> str:
    return json.dumps(fact_payload)
