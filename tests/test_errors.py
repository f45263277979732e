from __future__ import annotations

import copy
import pickle

import pytest

from checkpoint.core.domain.errors import (
    BodyReadError,
    ContentTypeInvalidError,
    ContentTypeMismatchError,
    ContentTypeMissingError,
    DecodeError,
    RequestError,
)


def _request_error() -> RequestError:
    return RequestError(
        method="GET",
        url="http://checkpoint.test/api/checkpoint/v1/identities/me",
        status_code=500,
        reason_phrase="Internal Server Error",
        body="x" * 600,
        message="Checkpoint",
    )


@pytest.mark.parametrize("clone", [copy.copy, copy.deepcopy, lambda err: pickle.loads(pickle.dumps(err))])
def test_request_error_survives_copy_and_pickle(clone):
    original = _request_error()

    restored = clone(original)

    assert type(restored) is RequestError
    assert str(restored) == str(original)
    assert (restored.method, restored.url, restored.status_code, restored.reason_phrase) == (
        original.method,
        original.url,
        original.status_code,
        original.reason_phrase,
    )
    assert restored.body == original.body
    assert restored.message == "Checkpoint"


@pytest.mark.parametrize(
    "error",
    [
        ContentTypeMissingError(),
        ContentTypeInvalidError("/json"),
        ContentTypeMismatchError("text/html"),
        BodyReadError("reset"),
        DecodeError("Input should be an object", size=6),
    ],
)
def test_decode_errors_survive_pickle(error):
    restored = pickle.loads(pickle.dumps(error))

    assert type(restored) is type(error)
    assert str(restored) == str(error)
    assert vars(restored) == vars(error)
