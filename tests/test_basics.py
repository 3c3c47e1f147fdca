"""Basic unit tests for the genai-client package."""

from genai_client import (
    APIError,
    AsyncGenAI,
    AsyncSession,
    ConnectionError,
    GenAI,
    GenAIError,
    InvalidArgumentError,
    InvalidStateError,
    Live,
    Pager,
    PagedItem,
    __version__,
)
from genai_client.types import LiveServerMessage, ServerMessageKind


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert GenAI is not None
    assert AsyncGenAI is not None
    assert AsyncSession is not None
    assert Live is not None
    assert Pager is not None


def test_error_hierarchy():
    assert issubclass(InvalidArgumentError, GenAIError)
    assert issubclass(InvalidStateError, GenAIError)
    assert issubclass(APIError, GenAIError)
    assert issubclass(ConnectionError, GenAIError)


def test_error_attributes():
    err = GenAIError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    err_with_details = InvalidArgumentError("bad input", details={"field": "turns"})
    assert err_with_details.code == "invalid_argument"
    assert err_with_details.details == {"field": "turns"}

    assert InvalidStateError("closed").code == "invalid_state"
    assert ConnectionError("gone").code == "connection_error"


def test_api_error_from_response():
    body = {"error": {"code": 404, "message": "Model not found", "status": "NOT_FOUND"}}
    err = APIError.from_response(404, body)
    assert err.status_code == 404
    assert err.code == "http_error"
    assert "Model not found" in str(err)
    assert err.details["status"] == "NOT_FOUND"


def test_api_error_from_non_json_body():
    err = APIError.from_response(502, None, "Bad Gateway")
    assert err.status_code == 502
    assert "Bad Gateway" in str(err)
    assert err.details is None


def test_paged_item_values():
    assert PagedItem.MODELS == "models"
    assert PagedItem.CACHED_CONTENTS == "cachedContents"
    assert PagedItem.TUNING_JOBS == "tuningJobs"
    assert PagedItem.BATCH_JOBS == "batchJobs"
    assert PagedItem.FILES == "files"


def test_server_message_kinds():
    assert ServerMessageKind.SETUP_COMPLETE == "setup_complete"
    assert LiveServerMessage.model_validate({"setupComplete": {}}).kind is ServerMessageKind.SETUP_COMPLETE
