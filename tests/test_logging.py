"""
Property-based tests for reprac logging.

Feature: reprac
"""

import io
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from reprac.logging import (
    configure_logging,
    get_logger,
    log_http_request,
    log_http_response,
    mask_sensitive_data,
    safe_log_dict,
)

token_body_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"),
    min_size=36,
    max_size=40,
)

path_strategy = st.text(
    min_size=5,
    max_size=60,
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="/-_"),
)


def _capture_http_log() -> io.StringIO:
    log_buffer = io.StringIO()
    handler = logging.StreamHandler(log_buffer)
    handler.setLevel(logging.DEBUG)

    http_logger = logging.getLogger("reprac.http")
    http_logger.setLevel(logging.DEBUG)
    http_logger.handlers = [handler]
    return log_buffer


@given(body=token_body_strategy, prefix=st.sampled_from(["ghp_", "gho_", "ghs_"]))
@settings(max_examples=100)
def test_github_tokens_are_masked(body: str, prefix: str) -> None:
    """No GitHub token survives masking, wherever it appears in the text."""
    token = prefix + body

    masked = mask_sensitive_data(f"using {token} for acme/web")

    assert token not in masked
    assert "[TOKEN_REDACTED]" in masked


@given(token=token_body_strategy)
@settings(max_examples=100)
def test_bearer_values_are_masked(token: str) -> None:
    masked = mask_sensitive_data(f"Authorization: Bearer {token}")

    assert token not in masked
    assert masked.endswith("Bearer [REDACTED]")


@given(token=st.text(min_size=10, max_size=50), secret=st.text(min_size=10, max_size=50))
@settings(max_examples=100)
def test_safe_log_dict_masks_credentials(token: str, secret: str) -> None:
    data = {
        "Authorization": f"Bearer {token}",
        "token": token,
        "nested": {"client_secret": secret},
        "Accept": "application/vnd.github+json",
    }

    safe_data = safe_log_dict(data)

    assert safe_data["Authorization"] == "[REDACTED]"
    assert safe_data["token"] == "[REDACTED]"
    assert safe_data["nested"]["client_secret"] == "[REDACTED]"
    assert safe_data["Accept"] == "application/vnd.github+json"


@given(path=path_strategy, token=token_body_strategy)
@settings(max_examples=50)
def test_log_http_request_hides_token(path: str, token: str) -> None:
    log_buffer = _capture_http_log()

    log_http_request(
        "GET",
        path,
        headers={"Authorization": f"Bearer {token}"},
        params={"per_page": 1},
    )

    output = log_buffer.getvalue()
    assert f"GET {path}" in output
    assert "per_page" in output
    assert token not in output


@given(status_code=st.integers(min_value=200, max_value=599), path=path_strategy)
@settings(max_examples=50)
def test_log_http_response_format(status_code: int, path: str) -> None:
    log_buffer = _capture_http_log()

    log_http_response(status_code, path, elapsed_ms=12.345)

    output = log_buffer.getvalue()
    assert f"Response {status_code} from {path}" in output
    assert "elapsed=12.35ms" in output


def test_http_logging_is_silent_above_debug() -> None:
    log_buffer = _capture_http_log()
    logging.getLogger("reprac.http").setLevel(logging.INFO)

    log_http_request("GET", "/repos/acme/web")

    assert log_buffer.getvalue() == ""


def test_get_logger_names() -> None:
    assert get_logger().name == "reprac"
    assert get_logger("orchestrator").name == "reprac.orchestrator"


@given(body=token_body_strategy)
@settings(max_examples=50)
def test_configured_handler_masks_every_record(body: str) -> None:
    """Tokens passed as log arguments are masked before the handler writes them."""
    token = "ghp_" + body
    log_buffer = io.StringIO()
    handler = logging.StreamHandler(log_buffer)

    configure_logging(level=logging.DEBUG, handler=handler, format_string="%(message)s")
    try:
        get_logger("auth").info("using token %s for %s", token, "acme/web")
        get_logger("orchestrator").warning("request failed: Authorization: Bearer %s", body)
    finally:
        get_logger().removeHandler(handler)

    output = log_buffer.getvalue()
    assert token not in output
    assert body not in output
    assert "acme/web" in output
