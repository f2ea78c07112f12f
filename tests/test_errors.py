"""
Tests for error messages shown to the user.
"""

from aicoder.core.errors import (
    AICoderError,
    ApprovalIOError,
    ContextOverflowError,
    DecodeError,
    InvalidConfigError,
    ModelNotFoundError,
    ProviderConnectionError,
    ProviderError,
    RequestTimeoutError,
    StreamError,
)


class TestErrorMessages:

    def test_model_not_found(self):
        assert str(ModelNotFoundError("llama3")) == "Model not found: llama3"

    def test_context_overflow(self):
        message = str(ContextOverflowError("m", 5000, 4096))

        assert message == "Context overflow for model m: 5000 tokens > 4096 max"

    def test_timeout(self):
        assert str(RequestTimeoutError("m", 300)) == "Timeout for model m after 300 seconds"
        assert str(RequestTimeoutError("m", 2.5)) == "Timeout for model m after 2.5 seconds"

    def test_prefixed_messages(self):
        assert str(ProviderConnectionError("refused")) == "Connection error: refused"
        assert str(ProviderError("boom")) == "Provider error: boom"
        assert str(InvalidConfigError("bad")) == "Invalid config: bad"
        assert str(DecodeError("bad line")) == "Decode error: bad line"
        assert str(StreamError("reset")) == "Stream error: reset"
        assert str(ApprovalIOError("closed")) == "Could not read approval input: closed"

    def test_provider_error_keeps_message(self):
        assert ProviderError("boom").message == "boom"

    def test_decode_error_keeps_data(self):
        assert DecodeError("x", data=b"{oops").data == b"{oops"

    def test_all_share_a_base(self):
        for error in (
            ModelNotFoundError("m"),
            ContextOverflowError("m", 2, 1),
            RequestTimeoutError("m", 1),
            ProviderConnectionError("x"),
            ProviderError("x"),
            InvalidConfigError("x"),
            DecodeError("x"),
            StreamError("x"),
            ApprovalIOError("x"),
        ):
            assert isinstance(error, AICoderError)
