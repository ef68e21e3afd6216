"""Tests for switchyard.core.classifier module."""

from __future__ import annotations

import re
from types import SimpleNamespace

import httpx
import pytest

from switchyard.core.classifier import (
    DEFAULT_FATAL_EXCEPTIONS,
    DefaultFatalClassifier,
    ExceptionTypeClassifier,
    FatalClassifier,
    PredicateClassifier,
    build_fatal_classifier,
    extract_status_code,
    is_fatal_by_default,
)
from switchyard.core.exceptions import ConfigurationError
from tests.helpers import FlakyError, StatusError


class _StatusCodeError(Exception):
    def __init__(self, status_code):
        super().__init__(status_code)
        self.status_code = status_code


class _ResponseError(Exception):
    def __init__(self, status_code):
        super().__init__(status_code)
        self.response = SimpleNamespace(status_code=status_code)


class TestExtractStatusCode:
    """Tests for status code extraction."""

    def test_http_code_attribute(self):
        assert extract_status_code(StatusError(404)) == 404

    def test_status_code_attribute(self):
        assert extract_status_code(_StatusCodeError(502)) == 502

    def test_response_status_code(self):
        """Errors carrying a response object expose its status code."""
        assert extract_status_code(_ResponseError(409)) == 409

    def test_httpx_status_error(self):
        """httpx.HTTPStatusError is understood through its response."""
        request = httpx.Request("GET", "http://a/x")
        response = httpx.Response(403, request=request)
        error = httpx.HTTPStatusError("forbidden", request=request, response=response)
        assert extract_status_code(error) == 403

    def test_non_integer_ignored(self):
        """String or boolean attributes are not status codes."""
        assert extract_status_code(_StatusCodeError("404")) is None
        assert extract_status_code(_StatusCodeError(True)) is None

    def test_plain_exception(self):
        assert extract_status_code(RuntimeError("x")) is None


class TestDefaultFatalRules:
    """Tests for is_fatal_by_default."""

    @pytest.mark.parametrize(
        "error",
        [
            TypeError("bad argument"),
            KeyError("k"),
            IndexError(),
            AttributeError("a"),
            NameError("n"),
            NotImplementedError(),
            ZeroDivisionError(),
            OverflowError(),
            ImportError("m"),
            ModuleNotFoundError("m"),
            SyntaxError("s"),
            RecursionError(),
            MemoryError(),
            re.error("bad pattern"),
        ],
    )
    def test_program_errors_are_fatal(self, error):
        assert is_fatal_by_default(error) is True

    @pytest.mark.parametrize(
        "error",
        [
            FlakyError("down"),
            TimeoutError(),
            OSError(),
            RuntimeError("x"),
            ValueError("x"),
            Exception("x"),
        ],
    )
    def test_broad_errors_are_retryable(self, error):
        assert is_fatal_by_default(error) is False

    @pytest.mark.parametrize("code", [400, 401, 403, 404, 409, 422, 499])
    def test_client_errors_are_fatal(self, code):
        assert is_fatal_by_default(StatusError(code)) is True

    @pytest.mark.parametrize("code", [408, 399, 500, 502, 503, 504])
    def test_other_statuses_are_retryable(self, code):
        assert is_fatal_by_default(StatusError(code)) is False

    def test_interrupts_in_default_set(self):
        """Interpreter-exit exceptions are part of the fatal set."""
        assert KeyboardInterrupt in DEFAULT_FATAL_EXCEPTIONS
        assert SystemExit in DEFAULT_FATAL_EXCEPTIONS
        assert GeneratorExit in DEFAULT_FATAL_EXCEPTIONS

    def test_broad_bases_not_in_default_set(self):
        for broad in (Exception, RuntimeError, ValueError, OSError):
            assert broad not in DEFAULT_FATAL_EXCEPTIONS


class TestBuildFatalClassifier:
    """Tests for normalizing the fatal option."""

    def test_none_gives_default(self):
        assert isinstance(build_fatal_classifier(None), DefaultFatalClassifier)

    def test_classifier_passes_through(self):
        classifier = ExceptionTypeClassifier((KeyError,))
        assert build_fatal_classifier(classifier) is classifier

    def test_single_exception_class(self):
        classifier = build_fatal_classifier(FlakyError)
        assert isinstance(classifier, ExceptionTypeClassifier)
        assert classifier.types == (FlakyError,)
        assert classifier.is_fatal(FlakyError())
        assert not classifier.is_fatal(KeyError())

    def test_list_of_classes(self):
        """Membership uses isinstance, so subclasses match."""
        classifier = build_fatal_classifier([LookupError, PermissionError])
        assert classifier.is_fatal(KeyError())
        assert classifier.is_fatal(PermissionError())
        assert not classifier.is_fatal(TypeError())

    def test_set_of_classes(self):
        classifier = build_fatal_classifier({ValueError})
        assert classifier(ValueError())

    def test_predicate(self):
        classifier = build_fatal_classifier(lambda error: isinstance(error, OSError))
        assert isinstance(classifier, PredicateClassifier)
        assert classifier.is_fatal(OSError())
        assert not classifier.is_fatal(KeyError())

    def test_predicate_result_coerced_to_bool(self):
        classifier = build_fatal_classifier(lambda error: "yes")
        assert classifier.is_fatal(Exception()) is True

    def test_list_with_non_exception_rejected(self):
        with pytest.raises(ConfigurationError, match="exception classes"):
            build_fatal_classifier([KeyError, "KeyError"])

    def test_non_exception_class_rejected(self):
        with pytest.raises(ConfigurationError, match="exception class"):
            build_fatal_classifier(dict)

    def test_wrong_arity_predicate_rejected(self):
        with pytest.raises(ConfigurationError, match="one parameter"):
            build_fatal_classifier(lambda error, endpoint: True)

    def test_non_callable_rejected(self):
        with pytest.raises(ConfigurationError, match="callable"):
            build_fatal_classifier(42)

    def test_custom_subclass(self):
        """Callers may subclass FatalClassifier directly."""

        class NeverFatal(FatalClassifier):
            def is_fatal(self, error):
                return False

        classifier = NeverFatal()
        assert build_fatal_classifier(classifier) is classifier
        assert classifier(KeyError()) is False
