# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from unittest.mock import patch

import pytest

from AzurePipelines.Tasks.core import _error_codes as ec
from AzurePipelines.Tasks.core._http import WebRequest
from AzurePipelines.Tasks.core.errors import (
    HttpError,
    OperationFailedError,
    OperationTimeoutError,
    TransportError,
)
from AzurePipelines.Tasks.core.lro import OperationStatus, _LongRunningOperationPoller
from tests.unit.test_helpers import make_response

RESOURCE_URI = "https://management.azure.com/subscriptions/s/resourcegroups/rg?api-version=2016-07-01"


class RecordingSend:
    """Fake send path returning queued responses and recording requests."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.requests = []

    def __call__(self, request, operation):
        self.requests.append((request, operation))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return make_response(*item)


def _poller(send, timeout=1800, retry_interval=10):
    return _LongRunningOperationPoller(send, timeout=timeout, retry_interval=retry_interval)


class TestOperationStatus:
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"status": "InProgress"}, OperationStatus.IN_PROGRESS),
            ({"status": "Succeeded"}, OperationStatus.SUCCEEDED),
            ({"status": "failed"}, OperationStatus.FAILED),
            ({"status": "Canceled"}, OperationStatus.CANCELED),
            ({"status": "Cancelled"}, OperationStatus.CANCELED),
            ({"properties": {"provisioningState": "Running"}}, OperationStatus.IN_PROGRESS),
            ({"properties": {"provisioningState": "Succeeded"}}, OperationStatus.SUCCEEDED),
            ({"properties": {}}, None),
            ({}, None),
            (None, None),
            ("text", None),
        ],
    )
    def test_from_body(self, body, expected):
        assert OperationStatus._from_body(body) is expected

    def test_status_field_wins_over_provisioning_state(self):
        body = {"status": "Failed", "properties": {"provisioningState": "Succeeded"}}
        assert OperationStatus._from_body(body) is OperationStatus.FAILED

    def test_is_terminal(self):
        assert not OperationStatus.IN_PROGRESS.is_terminal
        assert OperationStatus.SUCCEEDED.is_terminal
        assert OperationStatus.FAILED.is_terminal
        assert OperationStatus.CANCELED.is_terminal


@patch("time.sleep")
class TestLongRunningOperationPoller:
    def test_204_is_terminal_without_polling(self, mock_sleep):
        send = RecordingSend([])
        initial = make_response(204)
        result = _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert result is initial
        assert send.requests == []
        mock_sleep.assert_not_called()

    def test_200_is_terminal_without_polling(self, mock_sleep):
        send = RecordingSend([])
        initial = make_response(200, {}, {"id": "x"})
        assert _poller(send).await_completion(WebRequest("PUT", RESOURCE_URI), initial) is initial
        assert send.requests == []

    def test_unexpected_initial_status_is_http_error(self, mock_sleep):
        send = RecordingSend([])
        initial = make_response(409, {}, {"error": {"code": "Conflict", "message": "busy"}})
        with pytest.raises(HttpError) as ei:
            _poller(send).await_completion(WebRequest("PUT", RESOURCE_URI), initial)
        assert ei.value.status_code == 409
        assert ei.value.details["service_error_code"] == "Conflict"
        assert send.requests == []

    def test_location_polls_until_succeeded(self, mock_sleep):
        send = RecordingSend([
            (200, {}, {"status": "InProgress"}),
            (200, {}, {"status": "Succeeded", "marker": 2}),
        ])
        initial = make_response(202, {"Location": "https://poll/1"})
        result = _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)

        assert len(send.requests) == 2
        assert all(r.method == "GET" and r.uri == "https://poll/1" for r, _ in send.requests)
        assert all(op == "lro.poll" for _, op in send.requests)
        assert result.json() == {"status": "Succeeded", "marker": 2}

    def test_azure_async_operation_header_preferred_over_location(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "Succeeded"})])
        initial = make_response(
            202,
            {"Azure-AsyncOperation": "https://poll/async", "Location": "https://poll/location"},
        )
        _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert send.requests[0][0].uri == "https://poll/async"

    def test_falls_back_to_request_uri(self, mock_sleep):
        send = RecordingSend([(200, {}, {"properties": {"provisioningState": "Succeeded"}})])
        initial = make_response(201, {}, {"properties": {"provisioningState": "Accepted"}})
        _poller(send).await_completion(WebRequest("PUT", RESOURCE_URI), initial)
        assert send.requests[0][0].uri == RESOURCE_URI

    def test_put_with_async_operation_reads_resource_after_success(self, mock_sleep):
        send = RecordingSend([
            (200, {}, {"status": "Succeeded"}),
            (200, {}, {"id": "resource", "properties": {"provisioningState": "Succeeded"}}),
        ])
        initial = make_response(201, {"Azure-AsyncOperation": "https://poll/async"})
        result = _poller(send).await_completion(WebRequest("PUT", RESOURCE_URI, body="{}"), initial)
        assert [r.uri for r, _ in send.requests] == ["https://poll/async", RESOURCE_URI]
        assert send.requests[1][1] == "lro.final"
        assert result.json()["id"] == "resource"

    def test_retry_after_header_sets_delay(self, mock_sleep):
        send = RecordingSend([
            (202, {"Retry-After": "3"}, None),
            (200, {}, None),
        ])
        initial = make_response(202, {"Location": "https://poll/1", "Retry-After": "7"})
        result = _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert result.status_code == 200
        assert [c.args[0] for c in mock_sleep.call_args_list] == [7, 3]

    def test_default_delay_without_retry_after(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "Succeeded"})])
        initial = make_response(202, {"Location": "https://poll/1"})
        _poller(send, retry_interval=10).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        mock_sleep.assert_called_once_with(10)

    def test_invalid_retry_after_uses_default(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "Succeeded"})])
        initial = make_response(202, {"Location": "https://poll/1", "Retry-After": "soon"})
        _poller(send, retry_interval=4).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        mock_sleep.assert_called_once_with(4)

    def test_location_202_without_status_keeps_polling(self, mock_sleep):
        send = RecordingSend([(202, {}, None), (202, {}, None), (200, {}, None)])
        initial = make_response(202, {"Location": "https://poll/1"})
        result = _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert result.status_code == 200
        assert len(send.requests) == 3

    def test_async_operation_without_status_keeps_polling(self, mock_sleep):
        send = RecordingSend([(200, {}, {}), (200, {}, {"status": "Succeeded"})])
        initial = make_response(202, {"Azure-AsyncOperation": "https://poll/async"})
        _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert len(send.requests) == 2

    def test_failed_status_carries_service_error(self, mock_sleep):
        send = RecordingSend([
            (200, {}, {"status": "Failed", "error": {"code": "QuotaExceeded", "message": "No cores left"}}),
        ])
        initial = make_response(202, {"Azure-AsyncOperation": "https://poll/async"})
        with pytest.raises(OperationFailedError) as ei:
            _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        err = ei.value
        assert err.service_error_code == "QuotaExceeded"
        assert err.message == "No cores left"
        assert err.subcode == ec.OPERATION_FAILED

    def test_failed_provisioning_state_uses_properties_error(self, mock_sleep):
        send = RecordingSend([
            (200, {}, {"properties": {"provisioningState": "Failed", "error": {"code": "X", "message": "Y"}}}),
        ])
        initial = make_response(201, {})
        with pytest.raises(OperationFailedError) as ei:
            _poller(send).await_completion(WebRequest("PUT", RESOURCE_URI), initial)
        assert ei.value.service_error_code == "X"
        assert ei.value.message == "Y"

    def test_canceled_without_error_is_generic_failure(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "Canceled"})])
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(OperationFailedError) as ei:
            _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        err = ei.value
        assert err.subcode == ec.OPERATION_CANCELED
        assert err.message == "Long running operation failed"
        assert "Canceled" in err.details["body_excerpt"]

    def test_error_status_during_polling_is_http_error(self, mock_sleep):
        send = RecordingSend([(500, {}, "boom")])
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(HttpError) as ei:
            _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert ei.value.status_code == 500

    def test_transport_error_is_not_retried(self, mock_sleep):
        send = RecordingSend([TransportError("connection reset"), (200, {}, {"status": "Succeeded"})])
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(TransportError):
            _poller(send).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert len(send.requests) == 1

    def test_times_out_when_never_terminal(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "InProgress"})] * 10)
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(OperationTimeoutError) as ei:
            _poller(send, timeout=25, retry_interval=10).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert ei.value.subcode == ec.OPERATION_TIMED_OUT
        assert [c.args[0] for c in mock_sleep.call_args_list] == [10, 10, 5]
        assert len(send.requests) == 3
        assert sum(c.args[0] for c in mock_sleep.call_args_list) <= 25

    def test_timeout_argument_overrides_default(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "InProgress"})] * 5)
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(OperationTimeoutError):
            _poller(send, timeout=1800, retry_interval=10).await_completion(
                WebRequest("DELETE", RESOURCE_URI), initial, timeout=10
            )
        assert len(send.requests) == 1

    def test_retry_after_is_capped_by_remaining_budget(self, mock_sleep):
        send = RecordingSend([(200, {}, {"status": "Succeeded"})])
        initial = make_response(202, {"Location": "https://poll/1", "Retry-After": "600"})
        _poller(send, timeout=30).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        mock_sleep.assert_called_once_with(30)

    def test_zero_retry_after_still_times_out(self, mock_sleep):
        send = RecordingSend([(200, {"Retry-After": "0"}, {"status": "InProgress"})] * 100)
        initial = make_response(202, {"Location": "https://poll/1", "Retry-After": "0"})
        with pytest.raises(OperationTimeoutError):
            _poller(send, timeout=30).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert len(send.requests) == 30
        assert all(c.args[0] == 0 for c in mock_sleep.call_args_list)

    def test_negative_retry_after_still_times_out(self, mock_sleep):
        send = RecordingSend([(200, {"Retry-After": "-5"}, {"status": "InProgress"})] * 100)
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(OperationTimeoutError):
            _poller(send, timeout=10, retry_interval=0).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert len(send.requests) == 10

    def test_zero_retry_interval_still_times_out(self, mock_sleep):
        send = RecordingSend([(202, {}, None)] * 100)
        initial = make_response(202, {"Location": "https://poll/1"})
        with pytest.raises(OperationTimeoutError):
            _poller(send, timeout=5, retry_interval=0).await_completion(WebRequest("DELETE", RESOURCE_URI), initial)
        assert len(send.requests) == 5
