"""Unit tests for the JSON log formatter"""

import json
import logging
from loan_allocator.infrastructure.observability.logging import CustomJsonFormatter


def test_json_formatter_adds_service_metadata():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("loan_allocator.batch", logging.INFO, __file__, 1, "run done", None, None)
    record.run_id = "abc"

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "run done"
    assert payload["level"] == "INFO"
    assert payload["service"] == "loan-allocator"
    assert payload["run_id"] == "abc"
    assert payload["timestamp"]
