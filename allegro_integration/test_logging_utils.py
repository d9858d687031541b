import json
import logging

from allegro_integration.logging_utils import AuditFormatter, configure_logging


def make_record(**attrs):
    record = {"name": "audit", "levelno": logging.DEBUG, "levelname": "DEBUG", "msg": "GET /x - 200"}
    record.update(attrs)
    return logging.makeLogRecord(record)


def test_formatter_appends_audit_context():
    output = AuditFormatter(fmt="%(message)s").format(make_record(audit={"userId": None, "a": [1]}))
    message, rendered = output.split(" | ", 1)
    assert message == "GET /x - 200"
    assert json.loads(rendered) == {"userId": None, "a": [1]}


def test_formatter_leaves_plain_records_alone():
    assert AuditFormatter(fmt="%(message)s").format(make_record()) == "GET /x - 200"


def test_formatter_renders_unknown_objects_as_strings():
    output = AuditFormatter(fmt="%(message)s").format(make_record(audit={"obj": object()}))
    assert "<object object at" in output


def test_configure_logging_sets_audit_level():
    audit_logger = configure_logging(logging.WARNING, audit_level=logging.DEBUG)
    assert audit_logger.name == "allegro_integration.audit.records"
    assert audit_logger.level == logging.DEBUG
