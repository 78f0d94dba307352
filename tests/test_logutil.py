import logging

from hashtree_api.logutil import RedactingFilter


def _record(msg, args):
    return logging.LogRecord("hashtree_api", logging.INFO, __file__, 1, msg, args, None)


def test_redacts_private_key_fields():
    record = _record("loaded sk_b64=%s", ("c2VjcmV0",))
    assert RedactingFilter().filter(record)
    assert record.getMessage() == "loaded sk_b64=***"


def test_leaves_other_messages_untouched():
    record = _record("construct leaves=%d", (4,))
    assert RedactingFilter().filter(record)
    assert record.getMessage() == "construct leaves=4"


def test_mismatched_args_do_not_raise():
    record = _record("%s and %s", ("only-one",))
    assert RedactingFilter().filter(record)
