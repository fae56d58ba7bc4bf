import datetime as dt

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from authop.conditions import ConditionStatus
from authop.customroute import (
    Condition,
    check_errors_configuring_custom_route,
    degrade_if_time_elapsed,
    ensure_default_conditions,
    find_condition,
    parse_certificates,
)


def _make_cert(common_name):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = dt.datetime.now(dt.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + dt.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )


def _pem(cert):
    return cert.public_bytes(serialization.Encoding.PEM)


def test_ensure_default_conditions_on_empty():
    result = ensure_default_conditions([])
    assert [c.type for c in result] == ["Progressing", "Degraded"]
    for c in result:
        assert c.status == ConditionStatus.FALSE
        assert c.reason == "AsExpected"
        assert c.message == "All is well"
        assert c.last_transition_time is not None


def test_ensure_default_conditions_keeps_existing():
    degraded = Condition("Degraded", ConditionStatus.TRUE, "CustomRouteError", "bad")
    result = ensure_default_conditions([degraded])
    assert result[0] is degraded
    assert [c.type for c in result] == ["Degraded", "Progressing"]


def test_find_condition():
    a = Condition("Progressing", ConditionStatus.TRUE)
    b = Condition("Degraded", ConditionStatus.FALSE)
    assert find_condition([a, b], "Degraded") is b
    assert find_condition([a, b], "Available") is None


def test_check_errors_none_when_empty():
    assert check_errors_configuring_custom_route([]) is None
    assert check_errors_configuring_custom_route(None) is None


def test_check_errors_reports_conditions():
    result = check_errors_configuring_custom_route([ValueError("boom"), ValueError("bang")])
    assert [(c.type, c.status) for c in result] == [
        ("Degraded", ConditionStatus.TRUE),
        ("Progressing", ConditionStatus.FALSE),
    ]
    assert all(c.reason == "CustomRouteError" for c in result)
    assert result[0].message == "Error Configuring custom route: [boom bang]"
    assert result[0].message == result[1].message


def _progressing(when):
    return Condition("Progressing", ConditionStatus.TRUE, "RouteNotAdmitted", "msg", when)


def test_degrade_measures_against_own_time():
    now = dt.datetime.now(dt.timezone.utc)
    existing = [_progressing(now - dt.timedelta(minutes=10))]
    condition = _progressing(now)
    degrade_if_time_elapsed(existing, condition, dt.timedelta(minutes=5))
    assert condition.type == "Progressing"


def test_degrade_with_negative_age():
    now = dt.datetime.now(dt.timezone.utc)
    condition = _progressing(now)
    degrade_if_time_elapsed([_progressing(now)], condition, dt.timedelta(minutes=-5))
    assert condition.type == "Degraded"


def test_degrade_requires_matching_message_and_time():
    now = dt.datetime.now(dt.timezone.utc)
    other = Condition("Progressing", ConditionStatus.TRUE, "RouteNotAdmitted", "other", now)
    condition = _progressing(now)
    degrade_if_time_elapsed([other], condition, dt.timedelta(minutes=-5))
    assert condition.type == "Progressing"

    untimed = _progressing(None)
    degrade_if_time_elapsed([_progressing(None)], untimed, dt.timedelta(minutes=-5))
    assert untimed.type == "Progressing"


def test_parse_single_certificate():
    cert = _make_cert("oauth.example.com")
    assert parse_certificates(_pem(cert)) == [cert]


def test_parse_skips_non_certificate_blocks():
    first, second = _make_cert("a.example.com"), _make_cert("b.example.com")
    junk = b"-----BEGIN JUNK-----\nbm90IGEgY2VydA==\n-----END JUNK-----\n"
    data = _pem(first) + junk + _pem(second)
    assert parse_certificates(data.decode()) == [first, second]


def test_parse_without_certificates_fails():
    with pytest.raises(ValueError, match="data does not contain any valid certificates"):
        parse_certificates(b"nothing here")