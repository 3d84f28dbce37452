from core.security.webhook import sign_payload, verify_signature

BODY = b'{"action": "opened", "issue": {"number": 1}}'


def test_signature_format():
    signature = sign_payload("hook-secret", BODY)

    assert signature.startswith("sha256=")
    assert len(signature) == len("sha256=") + 64


def test_valid_signature():
    assert verify_signature("hook-secret", BODY, sign_payload("hook-secret", BODY))


def test_wrong_secret():
    assert not verify_signature("hook-secret", BODY, sign_payload("other", BODY))


def test_modified_body():
    signature = sign_payload("hook-secret", BODY)

    assert not verify_signature("hook-secret", BODY + b" ", signature)


def test_missing_pieces():
    signature = sign_payload("hook-secret", BODY)

    assert not verify_signature(None, BODY, signature)
    assert not verify_signature("hook-secret", BODY, None)
    assert not verify_signature("hook-secret", BODY, signature.replace("sha256=", "sha1="))
