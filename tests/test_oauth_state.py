from app.utils.oauth_state import (
    code_challenge,
    generate_code_verifier,
    generate_state,
    states_match,
)


def test_code_challenge_matches_rfc7636_example():
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"

    assert code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


def test_code_verifier_length_within_bounds():
    verifier = generate_code_verifier()

    assert 43 <= len(verifier) <= 128


def test_states_are_unique():
    assert generate_state() != generate_state()


def test_states_match():
    assert states_match("abc", "abc")
    assert not states_match("abc", "abd")
