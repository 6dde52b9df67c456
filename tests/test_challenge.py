"""Tests for the endpoint validation challenge response."""

import pytest

from event_notification_sdk import Config, ValidationError, generate_challenge_response

CHALLENGE_CODE = "71745723-d031-455c-bfa5-f90d11b4f20a"
EXPECTED_RESPONSE = "048de9ffd0e35021fefc0388d5c52e0f475324f582f3778ca81a53354ccbbc97"


class TestGenerateChallengeResponse:
    """Tests for generate_challenge_response function."""

    def test_known_vector(self, sample_config):
        """Response is the SHA-256 hex of code, token and endpoint in order."""
        result = generate_challenge_response(CHALLENGE_CODE, sample_config)

        assert result == EXPECTED_RESPONSE

    def test_lowercase_hex(self, sample_config):
        """Response is 64 lowercase hex characters."""
        result = generate_challenge_response(CHALLENGE_CODE, sample_config)
        assert len(result) == 64
        assert result == result.lower()
        int(result, 16)

    def test_deterministic(self, sample_config):
        """Same inputs give the same response."""
        assert generate_challenge_response(CHALLENGE_CODE, sample_config) == \
            generate_challenge_response(CHALLENGE_CODE, sample_config)

    def test_each_input_changes_output(self, sample_config):
        """Changing any single input changes the response."""
        baseline = generate_challenge_response(CHALLENGE_CODE, sample_config)

        other_token = Config(
            endpoint=sample_config.endpoint,
            verification_token="another-token",
        )
        other_endpoint = Config(
            endpoint="http://www.testendpoint.com/other",
            verification_token=sample_config.verification_token,
        )

        assert generate_challenge_response("other-code", sample_config) != baseline
        assert generate_challenge_response(CHALLENGE_CODE, other_token) != baseline
        assert generate_challenge_response(CHALLENGE_CODE, other_endpoint) != baseline

    def test_missing_challenge_code(self, sample_config):
        with pytest.raises(ValidationError, match="challengeCode"):
            generate_challenge_response("", sample_config)

    def test_missing_config(self):
        with pytest.raises(ValidationError, match="config"):
            generate_challenge_response(CHALLENGE_CODE, None)

    def test_missing_endpoint(self):
        config = Config(verification_token="token")
        with pytest.raises(ValidationError, match="endpoint"):
            generate_challenge_response(CHALLENGE_CODE, config)

    def test_missing_verification_token(self):
        config = Config(endpoint="http://www.testendpoint.com/webhook")
        with pytest.raises(ValidationError, match="verificationToken"):
            generate_challenge_response(CHALLENGE_CODE, config)
