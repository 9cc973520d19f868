# Tests for the three-strikes password retry state machine

import pytest

from yor_vault.vault.exceptions import (
    CiphertextTooShort,
    InvalidKeyOrCiphertext,
    KeyDerivationError,
    PasswordAttemptsExhausted,
)
from yor_vault.vault.retry import (
    DEFAULT_PROMPT,
    MAX_PASSWORD_ATTEMPTS,
    PasswordRetry,
    RetryState,
)


def accept_only(expected):
    def attempt(password):
        if password != expected:
            raise InvalidKeyOrCiphertext("Invalid key password")
        return f"opened with {password}"
    return attempt


class TestPasswordRetry:
    def test_default_bound_is_three(self):
        assert MAX_PASSWORD_ATTEMPTS == 3

    def test_first_attempt_succeeds(self, scripted_passwords):
        source = scripted_passwords("good")
        retry = PasswordRetry(source)
        assert retry.run(accept_only("good")) == "opened with good"
        assert retry.state is RetryState.DECODED
        assert retry.attempts == 1
        assert source.prompts == [DEFAULT_PROMPT]

    def test_success_on_second_attempt(self, scripted_passwords):
        source = scripted_passwords("bad", "good")
        failures = []
        retry = PasswordRetry(source, on_failure=lambda n, m: failures.append((n, m)))
        assert retry.run(accept_only("good")) == "opened with good"
        assert retry.attempts == 2
        assert failures == [(1, 3)]

    def test_success_on_third_attempt(self, scripted_passwords):
        retry = PasswordRetry(scripted_passwords("bad", "worse", "good"))
        assert retry.run(accept_only("good")) == "opened with good"
        assert retry.attempts == 3

    def test_three_failures_are_fatal(self, scripted_passwords):
        source = scripted_passwords("a", "b", "c", "good")
        failures = []
        retry = PasswordRetry(source, on_failure=lambda n, m: failures.append(n))
        with pytest.raises(PasswordAttemptsExhausted) as exc:
            retry.run(accept_only("good"))
        assert exc.value.attempts == 3
        assert isinstance(exc.value.__cause__, InvalidKeyOrCiphertext)
        assert retry.state is RetryState.FATAL
        # never prompted a fourth time
        assert source.passwords == ["good"]
        assert failures == [1, 2]

    def test_short_ciphertext_counts_as_attempt(self, scripted_passwords):
        def attempt(password):
            raise CiphertextTooShort("Ciphertext is too short")

        retry = PasswordRetry(scripted_passwords("a", "b", "c"))
        with pytest.raises(PasswordAttemptsExhausted):
            retry.run(attempt)
        assert retry.attempts == 3

    def test_other_errors_are_not_retried(self, scripted_passwords):
        def attempt(password):
            raise KeyDerivationError("Password error: password is empty")

        source = scripted_passwords("", "good")
        retry = PasswordRetry(source)
        with pytest.raises(KeyDerivationError):
            retry.run(attempt)
        assert source.passwords == ["good"]

    def test_custom_bound(self, scripted_passwords):
        retry = PasswordRetry(scripted_passwords("x"), max_attempts=1)
        with pytest.raises(PasswordAttemptsExhausted):
            retry.run(accept_only("good"))

    def test_invalid_bound(self, scripted_passwords):
        with pytest.raises(ValueError):
            PasswordRetry(scripted_passwords(), max_attempts=0)

    def test_initial_state(self, scripted_passwords):
        assert PasswordRetry(scripted_passwords()).state is RetryState.AWAIT_PASSWORD
