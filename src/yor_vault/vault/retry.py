# Vault - Password Retry
#
# Three strikes for interactive decryption:
#   AWAIT_PASSWORD → ATTEMPT(n) → DECODED
#                               → AWAIT_PASSWORD   (failure, n < max)
#                               → FATAL            (failure, n == max)
#
# The password source is injected (a callable taking the prompt label), so
# the loop runs the same against a terminal or a scripted list in tests.

import logging
from enum import Enum
from typing import Callable, Optional, TypeVar

from .exceptions import CipherError, PasswordAttemptsExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")

PasswordSource = Callable[[str], str]

MAX_PASSWORD_ATTEMPTS = 3
DEFAULT_PROMPT = "[yor] password for the key: "


class RetryState(str, Enum):
    AWAIT_PASSWORD = "await_password"
    ATTEMPT = "attempt"
    DECODED = "decoded"
    FATAL = "fatal"


class PasswordRetry:
    """
    Drives the password/attempt cycle until success or the attempt bound.

    Only CipherError (short or unauthenticated ciphertext) counts as a failed
    attempt. Anything else propagates on the spot.
    """

    def __init__(
        self,
        password_source: PasswordSource,
        max_attempts: int = MAX_PASSWORD_ATTEMPTS,
        label: str = DEFAULT_PROMPT,
        on_failure: Optional[Callable[[int, int], None]] = None,
    ):
        """
        Args:
            password_source: Returns a password for the given prompt label
            max_attempts: Failures allowed before giving up
            label: Prompt label passed to password_source
            on_failure: Called with (attempt, max_attempts) after each
                        failure that will be retried
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.password_source = password_source
        self.max_attempts = max_attempts
        self.label = label
        self.on_failure = on_failure

        self.state = RetryState.AWAIT_PASSWORD
        self.attempts = 0

    def run(self, attempt: Callable[[str], T]) -> T:
        """
        Prompt and call attempt(password) until it succeeds.

        Returns:
            Whatever attempt returned on success

        Raises:
            PasswordAttemptsExhausted: After max_attempts consecutive failures
        """
        self.state = RetryState.AWAIT_PASSWORD
        self.attempts = 0

        while True:
            password = self.password_source(self.label)
            self.state = RetryState.ATTEMPT
            self.attempts += 1
            try:
                result = attempt(password)
            except CipherError as e:
                logger.debug("Password attempt %d/%d failed", self.attempts, self.max_attempts)
                if self.attempts >= self.max_attempts:
                    self.state = RetryState.FATAL
                    raise PasswordAttemptsExhausted(self.attempts) from e
                self.state = RetryState.AWAIT_PASSWORD
                if self.on_failure is not None:
                    self.on_failure(self.attempts, self.max_attempts)
                continue

            self.state = RetryState.DECODED
            return result
