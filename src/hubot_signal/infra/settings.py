"""Adapter settings loaded from the environment.

Required env vars:
- HUBOT_SIGNAL_NUMBER: account phone number (e.g., +15551234567)
- HUBOT_SIGNAL_PASSWORD: account password

Optional:
- HUBOT_SIGNAL_CODE: SMS verification code, only set to complete registration
- HUBOT_SIGNAL_DEVICE_ID: device id the receiver binds to (default: 1)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from hubot_signal.errors import ConfigurationError

NUMBER_ENV_VAR = "HUBOT_SIGNAL_NUMBER"
PASSWORD_ENV_VAR = "HUBOT_SIGNAL_PASSWORD"
CODE_ENV_VAR = "HUBOT_SIGNAL_CODE"
DEVICE_ID_ENV_VAR = "HUBOT_SIGNAL_DEVICE_ID"

DEFAULT_DEVICE_ID = 1


@dataclass(frozen=True)
class SignalSettings:
    """Identity and registration settings for one adapter process."""

    number: str
    password: str
    verification_code: str | None = None
    device_id: int = DEFAULT_DEVICE_ID

    @property
    def device_address(self) -> str:
        """Device-qualified identity the receiver authenticates as."""
        return f"{self.number}.{self.device_id}"

    def __repr__(self) -> str:
        return f"SignalSettings(device_id={self.device_id}, has_code={self.verification_code is not None})"


def load_settings(environ: Mapping[str, str] | None = None) -> SignalSettings:
    """Read settings once from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ).

    Returns:
        Frozen SignalSettings.

    Raises:
        ConfigurationError: If number or password is missing, or the device id
            is not a positive integer.
    """
    env = os.environ if environ is None else environ

    number = env.get(NUMBER_ENV_VAR, "").strip()
    password = env.get(PASSWORD_ENV_VAR, "").strip()

    if not number or not password:
        raise ConfigurationError(
            f"Missing Signal config: {NUMBER_ENV_VAR} and {PASSWORD_ENV_VAR} required"
        )

    code = env.get(CODE_ENV_VAR, "").strip() or None

    raw_device_id = env.get(DEVICE_ID_ENV_VAR, "").strip()
    device_id = DEFAULT_DEVICE_ID
    if raw_device_id:
        try:
            device_id = int(raw_device_id)
        except ValueError as exc:
            raise ConfigurationError(f"{DEVICE_ID_ENV_VAR} must be an integer") from exc
        if device_id < 1:
            raise ConfigurationError(f"{DEVICE_ID_ENV_VAR} must be positive")

    return SignalSettings(
        number=number,
        password=password,
        verification_code=code,
        device_id=device_id,
    )
