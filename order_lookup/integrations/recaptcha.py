"""Google reCAPTCHA verification."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from order_lookup.core.errors import CaptchaFailure, UpstreamFailure, ValidationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptchaVerdict:
    """What the provider said about one token."""

    success: bool
    score: float | None = None


def parse_verdict(data: Any) -> CaptchaVerdict | None:
    """Parse a siteverify response body.

    Returns:
        The verdict, or None when the body is not the expected shape
        (non-object, non-boolean ``success``, non-numeric ``score``).
    """
    if not isinstance(data, dict):
        return None

    success = data.get("success")
    if not isinstance(success, bool):
        return None

    score = data.get("score")
    if score is None:
        return CaptchaVerdict(success=success)
    if isinstance(score, bool) or not isinstance(score, int | float):
        return None
    return CaptchaVerdict(success=success, score=float(score))


class RecaptchaClient:
    """Async client for the siteverify endpoint."""

    def __init__(self, secret: str, verify_url: str, timeout: float = 10.0) -> None:
        self.secret = secret
        self.verify_url = verify_url
        self.timeout = timeout

    async def verify(self, token: str, remote_ip: str | None = None) -> CaptchaVerdict:
        """Ask the provider about a token.

        Raises:
            UpstreamFailure: If the provider cannot be reached, answers with an
                HTTP error, or returns a body that is not JSON.
            CaptchaFailure: If the JSON verdict has the wrong shape.
        """
        form = {"secret": self.secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.verify_url, data=form)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            logger.error("reCAPTCHA verification request failed: %s", exc)
            raise UpstreamFailure() from exc
        except ValueError as exc:
            logger.error("reCAPTCHA returned a non-JSON body")
            raise UpstreamFailure() from exc

        verdict = parse_verdict(data)
        if verdict is None:
            logger.warning("reCAPTCHA returned a malformed verdict")
            raise CaptchaFailure()
        return verdict


class CaptchaVerifier:
    """Gate that requires a passing CAPTCHA when a secret is configured.

    With no client the gate is disabled and every request passes.
    """

    def __init__(self, client: RecaptchaClient | None, min_score: float = 0.5) -> None:
        self.client = client
        self.min_score = min_score

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def check(self, token: str, remote_ip: str | None = None) -> None:
        if self.client is None:
            return

        token = token.strip()
        if not token:
            raise ValidationFailure("Missing captcha token")

        verdict = await self.client.verify(token, remote_ip)
        if not verdict.success:
            logger.info("reCAPTCHA rejected token")
            raise CaptchaFailure()

        if verdict.score is not None and verdict.score < self.min_score:
            logger.info("reCAPTCHA score %.2f below %.2f", verdict.score, self.min_score)
            raise CaptchaFailure()
