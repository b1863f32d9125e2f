"""
Stripe Connector
Creates and confirms payment intents through the Stripe REST API
"""
import logging
from typing import Any, Dict, Optional

import httpx

from marketplace.core.config import settings
from marketplace.core.errors import BadRequestError, PaymentGatewayError


logger = logging.getLogger(__name__)


class StripeConnector:
    """
    Connector for the Stripe payments API

    One blocking call per payment, no retries: a failure is reported to the
    caller, who decides whether to resubmit.
    """

    def __init__(self, secret_key: str = None, api_base: str = None,
                 timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        """
        Initialize Stripe connector

        Args:
            secret_key: Stripe secret API key (sk_...)
            api_base: API root, defaults to https://api.stripe.com/v1
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self.api_base = (api_base or settings.STRIPE_API_BASE).rstrip("/")
        self.timeout = timeout or settings.STRIPE_TIMEOUT_SECONDS
        self.transport = transport

        if not self.secret_key:
            raise ValueError("Stripe credentials not configured. Set STRIPE_SECRET_KEY")

        self.headers = {
            'Authorization': f"Bearer {self.secret_key}",
        }

    async def _post(self, endpoint: str, data: Dict[str, Any]) -> Dict:
        """POST a form-encoded request and return the decoded object"""
        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.api_base}{endpoint}",
                    data=data,
                    headers=self.headers,
                    timeout=self.timeout
                )
            except httpx.HTTPError as e:
                logger.error(f"Stripe request error: {e}")
                raise PaymentGatewayError(f"Stripe request failed: {e}") from e

        if response.status_code >= 400:
            self._raise_for_error(response)

        return response.json()

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        try:
            error = response.json().get('error', {})
        except ValueError:
            error = {}

        error_type = error.get('type')
        message = error.get('message') or f"HTTP {response.status_code}"

        if error_type == 'card_error':
            # Declines and the like: the buyer can act on these
            logger.info(f"Stripe card error ({error.get('code')}): {message}")
            raise BadRequestError(message)

        logger.error(f"Stripe API error: {response.status_code} - {error_type}: {message}")
        raise PaymentGatewayError(f"Stripe API error {response.status_code}: {message}")

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        payment_method_id: str,
        return_url: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Dict:
        """
        Create and immediately confirm a payment intent

        Redirect-based payment methods are disabled; return_url is still
        sent because Stripe requires it whenever confirm=true.

        Args:
            amount: Amount in the smallest currency unit
            currency: ISO currency code
            payment_method_id: Stripe PaymentMethod ID (pm_...)
            return_url: Where the buyer lands after an off-session step
            metadata: Optional key/value pairs stored on the intent

        Returns:
            The Stripe PaymentIntent object
        """
        data = {
            'amount': amount,
            'currency': currency.lower(),
            'payment_method': payment_method_id,
            'confirm': 'true',
            'automatic_payment_methods[enabled]': 'true',
            'automatic_payment_methods[allow_redirects]': 'never',
            'return_url': return_url,
        }
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = value

        intent = await self._post("/payment_intents", data)
        logger.info(f"Payment intent {intent.get('id')} created with status {intent.get('status')}")
        return intent
