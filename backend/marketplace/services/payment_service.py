"""
Payment Service
Charges buyers through the payment gateway
"""
import logging
from typing import Dict, Optional

from marketplace.core.auth import Principal
from marketplace.core.config import settings
from marketplace.core.errors import AuthenticationRequiredError
from marketplace.core.policies import Action, authorize
from marketplace.connectors.stripe_connector import StripeConnector
from marketplace.domain.payment import PaymentCreate


logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, connector: StripeConnector = None):
        self._connector = connector

    @property
    def connector(self) -> StripeConnector:
        # Built on first use so a missing key only fails payment requests
        if self._connector is None:
            self._connector = StripeConnector()
        return self._connector

    async def create_payment(self, principal: Optional[Principal], payment: PaymentCreate) -> Dict:
        """
        Create and confirm a payment intent for a buyer.

        The gateway is only contacted after the principal passes the
        buyer-only rule. The charge is real and is not persisted here.

        Returns:
            The gateway's payment intent object
        """
        if principal is None:
            raise AuthenticationRequiredError("Unauthorized")
        authorize(principal, Action.PAYMENT_CREATE)

        logger.info(
            f"Creating payment intent for buyer {principal.id}: "
            f"{payment.amount} {payment.currency.lower()}"
        )
        return await self.connector.create_payment_intent(
            amount=payment.amount,
            currency=payment.currency,
            payment_method_id=payment.payment_method_id,
            return_url=settings.payment_return_url,
            metadata={'buyer_id': principal.id}
        )


# Singleton instance for easy import
_payment_service: Optional[PaymentService] = None

def get_payment_service() -> PaymentService:
    """Get the singleton payment service instance"""
    global _payment_service
    if _payment_service is None:
        _payment_service = PaymentService()
    return _payment_service
