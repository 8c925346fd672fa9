# Import models here so Alembic can discover metadata.
from ceahub.models.agent import Agent  # noqa: F401
from ceahub.models.sale import Sale  # noqa: F401
from ceahub.models.payout_request import PayoutRequest  # noqa: F401
