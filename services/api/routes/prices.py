"""
Prices API endpoints.

Provides:
    GET  /prices/hourly - Peak price per (hour, chain) over the last 24 hours
    POST /prices/alert - Register or update a price-target alert
    GET  /prices/swap-rate/{ethAmount} - Live swap quote and fee

Prices are Decimal internally and rendered as JSON numbers.
"""

from decimal import Decimal
from typing import Annotated, List

from fastapi import APIRouter, HTTPException, Path
from pydantic import BaseModel, Field, PlainSerializer, field_validator

import structlog

logger = structlog.get_logger(__name__)

router = APIRouter()

JsonDecimal = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class HourlyPriceItem(BaseModel):
    """Model for one hourly peak."""

    hour: str
    chain: str
    highestPrice: JsonDecimal

    model_config = {
        "json_schema_extra": {
            "example": {
                "hour": "2025-01-26T12:00:00Z",
                "chain": "ethereum",
                "highestPrice": 3312.45,
            }
        }
    }


class AlertRequest(BaseModel):
    """Request body for alert registration."""

    model_config = {"extra": "forbid"}

    chain: str = Field(..., min_length=1, description="Asset identifier")
    price: Decimal = Field(..., gt=0, description="Target price in USD")
    email: str = Field(..., pattern=EMAIL_PATTERN, description="Notification address")

    @field_validator("chain")
    @classmethod
    def validate_chain(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("chain must not be blank")
        return v


class AlertResponse(BaseModel):
    """Response model for a stored alert."""

    id: int
    chain: str
    price: JsonDecimal
    email: str


class SwapRateResponse(BaseModel):
    """Response model for a swap quote."""

    btcAmount: JsonDecimal
    totalFee: JsonDecimal

    model_config = {
        "json_schema_extra": {
            "example": {"btcAmount": 0.5, "totalFee": 600},
        }
    }


def _format_hour(value) -> str:
    return value.isoformat().replace("+00:00", "Z")


@router.get(
    "/hourly",
    response_model=List[HourlyPriceItem],
    summary="Get hourly peak prices",
    description="Highest sampled price per hour and chain over the trailing 24 hours.",
)
async def get_hourly_prices() -> List[HourlyPriceItem]:
    """
    Get hourly peak prices.

    Returns:
        List[HourlyPriceItem]: Ordered by hour, then chain.
    """
    from services.api.app import app_state

    if app_state.hourly_query is None:
        raise HTTPException(status_code=503, detail="Service not ready")

    rows = await app_state.hourly_query.get_hourly_prices()
    return [
        HourlyPriceItem(
            hour=_format_hour(row.hour),
            chain=row.asset,
            highestPrice=row.highest_price,
        )
        for row in rows
    ]


@router.post(
    "/alert",
    response_model=AlertResponse,
    status_code=201,
    summary="Set a price alert",
    description="Registers an alert for (chain, email); an existing alert has its target overwritten.",
)
async def set_alert(body: AlertRequest) -> AlertResponse:
    """
    Register or update a price-target alert.

    Args:
        body: Validated alert registration.

    Returns:
        AlertResponse: The stored alert.
    """
    from services.api.app import app_state

    if app_state.registry is None:
        raise HTTPException(status_code=503, detail="Service not ready")

    alert = await app_state.registry.set_alert(body.chain, body.price, body.email)
    return AlertResponse(
        id=alert.id,
        chain=alert.asset,
        price=alert.target_price,
        email=alert.destination,
    )


@router.get(
    "/swap-rate/{ethAmount}",
    response_model=SwapRateResponse,
    summary="Get swap rate",
    description="Quotes a swap from live rates. Returns 503 if a live rate is unavailable.",
)
async def get_swap_rate(
    ethAmount: Decimal = Path(..., ge=0, description="Amount of the source asset"),
) -> SwapRateResponse:
    """
    Quote a swap using live provider rates.

    Args:
        ethAmount: Amount of the source asset.

    Returns:
        SwapRateResponse: Target amount and total fee.
    """
    from services.api.app import app_state

    if app_state.swap_calculator is None:
        raise HTTPException(status_code=503, detail="Service not ready")

    quote = await app_state.swap_calculator.get_swap_rate(ethAmount)
    return SwapRateResponse(btcAmount=quote.target_amount, totalFee=quote.total_fee)
