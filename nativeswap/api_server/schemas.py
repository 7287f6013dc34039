"""
Pydantic models for API requests and responses.
"""

from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class AnnouncementRequest(BaseModel):
    fid: StrictInt


class NotificationRequest(BaseModel):
    fid: StrictInt
    notificationId: str = Field(..., min_length=1, max_length=128)
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    targetUrl: Optional[str] = None
    priority: Optional[str] = None  # accepted for client compatibility, not forwarded


class NotificationResponse(BaseModel):
    success: bool
    result: str


class SwapSuccessRequest(BaseModel):
    fid: StrictInt
    transactionHash: str = Field(..., min_length=1)
    sellAmount: str
    buyAmount: str
    isSelling: bool = False
