"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse, UsernameUpdate
from src.schemas.cat_visit import CatHistoryResponse, CatVisitResponse, MarkReadResponse
from src.schemas.catalog import CatCreate, CatResponse, GoodieCreate, GoodieResponse
from src.schemas.inventory import InventoryItemResponse, PurchaseResponse
from src.schemas.spoons import (
    AwardPointsRequest,
    AwardPointsResponse,
    BalanceResponse,
    LeaderboardEntry,
    SpoonTransactionResponse,
)
from src.schemas.yard import PlaceItemRequest, PlaceItemResponse, ReturnItemResponse, YardResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "UsernameUpdate",
    "GoodieCreate",
    "GoodieResponse",
    "CatCreate",
    "CatResponse",
    "InventoryItemResponse",
    "PurchaseResponse",
    "PlaceItemRequest",
    "PlaceItemResponse",
    "ReturnItemResponse",
    "YardResponse",
    "CatVisitResponse",
    "CatHistoryResponse",
    "MarkReadResponse",
    "BalanceResponse",
    "SpoonTransactionResponse",
    "AwardPointsRequest",
    "AwardPointsResponse",
    "LeaderboardEntry",
]
