"""테스트용 엔티티 모델.

pydantic 모델, ``@dataclass``, 일반 클래스를 모두 포함합니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    id: Optional[str] = None
    name: str


class Product(BaseModel):
    id: Optional[str] = None
    sku: str
    name: str
    price: float = 0.0
    tags: list[str] = []


class SpecialProduct(Product):
    discount: float = 0.0


class ProductSummary(BaseModel):
    """식별자 필드가 없는 축약 모델."""

    sku: str
    name: str


class Customer(BaseModel):
    id: Optional[str] = None
    full_name: str = Field(alias="fullName")


class FlexibleDoc(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    title: str


class Listing(BaseModel):
    id: Optional[str] = None
    name: str
    props: dict[str, Any] = {}


@dataclass
class OrderLine:
    sku: str
    qty: int


@dataclass
class Order:
    customer: str
    lines: list[OrderLine] = field(default_factory=list)
    id: Optional[str] = None


class Batch:
    """pydantic 이나 dataclass 가 아닌 일반 클래스."""

    def __init__(self, reference: str, qty: int, id: Optional[str] = None):
        self.id = id
        self.reference = reference
        self.qty = qty
        self._allocations: set[str] = set()
