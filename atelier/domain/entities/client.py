"""Domain entity — a customer of the business."""

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass(frozen=True)
class Client:
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))
