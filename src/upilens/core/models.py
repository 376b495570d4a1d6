#!/usr/bin/env python3
"""
Core Data Models for UPI Export Ingestion

The unified record model every adapter produces. Records are immutable once
created by an adapter's parse step; filtering produces new collections.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

from .errors import MergeError, ParseWarning
from .money import Money

T = TypeVar("T")


class SourceApp(Enum):
    """UPI apps whose exports can be ingested."""

    GOOGLE_PAY = "googlepay"
    BHIM = "bhim"


class TransactionCategory(Enum):
    """Spending categories assigned by keyword classification."""

    FOOD = "Food"
    GROCERIES = "Groceries"
    CLOTHING = "Clothing"
    ENTERTAINMENT = "Entertainment"
    E_COMMERCE = "E-commerce"
    TRAVEL_TRANSPORT = "Travel & Transport"
    UTILITIES_BILLS = "Utilities & Bills"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    INVESTMENTS = "Investments"
    OTHERS = "Others"


class ActivityType(Enum):
    """Kinds of activity-log entries."""

    SENT = "sent"
    RECEIVED = "received"
    PAID = "paid"
    REQUEST = "request"
    OTHER = "other"


class GroupExpenseState(Enum):
    """Lifecycle of a shared bill."""

    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"


class GroupExpenseItemState(Enum):
    """Settlement state of one participant's share."""

    PAID_RECEIVED = "PAID_RECEIVED"
    UNPAID = "UNPAID"


@dataclass(frozen=True)
class Transaction:
    """
    A single completed payment.

    The id is app-scoped and is the key used for deduplication within one
    export variant.
    """

    time: datetime
    id: str
    description: str
    product: str
    method: str
    status: str
    amount: Money
    source_app: SourceApp
    category: TransactionCategory | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "time": self.time.isoformat(),
            "id": self.id,
            "description": self.description,
            "product": self.product,
            "method": self.method,
            "status": self.status,
            "amount": self.amount.to_dict(),
            "category": self.category.value if self.category else None,
            "source_app": self.source_app.value,
        }


@dataclass(frozen=True)
class GroupExpenseItem:
    """One participant's share of a group expense."""

    amount: Money
    state: GroupExpenseItemState
    payer: str

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount.to_dict(), "state": self.state.value, "payer": self.payer}


@dataclass(frozen=True)
class GroupExpense:
    """
    A shared bill.

    Item amounts are expected to sum close to total_amount; this is not
    enforced, see items_total().
    """

    creation_time: datetime
    creator: str
    group_name: str
    total_amount: Money
    state: GroupExpenseState
    title: str
    items: tuple[GroupExpenseItem, ...]
    source_app: SourceApp

    def items_total(self) -> Money:
        """Sum of item amounts in the expense's currency."""
        total = Money.from_minor_units(0, self.total_amount.currency)
        for item in self.items:
            total = total + item.amount
        return total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "creation_time": self.creation_time.isoformat(),
            "creator": self.creator,
            "group_name": self.group_name,
            "total_amount": self.total_amount.to_dict(),
            "state": self.state.value,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
            "source_app": self.source_app.value,
        }


@dataclass(frozen=True)
class CashbackReward:
    """Standalone reward credit; never merged into transactions."""

    date: datetime
    amount: Money
    description: str
    source_app: SourceApp

    @property
    def currency(self) -> str:
        return self.amount.currency

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "currency": self.currency,
            "amount": self.amount.to_dict()["value"],
            "description": self.description,
            "source_app": self.source_app.value,
        }


@dataclass(frozen=True)
class Voucher:
    """A reward voucher; attributed to the year it expires in."""

    code: str
    details: str
    summary: str
    expiry_date: datetime
    source_app: SourceApp

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "details": self.details,
            "summary": self.summary,
            "expiry_date": self.expiry_date.isoformat(),
            "source_app": self.source_app.value,
        }


@dataclass(frozen=True)
class ActivityRecord:
    """
    A looser app-activity-log entry.

    Unlike Transaction, an activity may lack an amount or have type OTHER;
    such entries are not spend.
    """

    title: str
    time: datetime
    source_app: SourceApp
    description: str | None = None
    products: tuple[str, ...] = ()
    transaction_type: ActivityType | None = None
    amount: Money | None = None
    recipient: str | None = None
    sender: str | None = None
    category: TransactionCategory | None = None

    @property
    def is_spend(self) -> bool:
        """True when this entry represents money leaving the user."""
        return self.amount is not None and self.transaction_type in (ActivityType.PAID, ActivityType.SENT)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "time": self.time.isoformat(),
            "description": self.description,
            "products": list(self.products),
            "transaction_type": self.transaction_type.value if self.transaction_type else None,
            "amount": self.amount.to_dict() if self.amount else None,
            "recipient": self.recipient,
            "sender": self.sender,
            "category": self.category.value if self.category else None,
            "source_app": self.source_app.value,
        }


@dataclass
class ParsedData:
    """
    Unified aggregate of all ingested records.

    Adapters return a partial instance (only the collections they produce are
    populated); the merger folds partials into one. ``sources`` keeps set
    semantics in first-seen order.
    """

    transactions: list[Transaction] = field(default_factory=list)
    group_expenses: list[GroupExpense] = field(default_factory=list)
    cashback_rewards: list[CashbackReward] = field(default_factory=list)
    voucher_rewards: list[Voucher] = field(default_factory=list)
    activities: list[ActivityRecord] = field(default_factory=list)
    sources: list[SourceApp] = field(default_factory=list)

    def add_source(self, app: SourceApp) -> None:
        """Record a contributing app once."""
        if app not in self.sources:
            self.sources.append(app)

    def extend(self, other: "ParsedData") -> None:
        """Append every collection of another instance (append-only)."""
        self.transactions.extend(other.transactions)
        self.group_expenses.extend(other.group_expenses)
        self.cashback_rewards.extend(other.cashback_rewards)
        self.voucher_rewards.extend(other.voucher_rewards)
        self.activities.extend(other.activities)
        for app in other.sources:
            self.add_source(app)

    def counts(self) -> dict[str, int]:
        """Number of records in each collection."""
        return {
            "transactions": len(self.transactions),
            "group_expenses": len(self.group_expenses),
            "cashback_rewards": len(self.cashback_rewards),
            "voucher_rewards": len(self.voucher_rewards),
            "activities": len(self.activities),
        }

    @property
    def is_empty(self) -> bool:
        return not any(self.counts().values())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "group_expenses": [g.to_dict() for g in self.group_expenses],
            "cashback_rewards": [c.to_dict() for c in self.cashback_rewards],
            "voucher_rewards": [v.to_dict() for v in self.voucher_rewards],
            "activities": [a.to_dict() for a in self.activities],
            "sources": [s.value for s in self.sources],
        }


@dataclass(frozen=True)
class RawPayloads:
    """
    Raw text payloads extracted from one export, keyed by logical role.

    Any role may be absent. statement_html carries a whole-statement HTML
    export (BHIM) rather than one of the Takeout roles.
    """

    transactions: str | None = None
    group_expenses: str | None = None
    cashback_rewards: str | None = None
    voucher_rewards: str | None = None
    activity_log: str | None = None
    statement_html: str | None = None

    ROLE_NAMES = (
        "transactions",
        "group_expenses",
        "cashback_rewards",
        "voucher_rewards",
        "activity_log",
        "statement_html",
    )

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> "RawPayloads":
        """
        Build from a role→text mapping.

        Raises:
            ValueError: If a key is not a known role or a value is not text
        """
        unknown = set(mapping) - set(cls.ROLE_NAMES)
        if unknown:
            raise ValueError(f"Unknown payload roles: {sorted(unknown)}")
        for role, text in mapping.items():
            if not isinstance(text, str):
                raise ValueError(f"Payload for role {role!r} must be text, got {type(text).__name__}")
        return cls(**mapping)

    def present_roles(self) -> list[str]:
        """Roles that carry a payload, in declaration order."""
        return [role for role in self.ROLE_NAMES if getattr(self, role) is not None]

    @property
    def is_empty(self) -> bool:
        return not self.present_roles()

    def to_dict(self) -> dict[str, str]:
        return {role: getattr(self, role) for role in self.present_roles()}


@dataclass(frozen=True)
class ExportFile:
    """An uploaded export file held in memory."""

    name: str
    data: bytes

    @classmethod
    def from_path(cls, path: str | Path) -> "ExportFile":
        """Read a file from disk; read errors propagate."""
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def is_zip(self) -> bool:
        return self.suffix == ".zip"

    @property
    def is_html(self) -> bool:
        return self.suffix in (".html", ".htm")

    def text(self) -> str:
        """Decode as UTF-8, replacing undecodable bytes."""
        return self.data.decode("utf-8", errors="replace")


@dataclass
class AppRawData:
    """Raw payloads for one app as held by the caller's per-app registry."""

    app: SourceApp
    raw: RawPayloads
    uploaded_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class DetectionResult:
    """
    Outcome of asking one adapter whether it claims a file.

    Confidence is a static priority per match kind, not a probability.
    """

    can_handle: bool
    confidence: float = 0.0
    requires_password: bool = False

    @classmethod
    def no_match(cls) -> "DetectionResult":
        return cls(can_handle=False, confidence=0.0)


@dataclass
class ParserResult(Generic[T]):
    """Result of one format parser over one payload."""

    success: bool
    data: list[T] = field(default_factory=list)
    error: str | None = None
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass
class ParseResult:
    """Result of an adapter's parse over all of its payloads."""

    success: bool
    data: ParsedData | None = None
    error: str | None = None
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass
class MergeResult:
    """Result of merging several apps' payloads into one dataset."""

    success: bool
    data: ParsedData | None = None
    error: str | None = None
    warnings: list[ParseWarning] = field(default_factory=list)
    failed_apps: list[SourceApp] = field(default_factory=list)

    def unwrap(self) -> ParsedData:
        """
        Return the merged data.

        Raises:
            MergeError: If the merge failed
        """
        if not self.success or self.data is None:
            raise MergeError(self.error or "Merge failed")
        return self.data


@dataclass
class ProcessResult:
    """Result of detecting and extracting one uploaded file."""

    success: bool
    app: SourceApp | None = None
    raw_data: AppRawData | None = None
    error: str | None = None
    requires_password: bool = False
