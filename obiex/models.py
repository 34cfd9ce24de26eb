"""Typed records for Obiex API payloads.

Each ``*_from_json`` transform reads an explicit list of fields from the raw
JSON object. Fields the API adds beyond that list are dropped on purpose.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class TradeSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TransactionCategory(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    SWAP = "SWAP"
    TRANSFER = "TRANSFER"


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as returned by the API (``Z`` suffix allowed)."""
    if value is None or isinstance(value, datetime):
        return value
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Currency:
    id: str
    name: str
    code: str
    receivable: bool
    withdrawable: bool
    transferrable: bool
    minimum_deposit: float
    # Deposit limits only apply when above 0.
    maximum_deposit: Optional[float]
    maximum_daily_deposit: Optional[float]
    maximum_decimal_places: int


def currency_from_json(raw: Dict[str, Any]) -> Currency:
    return Currency(
        id=raw["id"],
        name=raw.get("name"),
        code=raw["code"],
        receivable=raw.get("receivable"),
        withdrawable=raw.get("withdrawable"),
        transferrable=raw.get("transferrable"),
        minimum_deposit=raw.get("minimumDeposit"),
        maximum_deposit=raw.get("maximumDeposit"),
        maximum_daily_deposit=raw.get("maximumDailyDepositLimit"),
        maximum_decimal_places=raw.get("maximumDecimalPlaces"),
    )


@dataclass(frozen=True)
class TradePair:
    id: str
    source: str
    target: str
    is_buyable: bool
    is_sellable: bool


def trade_pair_from_json(raw: Dict[str, Any]) -> TradePair:
    """Flatten a pair, keeping only the currency codes of both legs."""
    return TradePair(
        id=raw["id"],
        source=raw["source"]["code"],
        target=raw["target"]["code"],
        is_buyable=raw.get("isBuyable"),
        is_sellable=raw.get("isSellable"),
    )


@dataclass(frozen=True)
class Quote:
    id: str
    rate: float
    side: str
    amount: float
    expiry_date: Optional[datetime]
    amount_received: float


def quote_from_json(raw: Dict[str, Any]) -> Quote:
    return Quote(
        id=raw["id"],
        rate=raw.get("rate"),
        side=raw.get("side"),
        amount=raw.get("amount"),
        expiry_date=parse_datetime(raw.get("expiryDate")),
        amount_received=raw.get("amountReceived"),
    )


@dataclass(frozen=True)
class DepositAddress:
    address: str
    memo: Optional[str]
    network: str
    identifier: str


def deposit_address_from_json(raw: Dict[str, Any]) -> DepositAddress:
    return DepositAddress(
        address=raw["value"],
        memo=raw.get("memo"),
        network=raw.get("network"),
        identifier=raw.get("purpose"),
    )


@dataclass(frozen=True)
class Network:
    id: str
    name: str
    code: str
    memo_regex: Optional[str]
    address_regex: Optional[str]
    minimum_confirmations: int


def network_from_json(raw: Dict[str, Any]) -> Network:
    return Network(
        id=raw["id"],
        name=raw.get("name"),
        code=raw.get("code"),
        memo_regex=raw.get("memoRegex"),
        address_regex=raw.get("addressRegex"),
        minimum_confirmations=raw.get("minimumConfirmations"),
    )


@dataclass(frozen=True)
class ActiveNetwork:
    network_name: str
    network_code: str
    minimum_deposit: float
    deposit_fee: float
    minimum_withdrawal: float
    withdrawal_fee: float
    maximum_decimal_places: int
    receive_fee_type: str  # PERCENTAGE or FLAT
    withdrawal_fee_type: str


@dataclass(frozen=True)
class ActiveNetworkCurrency:
    currency_name: str
    networks: List[ActiveNetwork]


def active_network_from_json(raw: Dict[str, Any]) -> ActiveNetwork:
    return ActiveNetwork(
        network_name=raw.get("networkName"),
        network_code=raw.get("networkCode"),
        minimum_deposit=raw.get("minimumDeposit"),
        deposit_fee=raw.get("depositFee"),
        minimum_withdrawal=raw.get("minimumWithdrawal"),
        withdrawal_fee=raw.get("withdrawalFee"),
        maximum_decimal_places=raw.get("maximumDecimalPlaces"),
        receive_fee_type=raw.get("receiveFeeType"),
        withdrawal_fee_type=raw.get("withdrawalFeeType"),
    )


def active_networks_from_json(raw: Dict[str, Any]) -> Dict[str, ActiveNetworkCurrency]:
    """Map one ``{currencyCode: {currencyName, networks}}`` object."""
    return {
        code: ActiveNetworkCurrency(
            currency_name=entry.get("currencyName"),
            networks=[active_network_from_json(n) for n in entry.get("networks", [])],
        )
        for code, entry in raw.items()
    }


@dataclass(frozen=True)
class Bank:
    name: str
    uuid: str
    inter_institution_code: str
    sort_code: str


def bank_from_json(raw: Dict[str, Any]) -> Bank:
    return Bank(
        name=raw.get("name"),
        uuid=raw["uuid"],
        inter_institution_code=raw.get("interInstitutionCode"),
        sort_code=raw.get("sortCode"),
    )


@dataclass(frozen=True)
class FiatMerchant:
    id: str
    code: str
    active: bool
    deposit_fee: float
    payout_fee: float
    user_id: str
    total_requests: int
    completed_requests: int


def fiat_merchant_from_json(raw: Dict[str, Any]) -> FiatMerchant:
    return FiatMerchant(
        id=raw["id"],
        code=raw.get("code"),
        active=raw.get("active"),
        deposit_fee=raw.get("depositFee"),
        payout_fee=raw.get("payoutFee"),
        user_id=raw.get("userId"),
        total_requests=raw.get("totalRequests"),
        completed_requests=raw.get("completedRequests"),
    )


@dataclass(frozen=True)
class FiatBankAccount:
    bank_id: str
    account_number: str
    account_name: str


def fiat_bank_account_from_json(raw: Dict[str, Any]) -> FiatBankAccount:
    return FiatBankAccount(
        bank_id=raw.get("bankId"),
        account_number=raw.get("accountNumber"),
        account_name=raw.get("accountName"),
    )


@dataclass(frozen=True)
class NairaPayment:
    reference: str
    customer_reference: Optional[str]
    merchant_id: str
    merchant_account_number: str
    merchant_account_name: str
    amount: float
    fee: float
    type: str  # DEPOSIT or WITHDRAW
    status: str  # FAILED, PENDING, PROCESSING, CANCELLED or COMPLETED
    created_at: Optional[datetime]
    recipient_bank_account: Optional[FiatBankAccount]


def naira_payment_from_json(raw: Dict[str, Any]) -> NairaPayment:
    recipient = raw.get("recipientBankAccount")
    return NairaPayment(
        reference=raw["reference"],
        customer_reference=raw.get("customerReference"),
        merchant_id=raw.get("merchantId"),
        merchant_account_number=raw.get("merchantAccountNumber"),
        merchant_account_name=raw.get("merchantAccountName"),
        amount=raw.get("amount"),
        fee=raw.get("fee"),
        type=raw.get("type"),
        status=raw.get("status"),
        created_at=parse_datetime(raw.get("createdAt")),
        recipient_bank_account=fiat_bank_account_from_json(recipient) if recipient else None,
    )


@dataclass(frozen=True)
class Wallet:
    id: str
    active: bool
    available_balance: float
    pending_balance: float
    pending_swap_balance: float
    locked_balance: float
    total_swappable_balance: float
    total_pending_balance: float
    user_id: str
    currency: Currency
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


def wallet_from_json(raw: Dict[str, Any]) -> Wallet:
    return Wallet(
        id=raw["id"],
        active=raw.get("active"),
        available_balance=raw.get("availableBalance"),
        pending_balance=raw.get("pendingBalance"),
        pending_swap_balance=raw.get("pendingSwapBalance"),
        locked_balance=raw.get("lockedBalance"),
        total_swappable_balance=raw.get("totalSwappableBalance"),
        total_pending_balance=raw.get("totalPendingBalance"),
        user_id=raw.get("userId"),
        currency=currency_from_json(raw["currency"]),
        created_at=parse_datetime(raw.get("createdAt")),
        updated_at=parse_datetime(raw.get("updatedAt")),
    )


@dataclass(frozen=True)
class PageMeta:
    per_page: int
    current_page: int
    total_pages: int
    count: int
    total: int


@dataclass(frozen=True)
class Page:
    """One page of a paginated listing. Items are passed through untyped."""

    items: List[Dict[str, Any]]
    meta: Optional[PageMeta]


def page_from_json(envelope: Dict[str, Any]) -> Page:
    meta = envelope.get("meta")
    return Page(
        items=envelope.get("data") or [],
        meta=PageMeta(
            per_page=meta.get("perPage"),
            current_page=meta.get("currentPage"),
            total_pages=meta.get("totalPages"),
            count=meta.get("count"),
            total=meta.get("total"),
        )
        if meta
        else None,
    )


@dataclass(frozen=True)
class CryptoAccountPayout:
    address: str
    network: str
    memo: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        payload = {"address": self.address, "network": self.network}
        if self.memo is not None:
            payload["memo"] = self.memo
        return payload


@dataclass(frozen=True)
class BankAccountPayout:
    account_number: str
    account_name: str
    bank_name: str
    bank_code: str
    merchant_code: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "accountNumber": self.account_number,
            "accountName": self.account_name,
            "bankName": self.bank_name,
            "bankCode": self.bank_code,
            "merchantCode": self.merchant_code,
        }
