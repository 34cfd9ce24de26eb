"""Async client for the Obiex REST API."""
from __future__ import annotations

from typing import Any

import aiohttp

from . import config
from .base import BaseRESTClient
from .cache import TTLCache
from .errors import CurrencyNotFoundError
from .models import (
    ActiveNetworkCurrency,
    Bank,
    BankAccountPayout,
    CryptoAccountPayout,
    Currency,
    DepositAddress,
    FiatBankAccount,
    FiatMerchant,
    NairaPayment,
    Network,
    Page,
    Quote,
    TradePair,
    TradeSide,
    TransactionCategory,
    Wallet,
    active_networks_from_json,
    bank_from_json,
    currency_from_json,
    deposit_address_from_json,
    fiat_bank_account_from_json,
    fiat_merchant_from_json,
    naira_payment_from_json,
    network_from_json,
    page_from_json,
    quote_from_json,
    trade_pair_from_json,
    wallet_from_json,
)
from .signing import Credentials


def _as_list(data: Any) -> list:
    if data is None:
        return []
    return data if isinstance(data, list) else [data]


class ObiexClient(BaseRESTClient):
    """Client for the Obiex broker API.

    Each instance owns its own currency cache; nothing is shared between
    clients.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        sandbox_mode: bool = False,
        session: aiohttp.ClientSession | None = None,
        proxy: str | None = None,
    ) -> None:
        super().__init__(Credentials(api_key, api_secret), sandbox_mode, session=session, proxy=proxy)
        self.cache = TTLCache()

    @classmethod
    def from_env(cls, session: aiohttp.ClientSession | None = None, sandbox_mode: bool | None = None) -> "ObiexClient":
        """Build a client from OBIEX_API_KEY, OBIEX_API_SECRET and OBIEX_SANDBOX_MODE."""
        credentials = config.credentials_from_env()
        if sandbox_mode is None:
            sandbox_mode = config.sandbox_mode_from_env()
        return cls(credentials.api_key, credentials.api_secret, sandbox_mode, session=session)

    # --- Addresses ---

    async def get_deposit_address(self, currency: str, network: str, identifier: str) -> DepositAddress:
        """Generate a deposit address for a currency.

        Re-using the same identifier always returns the same address, so it can
        be tied to one of your users.
        """
        data = await self._get_data(
            "POST",
            "/v1/addresses/broker",
            body={"currency": currency, "network": network, "purpose": identifier},
        )
        return deposit_address_from_json(data)

    # --- Trading ---

    async def get_trade_pairs(self) -> list[TradePair]:
        data = await self._get_data("GET", "/v1/trades/pairs")
        return [trade_pair_from_json(x) for x in data or []]

    async def get_trade_pairs_by_currency(self, currency_id: str) -> list[TradePair]:
        data = await self._get_data("GET", f"/v1/currencies/{currency_id}/pairs")
        return [trade_pair_from_json(x) for x in data or []]

    async def create_quote(self, source: str, target: str, side: TradeSide | str, amount: float) -> Quote:
        """Create a quote for a trade.

        ``source`` and ``target`` are the left and right hand side of the pair,
        e.g. BTC and USDT for BTC/USDT. BUY trades USDT -> BTC, SELL trades
        BTC -> USDT.
        """
        source_currency = await self._require_currency(source)
        target_currency = await self._require_currency(target)
        data = await self._get_data(
            "POST",
            "/v1/trades/quote",
            body={
                "sourceId": source_currency.id,
                "targetId": target_currency.id,
                "side": TradeSide(side).value,
                "amount": amount,
            },
        )
        return quote_from_json(data)

    async def accept_quote(self, quote_id: str) -> bool:
        await self._request("POST", f"/v1/trades/quote/{quote_id}")
        return True

    async def trade(self, source: str, target: str, side: TradeSide | str, amount: float) -> Quote:
        """Create a quote and accept it immediately, without checking the rate."""
        quote = await self.create_quote(source, target, side, amount)
        await self.accept_quote(quote.id)
        return quote

    async def get_trade_history(self, page: int = 1, page_size: int = 30) -> Page:
        envelope = await self._request("GET", "/v1/trades/me", params={"page": page, "pageSize": page_size})
        return page_from_json(envelope)

    # --- Withdrawals ---

    async def withdraw_crypto(self, currency_code: str, amount: float, wallet: CryptoAccountPayout) -> dict:
        return await self._get_data(
            "POST",
            "/v1/wallets/ext/debit/crypto",
            body={"amount": amount, "currency": currency_code, "destination": wallet.to_json()},
        )

    async def withdraw_naira(self, amount: float, account: BankAccountPayout) -> dict:
        return await self._get_data(
            "POST",
            "/v1/wallets/ext/debit/fiat",
            body={"amount": amount, "currency": "NGNX", "destination": account.to_json()},
        )

    # --- Currencies ---

    async def get_currencies(self) -> list[Currency]:
        """Return all currencies, cached for 24 hours."""
        return await self.cache.get_or_set(
            config.CURRENCIES_CACHE_KEY,
            self._fetch_currencies,
            config.CURRENCIES_CACHE_TTL,
        )

    async def _fetch_currencies(self) -> list[Currency]:
        data = await self._get_data("GET", "/v1/currencies")
        return [currency_from_json(x) for x in data or []]

    async def get_currency_by_code(self, code: str) -> Currency | None:
        for currency in await self.get_currencies():
            if currency.code == code:
                return currency
        return None

    async def _require_currency(self, code: str) -> Currency:
        currency = await self.get_currency_by_code(code)
        if currency is None:
            raise CurrencyNotFoundError(code)
        return currency

    async def get_networks(self, currency_code: str) -> list[Network]:
        currency = await self._require_currency(currency_code)
        data = await self._get_data("GET", f"/v1/currencies/{currency.id}/networks")
        return [network_from_json(x) for x in data or []]

    async def get_active_networks(self) -> list[dict[str, ActiveNetworkCurrency]]:
        data = await self._get_data("GET", "/v1/currencies/networks/active")
        return [active_networks_from_json(x) for x in _as_list(data)]

    # --- Wallets & transactions ---

    async def get_or_create_wallet(self, currency_code: str) -> list[Wallet]:
        data = await self._get_data("GET", f"/v1/wallets/{currency_code}")
        return [wallet_from_json(x) for x in _as_list(data)]

    async def get_transaction_history(
        self,
        page: int = 1,
        page_size: int = 30,
        category: TransactionCategory | None = None,
    ) -> Page:
        envelope = await self._request(
            "GET",
            "/v1/transactions/me",
            params={"page": page, "pageSize": page_size, "category": category},
        )
        return page_from_json(envelope)

    async def get_transaction_by_id(self, transaction_id: str) -> dict:
        return await self._get_data("GET", f"/v1/transactions/{transaction_id}")

    # --- Naira payments ---

    async def get_banks(self) -> list[Bank]:
        data = await self._get_data("GET", "/v1/ngn-payments/banks")
        return [bank_from_json(x) for x in data or []]

    async def get_naira_merchants(self, page: int = 1, page_size: int = 30) -> list[FiatMerchant]:
        data = await self._get_data(
            "GET", "/v1/ngn-payments/merchants", params={"page": page, "pageSize": page_size}
        )
        return [fiat_merchant_from_json(x) for x in data or []]

    async def request_naira_deposit_bank_account(self, merchant_code: str, amount: float) -> NairaPayment:
        data = await self._get_data(
            "POST",
            "/v1/ngn-payments/deposits",
            body={"merchantCode": merchant_code, "amount": amount},
        )
        return naira_payment_from_json(data)

    async def verify_naira_deposit(self, reference: str) -> dict:
        return await self._get_data("PUT", f"/v1/ngn-payments/deposits/{reference}")

    async def verify_naira_withdrawal(self, reference: str) -> dict:
        return await self._get_data("PUT", f"/v1/ngn-payments/withdrawals/{reference}")

    async def resolve_naira_bank_account(self, bank_id: str, account_number: str) -> list[FiatBankAccount]:
        data = await self._get_data(
            "GET",
            "/v1/ngn-payments/accounts/resolve",
            params={"bankId": bank_id, "accountNumber": account_number},
        )
        return [fiat_bank_account_from_json(x) for x in _as_list(data)]
