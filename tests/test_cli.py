import json

import pytest

from obiex import __main__ as cli
from obiex.errors import ServerError
from obiex.models import Currency


@pytest.fixture
def fake_client(mocker):
    client = mocker.MagicMock()
    client.__aenter__ = mocker.AsyncMock(return_value=client)
    client.__aexit__ = mocker.AsyncMock(return_value=None)
    mocker.patch.object(cli.ObiexClient, "from_env", return_value=client)
    return client


@pytest.mark.asyncio
async def test_currency_command_prints_json(fake_client, mocker, capsys):
    currency = Currency("cur-btc", "Bitcoin", "BTC", True, True, True, 0.0001, 0, 0, 8)
    fake_client.get_currency_by_code = mocker.AsyncMock(return_value=currency)

    code = await cli.main(["currency", "BTC"])

    assert code == 0
    fake_client.get_currency_by_code.assert_awaited_once_with("BTC")
    assert json.loads(capsys.readouterr().out)["code"] == "BTC"


@pytest.mark.asyncio
async def test_quote_with_accept_trades(fake_client, mocker):
    fake_client.trade = mocker.AsyncMock(return_value={"id": "q-1"})

    code = await cli.main(["--sandbox", "quote", "BTC", "USDT", "sell", "0.5", "--accept"])

    assert code == 0
    fake_client.trade.assert_awaited_once_with("BTC", "USDT", "SELL", 0.5)
    cli.ObiexClient.from_env.assert_called_once_with(sandbox_mode=True)


@pytest.mark.asyncio
async def test_server_error_exits_non_zero(fake_client, mocker):
    fake_client.get_banks = mocker.AsyncMock(side_effect=ServerError("unauthorized", {"message": "unauthorized"}, 401))

    assert await cli.main(["banks"]) == 1
