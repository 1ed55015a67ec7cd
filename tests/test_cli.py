from __future__ import annotations

import builtins

from cli import main as cli_main
from core.config import PriceServiceConfig

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"


def run_cli(monkeypatch, fake_chain, inputs):
    seq = iter(inputs)
    monkeypatch.setattr(builtins, "input", lambda _: next(seq))
    cfg = PriceServiceConfig(rpc_url="http://localhost:8545", gas_refresh_interval=60)
    cli_main.main(cfg, chain_client=fake_chain)


def test_cli_main_menu_smoke(monkeypatch, fake_chain):
    run_cli(monkeypatch, fake_chain, ["0"])


def test_cli_gas_price(monkeypatch, fake_chain, capsys):
    run_cli(monkeypatch, fake_chain, ["1", "0"])
    out = capsys.readouterr().out
    assert "Gas price: 30000000000 wei (30.000 gwei)" in out


def test_cli_swap_estimate(monkeypatch, fake_chain, capsys):
    run_cli(monkeypatch, fake_chain, ["2", WETH, USDC, "1", "0"])
    out = capsys.readouterr().out
    assert "Estimated output:" in out


def test_cli_swap_estimate_error(monkeypatch, fake_chain, capsys):
    run_cli(monkeypatch, fake_chain, ["2", "nope", USDC, "1", "0"])
    out = capsys.readouterr().out
    assert "Error: Invalid from token address" in out
    assert fake_chain.calls["resolve_pair"] == 0


def test_cli_missing_env_exits(monkeypatch):
    monkeypatch.delenv("ETHEREUM_RPC_URL", raising=False)
    try:
        cli_main.main()
    except SystemExit as e:
        assert e.code == 1
    else:
        raise AssertionError("expected SystemExit")
