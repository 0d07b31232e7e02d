from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from storefront import main as main_module
from storefront.domain.checkout import CheckoutOutcome
from storefront.domain.errors import DatabaseConnectionError
from storefront.domain.model import Address, CheckoutState

if TYPE_CHECKING:
    from pathlib import Path

BODY = {
    "address": {"fullName": "Asha Verma", "city": "Bengaluru"},
    "items": [{"productId": "prod_kettle", "quantity": 1}],
}


@pytest.fixture(autouse=True)
def quiet_runtime(monkeypatch: pytest.MonkeyPatch) -> list[bool]:
    shutdowns: list[bool] = []

    async def fake_shutdown() -> None:
        shutdowns.append(True)

    monkeypatch.setattr(main_module, "shutdown", fake_shutdown)
    monkeypatch.setattr(main_module, "configure_logging", lambda **_: None)
    return shutdowns


def _body_file(tmp_path: Path, body: object) -> str:
    path = tmp_path / "body.json"
    path.write_text(json.dumps(body), encoding="utf-8")
    return str(path)


def test_checkout_prints_response(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    quiet_runtime: list[bool],
) -> None:
    captured: dict[str, object] = {}

    async def fake_submit(buyer_id: str, body: object) -> CheckoutOutcome:
        captured.update(buyer_id=buyer_id, body=body)
        return CheckoutOutcome(state=CheckoutState.COMPLETED, cart_cleared=True)

    monkeypatch.setattr(main_module, "submit_checkout", fake_submit)

    main_module.main(["checkout", "--buyer", "user_buyer", "--body", _body_file(tmp_path, BODY)])

    assert captured == {"buyer_id": "user_buyer", "body": BODY}
    assert json.loads(capsys.readouterr().out) == {"success": True}
    assert quiet_runtime == [True]


@pytest.mark.parametrize(
    ("state", "code"),
    [(CheckoutState.REJECTED, 2), (CheckoutState.FAILED, 1)],
)
def test_checkout_exit_codes(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, state: CheckoutState, code: int
) -> None:
    async def fake_submit(_buyer_id: str, _body: object) -> CheckoutOutcome:
        return CheckoutOutcome(state=state, message="Invalid data")

    monkeypatch.setattr(main_module, "submit_checkout", fake_submit)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["checkout", "--buyer", "user_buyer", "--body", _body_file(tmp_path, {})])

    assert excinfo.value.code == code


def test_checkout_with_invalid_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "body.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["checkout", "--buyer", "user_buyer", "--body", str(path)])

    assert excinfo.value.code == 2
    assert "Invalid JSON" in capsys.readouterr().err


def test_clear_cart_failure_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    quiet_runtime: list[bool],
) -> None:
    async def fake_clear(_buyer_id: str) -> bool:
        raise DatabaseConnectionError("Database connection failed: connection refused")

    monkeypatch.setattr(main_module, "clear_buyer_cart", fake_clear)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["clear-cart", "--buyer", "user_buyer"])

    assert excinfo.value.code == 1
    assert "connection refused" in capsys.readouterr().err
    assert quiet_runtime == [True]


def test_addresses_are_printed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    address = Address(
        id="addr_1",
        user_id="user_buyer",
        full_name="Asha Verma",
        phone_number="9876543210",
        pincode="560001",
        area="MG Road",
        city="Bengaluru",
        state="Karnataka",
    )

    async def fake_list(_buyer_id: str) -> list[Address]:
        return [address]

    monkeypatch.setattr(main_module, "list_buyer_addresses", fake_list)

    main_module.main(["addresses", "--buyer", "user_buyer"])

    output = json.loads(capsys.readouterr().out)
    assert output["success"] is True
    assert output["addresses"][0]["city"] == "Bengaluru"


def test_identity_event_reads_data(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    async def fake_handle(name: str, data: dict[str, object]) -> bool:
        captured.update(name=name, data=data)
        return True

    monkeypatch.setattr(main_module, "handle_identity_event", fake_handle)

    main_module.main(
        ["identity-event", "clerk/user.deleted", "--data", _body_file(tmp_path, {"id": "user_1"})]
    )

    assert captured == {"name": "clerk/user.deleted", "data": {"id": "user_1"}}


def test_unknown_identity_event_is_an_argument_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["identity-event", "clerk/session.created"])

    assert excinfo.value.code == 2
