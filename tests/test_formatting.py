"""Tests for command output formatting."""

import json

from bitso_funds.schemas import Funding, ListResponse, Withdrawal
from bitso_funds.services.bitso.formatting import (
    format_funding,
    format_funding_list,
    format_withdrawal,
    format_withdrawal_list,
)
from tests.conftest import make_funding, make_withdrawal


class TestLists:
    def test_withdrawal_list_json(self):
        response = ListResponse[Withdrawal].model_validate(
            {"success": True, "payload": [make_withdrawal("w1", network="tron")]}
        )

        data = json.loads(format_withdrawal_list(response))

        assert data["success"] is True
        assert data["count"] == 1
        assert data["withdrawals"][0]["wid"] == "w1"
        assert data["withdrawals"][0]["network"] == "tron"
        assert data["withdrawals"][0]["origin_id"] is None

    def test_withdrawal_list_without_network_fields(self):
        response = ListResponse[Withdrawal].model_validate(
            {"success": True, "payload": [make_withdrawal("w1")]}
        )

        data = json.loads(format_withdrawal_list(response, include_network=False))

        assert "network" not in data["withdrawals"][0]

    def test_empty_and_failed_lists(self):
        empty = ListResponse[Funding].model_validate({"success": True, "payload": []})
        failed = ListResponse[Funding].model_validate({"success": False})

        assert format_funding_list(empty) == "No fundings found with the specified criteria."
        assert format_funding_list(failed) == "No fundings found with the specified criteria."

    def test_funding_list_includes_details(self):
        response = ListResponse[Funding].model_validate(
            {"success": True, "payload": [make_funding("f1", details={"sender": "x"})]}
        )

        data = json.loads(format_funding_list(response))

        assert data["fundings"][0]["details"] == {"sender": "x"}
        assert data["fundings"][0]["amount"] == "29.99"


class TestDetails:
    def test_withdrawal_details_skip_unset_fields(self):
        text = format_withdrawal(Withdrawal.model_validate(make_withdrawal("w1", asset="usdt")))

        assert text.startswith("Withdrawal Details:\nID: w1\n")
        assert "Asset: usdt" in text
        assert "Origin ID" not in text
        assert "Network" not in text

    def test_funding_details(self):
        text = format_funding(Funding.model_validate(make_funding("f1")))

        assert "Funding Details:" in text
        assert "Amount: 29.99" in text
        assert "Created: 2025-08-12T01:54:02+00:00" in text
