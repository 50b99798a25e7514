"""Text renderings of withdrawals and fundings for command output."""

import json

from bitso_funds.schemas import Funding, ListResponse, Withdrawal


def _summary(withdrawal: Withdrawal, include_network: bool) -> dict:
    data = {
        "wid": withdrawal.wid,
        "status": withdrawal.status,
        "currency": withdrawal.currency,
        "amount": withdrawal.amount,
        "method": withdrawal.method,
        "created_at": withdrawal.created_at.isoformat(),
        "origin_id": withdrawal.origin_id,
    }
    if include_network:
        data["asset"] = withdrawal.asset
        data["network"] = withdrawal.network
        data["protocol"] = withdrawal.protocol
    return data


def format_withdrawal_list(
    response: ListResponse[Withdrawal],
    empty_message: str = "No withdrawals found with the specified criteria.",
    include_network: bool = True,
) -> str:
    if not response.ok or not response.items:
        return empty_message
    return json.dumps(
        {
            "success": True,
            "count": len(response.items),
            "withdrawals": [_summary(w, include_network) for w in response.items],
        },
        indent=2,
    )


def format_funding_list(
    response: ListResponse[Funding],
    empty_message: str = "No fundings found with the specified criteria.",
) -> str:
    if not response.ok or not response.items:
        return empty_message
    return json.dumps(
        {
            "success": True,
            "count": len(response.items),
            "fundings": [
                {
                    "fid": f.fid,
                    "status": f.status,
                    "currency": f.currency,
                    "amount": f.amount,
                    "method": f.method,
                    "created_at": f.created_at.isoformat(),
                    "details": f.details,
                }
                for f in response.items
            ],
        },
        indent=2,
    )


def format_withdrawal(withdrawal: Withdrawal) -> str:
    """Multi-line detail view; optional fields are omitted when unset."""
    lines = [
        "Withdrawal Details:",
        f"ID: {withdrawal.wid}",
        f"Status: {withdrawal.status}",
        f"Currency: {withdrawal.currency}",
        f"Amount: {withdrawal.amount}",
        f"Method: {withdrawal.method}",
        f"Created: {withdrawal.created_at.isoformat()}",
    ]
    for label, value in (
        ("Origin ID", withdrawal.origin_id),
        ("Asset", withdrawal.asset),
        ("Network", withdrawal.network),
        ("Protocol", withdrawal.protocol),
    ):
        if value:
            lines.append(f"{label}: {value}")
    lines.append(f"Details: {json.dumps(withdrawal.details, indent=2)}")
    return "\n".join(lines)


def format_funding(funding: Funding) -> str:
    return "\n".join(
        [
            "Funding Details:",
            f"ID: {funding.fid}",
            f"Status: {funding.status}",
            f"Currency: {funding.currency}",
            f"Amount: {funding.amount}",
            f"Method: {funding.method}",
            f"Created: {funding.created_at.isoformat()}",
            f"Details: {json.dumps(funding.details, indent=2)}",
        ]
    )
