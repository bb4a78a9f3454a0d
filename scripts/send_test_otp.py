"""Post one verification code through a running gateway.

Useful for checking provider credentials end to end after a deploy.
"""

import argparse
import json
import secrets

import httpx


def main() -> None:
    """Parse CLI args and send one OTP email."""

    parser = argparse.ArgumentParser(description="Send a test verification code.")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--email", required=True)
    parser.add_argument("--service-id", required=True)
    parser.add_argument("--template-id", required=True)
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--provider", default=None, help="relay or direct_mail; gateway default when omitted")
    args = parser.parse_args()

    payload = {
        "recipientEmail": args.email,
        "code": f"{secrets.randbelow(1_000_000):06d}",
        "serviceIdentifier": args.service_id,
        "templateIdentifier": args.template_id,
        "accountIdentifier": args.user_id,
    }
    params = {"provider": args.provider} if args.provider else None
    resp = httpx.post(f"{args.base_url}/send-email", json=payload, params=params, timeout=30.0)
    print(f"status={resp.status_code}")
    print(json.dumps(resp.json(), indent=2))
    if resp.status_code >= 400:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
