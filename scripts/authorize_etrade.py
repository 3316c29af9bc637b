#!/usr/bin/env python3
"""
E*TRADE OAuth Authorization Script

This script runs the out-of-band OAuth 1.0a authorization flow with
E*TRADE and checks that the resulting access token works:

1. Obtains a request token with your consumer key/secret
2. Opens the E*TRADE authorization page in your browser
3. Reads the verifier code E*TRADE shows after you approve access
4. Exchanges it for an access token
5. Lists your accounts as a connectivity check
6. Revokes the access token and ends the session, unless --keep-token
   is given, in which case the access token and secret are printed so
   you can store them and resume later with OAuthCoordinator.resume()

Usage:
    python scripts/authorize_etrade.py

    # Print the authorization URL instead of opening a browser
    python scripts/authorize_etrade.py --no-browser

    # Keep the access token instead of revoking it
    python scripts/authorize_etrade.py --keep-token

Prerequisites:
    - Environment variables must be set:
        export ETRADE_CONSUMER_KEY="your_consumer_key"
        export ETRADE_CONSUMER_SECRET="your_consumer_secret"
    - Optional:
        export ETRADE_ENVIRONMENT="sandbox"   # or "production"
        export ETRADE_CALLBACK="oob"
"""

import argparse
import logging
import sys
import webbrowser
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.etrade.client import ETradeClient
from src.etrade.exceptions import ETradeAPIError
from src.oauth1.coordinator import OAuthCoordinator
from src.oauth1.credentials import Credential
from src.oauth1.exceptions import ConfigurationError, HandshakeRejectedError

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def end_session(coordinator: OAuthCoordinator, keep_token: bool = False) -> None:
    """
    Revoke the access token, or print it for storage.

    Args:
        coordinator: Coordinator whose session is ending
        keep_token: Print the access token instead of revoking it
    """
    if keep_token and coordinator.is_authorized():
        token = coordinator.state.token
        print()
        print("Access token kept. Store these values to resume the session:")
        print(f"  ETRADE_ACCESS_TOKEN={token.value}")
        print(f"  ETRADE_ACCESS_TOKEN_SECRET={token.secret}")
        print()
        logger.info("Access token not revoked (--keep-token)")
        return

    coordinator.revoke()


def authorize(
    open_browser: bool = True, list_accounts: bool = True, keep_token: bool = False
) -> int:
    """
    Run the authorization flow.

    Args:
        open_browser: Whether to automatically open browser
        list_accounts: Whether to list accounts once authorized
        keep_token: Print the access token instead of revoking it

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        credential = Credential.from_env()
        coordinator = OAuthCoordinator()
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 1

    try:
        logger.info(f"Starting OAuth authorization flow ({coordinator.config.environment})...")
        request_token, url = coordinator.obtain_request_token(credential)

        print()
        print("Open this URL, log in to E*TRADE and accept the request:")
        print(f"  {url}")
        print()
        if open_browser:
            webbrowser.open(url)

        verifier = input("Enter the verification code shown by E*TRADE: ")
        coordinator.exchange_verifier(request_token, verifier)
        logger.info("✅ Authorization successful!")

        if list_accounts:
            accounts = ETradeClient(coordinator).list_accounts()
            account_list = (
                accounts.get("AccountListResponse", {}).get("Accounts", {}).get("Account", [])
            )
            logger.info(f"✅ API reachable, {len(account_list)} account(s) found")
            for account in account_list:
                logger.info(
                    f"   {account.get('accountDesc', 'Account')} "
                    f"({account.get('accountType', 'unknown')})"
                )

        return 0

    except HandshakeRejectedError as e:
        logger.error(f"❌ Authorization failed: {e}")
        if e.server_message:
            logger.error(f"   E*TRADE said: {e.server_message}")
        return 1
    except ETradeAPIError as e:
        logger.error(f"❌ API check failed: {e}")
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.warning("Authorization cancelled")
        return 1
    finally:
        end_session(coordinator, keep_token)


def main() -> int:
    parser = argparse.ArgumentParser(description="Authorize access to the E*TRADE API")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the authorization URL without opening a browser",
    )
    parser.add_argument(
        "--skip-accounts",
        action="store_true",
        help="Do not list accounts after authorizing",
    )
    parser.add_argument(
        "--keep-token",
        action="store_true",
        help="Print the access token for storage instead of revoking it",
    )
    args = parser.parse_args()

    return authorize(
        open_browser=not args.no_browser,
        list_accounts=not args.skip_accounts,
        keep_token=args.keep_token,
    )


if __name__ == "__main__":
    sys.exit(main())
