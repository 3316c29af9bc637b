"""
E*TRADE API endpoint definitions.

Paths are relative to the environment's API host (sandbox or production).
The ".json" suffix selects JSON responses instead of XML.

Documentation: https://apisb.etrade.com/docs/api/account/api-account-v1.html
"""

# Account Endpoints
ACCOUNTS_LIST = "/v1/accounts/list.json"
ACCOUNT_BALANCE = "/v1/accounts/{accountIdKey}/balance.json"
ACCOUNT_TRANSACTIONS = "/v1/accounts/{accountIdKey}/transactions.json"
ACCOUNT_PORTFOLIO = "/v1/accounts/{accountIdKey}/portfolio.json"

# Transaction date filters use MMDDYYYY
TRANSACTION_DATE_FORMAT = "%m%d%Y"
