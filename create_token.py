"""Print a bearer token for an existing user, signed with SECRET_KEY.

Usage:
    SECRET_KEY=... python create_token.py alpha@example.com [lifetime_days]
"""

import sys

from task_tracker_api.app.core.security import create_access_token

if len(sys.argv) < 2:
    sys.exit("usage: create_token.py EMAIL [LIFETIME_DAYS]")
days = int(sys.argv[2]) if len(sys.argv) > 2 else 365
token = create_access_token({"sub": sys.argv[1]}, expires_delta=days * 24 * 60 * 60)
print(token)
