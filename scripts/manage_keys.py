"""
Key management script - Command line utility for API keys and usage logs

Usage:
    python scripts/manage_keys.py create <name> [expires_days]
    python scripts/manage_keys.py list
    python scripts/manage_keys.py revoke <key_id>
    python scripts/manage_keys.py record <key_id> <input_tokens> <output_tokens> <cost> [model]
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.logging_config import setup_logging
from app.db import init_db
from app.services.api_key_service import create_api_key, list_api_keys, revoke_api_key
from app.models.usage import RecordUsageRequest
from app.services.usage_service import record_usage

# Configure logging
setup_logging()
import logging

logger = logging.getLogger(__name__)

USAGE = __doc__.split("Usage:", 1)[1].rstrip()


def _create(args):
    name = args[0]
    expires_days = int(args[1]) if len(args) > 1 else None
    key = create_api_key(name=name, expires_days=expires_days)
    print(f"✓ API key '{name}' created")
    print(f"  Key ID: {key['key_id']}")
    print(f"  Key: {key['key']}  (shown only once)")
    if key['expires_at']:
        print(f"  Expires: {key['expires_at']}")


def _list(args):
    for key in list_api_keys():
        state = "active" if key['is_active'] else "revoked"
        print(f"{key['id']:>5}  {key['name']:<30} {state:<8} created {key['created_at']}")


def _revoke(args):
    key_id = int(args[0])
    if not revoke_api_key(key_id):
        print(f"✗ API key {key_id} not found")
        sys.exit(1)
    print(f"✓ API key {key_id} revoked")


def _record(args):
    request = RecordUsageRequest(
        api_key_id=int(args[0]),
        input_tokens=int(args[1]),
        output_tokens=int(args[2]),
        total_cost=float(args[3]),
        actual_cost=float(args[3]),
        model=args[4] if len(args) > 4 else None,
    )
    log_id = record_usage(**request.model_dump())
    print(f"✓ Usage log {log_id} recorded for key {request.api_key_id}")


COMMANDS = {
    # name: (handler, minimum number of arguments)
    'create': (_create, 1),
    'list': (_list, 0),
    'revoke': (_revoke, 1),
    'record': (_record, 4),
}


def main():
    """Main function"""
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(f"Usage:{USAGE}")
        sys.exit(1)
    
    handler, min_args = COMMANDS[sys.argv[1]]
    args = sys.argv[2:]
    if len(args) < min_args:
        print(f"Usage:{USAGE}")
        sys.exit(1)
    
    try:
        init_db()
        handler(args)
    except ValueError as e:
        print(f"✗ Invalid argument: {str(e)}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command '{sys.argv[1]}' failed: {str(e)}")
        print(f"✗ Error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
