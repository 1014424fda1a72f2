#!/usr/bin/env python3
"""Deploy the blockchain supply-chain application.

Reads AZURE_SUBSCRIPTION_ID, RESOURCE_GROUP_NAME and DEPLOYMENT_NAME from the
environment (or a .env file) unless given on the command line. See
``python deploy.py --help`` for the remaining options.
"""
import sys

from supplychain_deploy.cli import main


if __name__ == "__main__":
    sys.exit(main())
