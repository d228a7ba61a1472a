"""Allow ``python -m osmclient``."""

from osmclient.app import main

main()
