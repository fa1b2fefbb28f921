"""Allow ``python -m openapi_to_graphql_generator``."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
